"""Workforce Attendance package.

This package is organized by feature modules (attendance, calendar, analytics,
reports, ...) with a thin Flask controller layer and service/repository layers.
"""
