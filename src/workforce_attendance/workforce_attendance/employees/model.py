from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as supplied by the roster.

    Note: This core never writes employees; the roster collaborator owns them.
    """

    employee_id: str
    name: str
    is_active: bool = True
