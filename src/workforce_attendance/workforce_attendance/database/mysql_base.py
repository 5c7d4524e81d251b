from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import AttendanceTimeoutError, ConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TIMEOUT_ERRNOS = {
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.CR_SERVER_LOST,
}


@contextmanager
def translate_mysql_errors():
    """Map driver errors onto the domain taxonomy."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError("Attendance record already exists for this employee and date") from e
        raise
    except mysql.connector.Error as e:
        if e.errno in _TIMEOUT_ERRNOS:
            logger.warning("MySQL call timed out: %s", e)
            raise AttendanceTimeoutError(str(e)) from e
        raise


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    with translate_mysql_errors():
        conn = conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=dictionary)
            try:
                yield conn, cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
