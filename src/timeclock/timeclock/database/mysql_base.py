from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateHandleError, StoreReadFailure, StoreWriteFailure
from .connection import DatabaseConnection

_logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


@contextmanager
def write_cursor(conn_factory: DatabaseConnection, *, action: str):
    """Cursor for mutating statements.

    Driver errors surface as StoreWriteFailure (duplicate keys as
    DuplicateHandleError); the transaction is rolled back by db_cursor.
    """

    try:
        with db_cursor(conn_factory) as pair:
            yield pair
    except mysql.connector.IntegrityError as e:
        if getattr(e, "errno", None) == errorcode.ER_DUP_ENTRY:
            raise DuplicateHandleError("Este CPF/Usuário já está cadastrado") from e
        _logger.exception("Store rejected %s", action)
        raise StoreWriteFailure(f"Falha ao gravar ({action})") from e
    except mysql.connector.Error as e:
        _logger.exception("Store rejected %s", action)
        raise StoreWriteFailure(f"Falha ao gravar ({action})") from e


@contextmanager
def read_cursor(conn_factory: DatabaseConnection, *, action: str):
    """Cursor for queries; driver errors surface as StoreReadFailure."""

    try:
        with db_cursor(conn_factory) as pair:
            yield pair
    except mysql.connector.Error as e:
        _logger.exception("Store query failed: %s", action)
        raise StoreReadFailure("Não foi possível carregar os registros. Tente novamente.") from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
