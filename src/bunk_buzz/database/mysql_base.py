from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """One connection per unit of work: commit when the block exits cleanly, roll back otherwise."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def to_db(value: Any) -> Any:
    """Python value -> something mysql-connector can bind (enums by value, bools as 0/1)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def build_update(table: str, changes: Dict[str, Any], where: Dict[str, Any]) -> tuple[str, Sequence[Any]]:
    """Build ``UPDATE table SET a=%s, b=%s WHERE x=%s AND y=%s``.

    Column names come from repository code, never from request payloads.
    """
    set_sql = ", ".join(f"{col}=%s" for col in changes)
    where_sql = " AND ".join(f"{col}=%s" for col in where)
    params = [to_db(v) for v in changes.values()] + [to_db(v) for v in where.values()]
    return f"UPDATE {table} SET {set_sql} WHERE {where_sql}", params


def update_row(
    conn_factory: DatabaseConnection,
    table: str,
    where: Dict[str, Any],
    changes: Dict[str, Any],
    *,
    allowed: Iterable[str],
) -> bool:
    """Apply a partial update restricted to ``allowed`` columns; ``False`` when no row matched."""
    if not changes:
        return False
    unknown = set(changes) - set(allowed)
    if unknown:
        raise KeyError(f"Not updatable: {sorted(unknown)}")

    sql, params = build_update(table, changes, where)
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, params)
        return cur.rowcount > 0
