from __future__ import annotations

import logging
import re
from pathlib import Path

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

_TOKENS = re.compile(
    r"""
      (?P<comment>--[^\n]*)
    | (?P<quoted>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|`[^`]*`)
    | (?P<end>;)
    | (?P<text>[^;'"`-]+|.)
    """,
    re.VERBOSE | re.DOTALL,
)

# schema.sql names its own database; the target one comes from settings
_DATABASE_SWITCH = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def split_statements(sql: str) -> list[str]:
    """Split on top-level ``;``. ``--`` comments are dropped; quoted ``;`` stays put."""
    statements: list[str] = []
    buf: list[str] = []
    for m in _TOKENS.finditer(sql):
        if m.lastgroup == "comment":
            continue
        if m.lastgroup == "end":
            statements.append("".join(buf).strip())
            buf = []
        else:
            buf.append(m.group())
    statements.append("".join(buf).strip())
    return [s for s in statements if s]


def schema_statements(schema_path: str | Path) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    return [s for s in split_statements(sql) if not _DATABASE_SWITCH.match(s)]


def ensure_database_exists(conn_factory: DatabaseConnection, database: str) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, database: str, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every ``CREATE ... IF NOT EXISTS`` of the schema file."""
    ensure_database_exists(conn_factory, database)

    statements = schema_statements(schema_path)
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)
    logger.info("Applied %d schema statements from %s to %s", len(statements), schema_path, database)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
