from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..common.logging import get_logger
from ..core.constants import DEFAULT_RANDOM_EVENT_PROBABILITY, DEFAULT_SCORE_RULES
from ..core.enums import SettingKey
from .connection import DBConfig

log = get_logger(__name__)

# Shipped as package data next to this module.
SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")

DEFAULT_SETTINGS = (
    (SettingKey.SCORE_RULES.value, json.dumps(DEFAULT_SCORE_RULES), "Base score delta per call action"),
    (
        SettingKey.RANDOM_EVENT_PROBABILITY.value,
        str(DEFAULT_RANDOM_EVENT_PROBABILITY),
        "Chance (0-1) that a call doubles its score delta",
    ),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    target = DBConfig.from_mapping(db_config)
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_default_settings(db_config: dict) -> list[str]:
    """Insert default settings rows that are missing. Returns the keys added."""

    target = DBConfig.from_mapping(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SELECT key_name FROM settings")
        existing = {row[0] for row in cur.fetchall()}

        added: list[str] = []
        for key, value, description in DEFAULT_SETTINGS:
            if key in existing:
                continue
            cur.execute(
                "INSERT INTO settings (key_name, key_value, description) VALUES (%s, %s, %s)",
                (key, value, description),
            )
            added.append(key)

        conn.commit()
    finally:
        conn.close()

    for key in added:
        log.info("seeded default setting %s", key)
    return added


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
