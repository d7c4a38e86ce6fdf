from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector
import structlog

from .connection import DBConfig

logger = structlog.get_logger("rotaclock.bootstrap")


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
            prev = ch
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            prev = ch
            continue

        if ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
            prev = ""
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            prev = ch
            if stmt:
                yield stmt
            continue

        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> int:
    count = 0
    for stmt in iter_sql_statements(sql):
        cur.execute(stmt)
        count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_file(db_config: dict, path: str | Path) -> int:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = _exec_sql(cur, sql)
        conn.commit()
        return count
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_file(db_config, schema_path)
    logger.info("schema_applied", statements=count, path=str(schema_path))


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _apply_file(db_config, seed_path)
    logger.info("seed_applied", statements=count, path=str(seed_path))


def ensure_demo_employees(db_config: dict, *, tenant_id: int = 1) -> None:
    """Upsert the demo admin, manager and agents used by the DEMO_AUTH fallback."""
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_employee(code: str, first: str, last: str, role: str, location_id: int, rate: float) -> int:
            cur.execute(
                "SELECT id FROM employees WHERE tenant_id=%s AND employee_code=%s",
                (tenant_id, code),
            )
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, role=%s, location_id=%s, hourly_rate=%s, is_active=1
                    WHERE id=%s
                    """,
                    (first, last, role, location_id, rate, int(existing["id"])),
                )
                return int(existing["id"])
            cur.execute(
                """
                INSERT INTO employees (tenant_id, employee_code, first_name, last_name, email, department, role, location_id, hourly_rate)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (tenant_id, code, first, last, f"{code.lower()}@demo.local", "Operations", role, location_id, rate),
            )
            return int(cur.lastrowid)

        upsert_employee("ADM001", "Alex", "Admin", "admin", 1, 0)
        manager_id = upsert_employee("MGR001", "Morgan", "Manager", "manager", 1, 28)
        upsert_employee("AGT001", "Riley", "Agent", "agent", 1, 18.5)
        upsert_employee("AGT002", "Jordan", "Agent", "agent", 1, 18.5)
        upsert_employee("EMP001", "Casey", "Worker", "employee", 2, 16)

        cur.execute(
            "INSERT IGNORE INTO manager_locations (tenant_id, manager_id, location_id) VALUES (%s, %s, %s)",
            (tenant_id, manager_id, 1),
        )
        conn.commit()
        logger.info("demo_employees_ready", tenant_id=tenant_id)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
