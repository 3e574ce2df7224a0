from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")

DEMO_USERS = (
    # employee_code, full_name, email, password, role, department
    ("MGR001", "Morgan Manager", "manager@example.com", "manager123", "manager", "Operations"),
    ("EMP001", "Alex Employee", "alex@example.com", "employee123", "employee", "Engineering"),
    ("EMP002", "Sam O'Brien", "sam@example.com", "employee123", "employee", "Sales"),
)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Schema files carry no ';' inside literals, so a plain split is enough.
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    for stmt in sql.split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(conn_factory)
    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied to %s", conn_factory.config.describe())


def ensure_demo_users(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        for employee_code, full_name, email, password, role, department in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET employee_code=%s, full_name=%s, password_hash=%s, role=%s, department=%s, is_active=1
                    WHERE email=%s
                    """,
                    (employee_code, full_name, password_hash, role, department, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (employee_code, full_name, email, password_hash, role, department)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (employee_code, full_name, email, password_hash, role, department),
                )
        conn.commit()
    finally:
        conn.close()
    logger.info("demo users ready (%d)", len(DEMO_USERS))


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def seed_memory_users(users) -> None:
    """Load DEMO_USERS into an ``InMemoryUserRepository`` that lacks them."""
    for employee_code, full_name, email, password, role, department in DEMO_USERS:
        if users.get_by_email(email):
            continue
        users.create(
            employee_code=employee_code,
            full_name=full_name,
            email=email,
            password=password,
            role=Role(role),
            department=department,
        )
    logger.info("demo users loaded into memory store (%d)", len(DEMO_USERS))
