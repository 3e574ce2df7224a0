from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest
from mysql.connector import errorcode
from werkzeug.security import generate_password_hash

from attendance_tracker.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.core.enums import Role
from attendance_tracker.database.mysql_base import db_cursor
from attendance_tracker.main import create_app, get_container
from attendance_tracker.reports.service import ReportService
from attendance_tracker.users.memory_user_repository import InMemoryUserRepository
from attendance_tracker.users.model import User

# Hashing once keeps the suite fast; werkzeug's default is deliberately slow.
PASSWORD_HASH = generate_password_hash("secret")


class FakeClock:
    """Callable clock whose time tests move explicitly."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args: int) -> datetime:
        self.now = datetime(*args)
        return self.now


class DeadlockedStore:
    """Connection factory whose connection, used as its own cursor, deadlocks on every statement."""

    def connect(self, *, with_database=True):
        return self

    def cursor(self, dictionary=True):
        return self

    def execute(self, sql, params=None):
        raise mysql.connector.errors.InternalError(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


def deadlocked_statement(*args, **kwargs):
    """Stand-in repository method that runs one statement into a deadlock."""
    with db_cursor(DeadlockedStore()) as (_, cur):
        cur.execute("SELECT 1")


def make_user(user_id: int, name: str, *, role: Role = Role.EMPLOYEE, department: str | None = "Engineering", **kw) -> User:
    return User(
        user_id=user_id,
        employee_code=kw.pop("employee_code", f"EMP{user_id:03d}"),
        full_name=name,
        email=kw.pop("email", f"user{user_id}@example.com"),
        password_hash=PASSWORD_HASH,
        role=role,
        department=department,
        is_active=kw.pop("is_active", True),
    )


def seed_users(repo: InMemoryUserRepository) -> None:
    repo.add(make_user(1, "Alice Smith", department="Engineering"))
    repo.add(make_user(2, 'Bob O"Brien', department="Sales"))
    repo.add(make_user(3, "Carol Jones", department="Engineering"))
    repo.add(make_user(9, "Morgan Manager", role=Role.MANAGER, department="Operations"))


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2024, 1, 10, 8, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def users_repo() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    seed_users(repo)
    return repo


@pytest.fixture
def attendance_repo(users_repo) -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository(users_repo)


@pytest.fixture
def attendance_service(attendance_repo, users_repo, clock) -> AttendanceService:
    return AttendanceService(attendance_repo, users_repo, clock=clock)


@pytest.fixture
def report_service(attendance_repo, users_repo, clock) -> ReportService:
    return ReportService(attendance_repo, users_repo, clock=clock)


@pytest.fixture
def app(monkeypatch, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(clock=clock)
    seed_users(get_container(app).users_repo)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, user_id: int, role: Role = Role.EMPLOYEE) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value


@pytest.fixture
def employee_client(client):
    login_as(client, 1)
    return client


@pytest.fixture
def manager_client(client):
    login_as(client, 9, Role.MANAGER)
    return client
