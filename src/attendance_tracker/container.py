from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_EXPORT_FETCH_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService

STORAGE_BACKENDS = ("mysql", "memory")


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = "mysql",
    clock: Optional[Clock] = None,
    fetch_size: int = DEFAULT_EXPORT_FETCH_SIZE,
) -> Container:
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend!r} (expected one of {STORAGE_BACKENDS})")

    clock = clock or now_local
    conn: Optional[DatabaseConnection] = None

    if backend == "memory":
        users_repo: UserRepository = InMemoryUserRepository()
        attendance_repo: AttendanceRepository = InMemoryAttendanceRepository(users_repo)
    else:
        if db_config is None:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        users_repo = MySQLUserRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn, fetch_size=fetch_size)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, clock=clock),
        report_service=ReportService(attendance_repo, users_repo, clock=clock),
    )
