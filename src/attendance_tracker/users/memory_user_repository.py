from __future__ import annotations

import threading
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """Process-local user directory for tests and the ``memory`` backend."""

    def __init__(self, users: Sequence[User] = ()):
        self._lock = threading.Lock()
        self._by_id: dict[int, User] = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        with self._lock:
            self._by_id[user.user_id] = user
        return user

    def create(
        self,
        *,
        employee_code: str,
        full_name: str,
        email: str,
        password: str,
        role: Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        is_active: bool = True,
    ) -> User:
        with self._lock:
            user_id = max(self._by_id, default=0) + 1
            user = User(
                user_id=user_id,
                employee_code=employee_code,
                full_name=full_name,
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
                department=department,
                is_active=is_active,
            )
            self._by_id[user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def _snapshot(self) -> list[User]:
        with self._lock:
            return list(self._by_id.values())

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self._snapshot():
            if user.email.lower() == email.lower():
                return user
        return None

    def list_active(self, *, role: Optional[Role] = None, department: Optional[str] = None) -> Sequence[User]:
        users = [
            u
            for u in self._snapshot()
            if u.is_active
            and (role is None or u.role == role)
            and (not department or u.department == department)
        ]
        users.sort(key=lambda u: u.full_name)
        return users
