from __future__ import annotations

import pytest

from conftest import make_user

from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from attendance_tracker.users.service import AuthService


@pytest.fixture
def auth(users_repo):
    return AuthService(users_repo)


def test_authenticate_returns_session_user(auth):
    user = auth.authenticate("USER9@example.com", "secret")

    assert user.user_id == 9
    assert user.role == Role.MANAGER
    assert user.department == "Operations"


def test_wrong_password_is_rejected(auth):
    with pytest.raises(AuthenticationError):
        auth.authenticate("user1@example.com", "nope")


def test_unknown_email_is_rejected(auth):
    with pytest.raises(AuthenticationError):
        auth.authenticate("ghost@example.com", "secret")


def test_inactive_user_is_rejected(auth, users_repo):
    users_repo.add(make_user(20, "Former Staff", is_active=False))

    with pytest.raises(AuthenticationError):
        auth.authenticate("user20@example.com", "secret")


def test_empty_email_is_bad_request(auth):
    with pytest.raises(ValidationError):
        auth.authenticate("  ", "secret")


def test_get_profile(auth):
    assert auth.get_profile(1).full_name == "Alice Smith"
    with pytest.raises(NotFoundError):
        auth.get_profile(404)
