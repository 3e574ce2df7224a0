from __future__ import annotations

import logging

from flask import Flask, request, session

from ..api import current_user_id, login_required, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        payload = request.get_json(silent=True) or request.form
        s_user = auth.authenticate(payload.get("email", ""), payload.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["department"] = s_user.department

        logger.info("login: user=%s role=%s", s_user.user_id, s_user.role.value)
        return ok(auth.get_profile(s_user.user_id).to_public_dict())

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return ok({"loggedOut": True})

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        return ok(auth.get_profile(current_user_id()).to_public_dict())

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})
