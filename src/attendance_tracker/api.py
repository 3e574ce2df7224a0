"""Response envelope, caller identity and error mapping for all controllers.

Every JSON body is ``{"data": ..., "error": null}`` on success and
``{"data": null, "error": {"code": ..., "message": ...}}`` on failure.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from functools import wraps
from typing import Any

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .common.date_range import DateRange, resolve_range
from .core.enums import Role
from .core.exceptions import (
    AlreadyOpenError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidRangeError,
    NoOpenSessionError,
    NotFoundError,
    SessionConflictError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[DomainError], int] = {
    AlreadyOpenError: 400,
    NoOpenSessionError: 400,
    InvalidRangeError: 400,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    StoreUnavailableError: 503,
}


def ok(data: Any, status: int = 200):
    return jsonify({"data": data, "error": None}), status


def fail(code: str, message: str, status: int):
    return jsonify({"data": None, "error": {"code": code, "message": message}}), status


def status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 400


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthenticationError()
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        if session.get("role") != Role.MANAGER.value:
            raise AuthorizationError("Manager role required")
        return view(*args, **kwargs)

    return wrapper


def range_from_request(today: date) -> DateRange:
    args = request.args
    return resolve_range(args.get("period"), args.get("start"), args.get("end"), today=today)


def department_from_request() -> str | None:
    value = (request.args.get("department") or "").strip()
    return value or None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s -> %s", request.method, request.path, exc.code)
        return fail(exc.code, exc.message, status)

    @app.errorhandler(SessionConflictError)
    def handle_unresolved_conflict(exc: SessionConflictError):
        # repository conflict that no service translated
        logger.error("%s %s -> unresolved store conflict: %s", request.method, request.path, exc)
        return fail(StoreUnavailableError.code, StoreUnavailableError.default_message, 503)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(exc.name.replace(" ", ""), exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return fail("InternalError", "Internal server error", 500)


def register_request_logging(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        elapsed = time.perf_counter() - started if started is not None else 0.0
        logger.info(
            "%s %s -> %s (%.4fs)",
            request.method,
            request.path,
            response.status_code,
            elapsed,
        )
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response
