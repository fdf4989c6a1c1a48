"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..access.actor import Actor, actor_from_session
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BulkImportError,
    StorageUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_actor() -> Actor:
    return actor_from_session(session)


def payload() -> dict:
    """JSON body, falling back to form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BulkImportError)
    def _bulk_import(e: BulkImportError):
        return jsonify({"success": False, "message": str(e), "errors": e.errors}), 400

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"success": False, "message": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        body = {"success": False, "message": str(e)}
        if e.fallback_branch:
            body["reset_branch"] = e.fallback_branch
        return jsonify(body), 403

    @app.errorhandler(StorageUnavailableError)
    def _storage(e: StorageUnavailableError):
        logger.error("Storage unavailable: %s", e)
        return jsonify({"success": False, "message": "Storage unavailable, please retry"}), 503
