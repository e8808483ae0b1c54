from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_optional_date
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..container import Container
from .model import Resignation
from .presenter import progress_json, resignation_json

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def register(app: Flask, container: Container) -> None:
    # Session is populated by the authentication service (user_id, role).
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session or "role" not in session:
                return jsonify({"error": "Unauthorized"}), 401
            return view(*args, **kwargs)

        return wrapper

    def api_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                for exc_type, code in _STATUS_BY_ERROR:
                    if isinstance(e, exc_type):
                        return jsonify({"error": str(e)}), code
                return jsonify({"error": str(e)}), 400
            except Exception as e:
                logger.exception("Unhandled error in %s", request.endpoint)
                message = str(e) if app.config.get("DEBUG") else "Server error"
                return jsonify({"error": message}), 500

        return wrapper

    def _current() -> tuple[int, Role]:
        try:
            return int(session["user_id"]), Role(session["role"])
        except (KeyError, ValueError):
            raise AuthenticationError("Unauthorized")

    def _body() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _with_employees(items: Iterable[Resignation]) -> list[dict]:
        items = list(items)
        employees = container.employees_repo.get_many(r.user_id for r in items)
        return [resignation_json(r, employees.get(r.user_id)) for r in items]

    def _one(r: Resignation) -> dict:
        return _with_employees([r])[0]

    @app.route("/api/resignation", methods=["GET"], endpoint="list_resignations")
    @login_required
    @api_errors
    def list_resignations():
        user_id, role = _current()
        items = container.resignation_service.list_for(current_role=role, user_id=user_id)
        return jsonify({"resignations": _with_employees(items)}), 200

    @app.route("/api/resignation", methods=["POST"], endpoint="submit_resignation")
    @login_required
    @api_errors
    def submit_resignation():
        user_id, role = _current()
        data = _body()
        resignation = container.resignation_service.submit(
            current_role=role,
            user_id=user_id,
            resignation_date=parse_optional_date(data.get("resignationDate"), "resignationDate"),
            reason=data.get("reason") or "",
            feedback=data.get("feedback") or "",
            assets=data.get("assets"),
            notice_period_start_date=parse_optional_date(data.get("noticePeriodStartDate"), "noticePeriodStartDate"),
            notice_period_end_date=parse_optional_date(data.get("noticePeriodEndDate"), "noticePeriodEndDate"),
            handover_notes=data.get("handoverNotes") or "",
        )
        return jsonify({"message": "Resignation submitted successfully", "resignation": _one(resignation)}), 201

    @app.route("/api/resignation/<int:resignation_id>", methods=["GET"], endpoint="get_resignation")
    @login_required
    @api_errors
    def get_resignation(resignation_id: int):
        user_id, role = _current()
        r = container.resignation_service.get_for(current_role=role, user_id=user_id, resignation_id=resignation_id)
        return jsonify({"resignation": _one(r)}), 200

    @app.route("/api/resignation/<int:resignation_id>", methods=["PUT"], endpoint="decide_resignation")
    @login_required
    @api_errors
    def decide_resignation(resignation_id: int):
        user_id, role = _current()
        data = _body()
        r = container.resignation_service.decide(
            current_role=role,
            actor_id=user_id,
            resignation_id=resignation_id,
            status=str(data.get("status") or ""),
            rejection_reason=data.get("rejectionReason"),
        )
        return jsonify({"message": f"Resignation {r.status.value} successfully", "resignation": _one(r)}), 200

    @app.route("/api/resignation/<int:resignation_id>", methods=["DELETE"], endpoint="delete_resignation")
    @login_required
    @api_errors
    def delete_resignation(resignation_id: int):
        user_id, role = _current()
        container.resignation_service.delete(current_role=role, actor_id=user_id, resignation_id=resignation_id)
        return jsonify({"message": "Resignation deleted successfully"}), 200

    @app.route("/api/resignation/<int:resignation_id>/process", methods=["PATCH"], endpoint="update_exit_process")
    @login_required
    @api_errors
    def update_exit_process(resignation_id: int):
        user_id, role = _current()
        data = _body()
        step = data.get("step") or data.get("field")
        if not step:
            raise ValidationError("Invalid field")

        version = data.get("version")
        if version is not None:
            try:
                version = int(version)
            except (TypeError, ValueError):
                raise ValidationError("version must be an integer")

        r = container.resignation_service.update_exit_step(
            current_role=role,
            actor_id=user_id,
            resignation_id=resignation_id,
            step=str(step),
            payload=data,
            expected_version=version,
        )
        return jsonify({"message": "Exit process updated successfully", "resignation": _one(r)}), 200

    @app.route("/api/resignation/<int:resignation_id>/progress", methods=["GET"], endpoint="exit_progress")
    @login_required
    @api_errors
    def exit_progress(resignation_id: int):
        user_id, role = _current()
        p = container.resignation_service.progress(current_role=role, user_id=user_id, resignation_id=resignation_id)
        return jsonify({"progress": progress_json(p)}), 200
