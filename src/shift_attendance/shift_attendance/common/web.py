from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import DomainError, NotFound, StateConflict, ValidationError
from ..users.model import Actor


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFound):
        return 404
    if isinstance(error, StateConflict):
        return 409
    return 400


def current_actor() -> Optional[Actor]:
    """Identity placed in the session by the (external) login flow."""
    if "staff_id" not in session:
        return None
    try:
        return Actor(staff_id=int(session["staff_id"]), role=Role(session.get("role")))
    except (TypeError, ValueError):
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify({"error": "UNAUTHENTICATED", "message": "Vui lòng đăng nhập để tiếp tục!"}), 401
        return view(actor, *args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify({"error": "UNAUTHENTICATED", "message": "Vui lòng đăng nhập để tiếp tục!"}), 401
        if not actor.is_admin:
            return jsonify({"error": "FORBIDDEN", "message": "Bạn không có quyền"}), 403
        return view(actor, *args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Dữ liệu gửi lên phải là JSON object")
    return data
