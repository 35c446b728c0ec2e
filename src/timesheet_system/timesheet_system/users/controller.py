from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_role, current_user_id, error_response, json_error, roles_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users/<int:manager_id>/delegate", methods=["PUT"], endpoint="users_delegate")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def users_delegate(manager_id: int):
        data = request.get_json(silent=True) or {}
        raw = data.get("delegate_id")
        try:
            delegate_id = int(raw) if raw not in (None, "") else None
        except (TypeError, ValueError):
            return json_error("delegate_id must be an integer or null", 400)

        try:
            container.user_service.set_delegate(
                current_role=current_role(),
                acting_user_id=current_user_id(),
                manager_id=manager_id,
                delegate_id=delegate_id,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"manager_id": manager_id, "delegated_manager_id": delegate_id})
