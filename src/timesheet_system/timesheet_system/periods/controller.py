from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_role, current_user_id, error_response, login_required, roles_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.period_service

    @app.route("/api/periods", methods=["GET"], endpoint="periods_list")
    @login_required
    def periods_list():
        try:
            periods = service.list_periods(current_user_id())
        except DomainError as e:
            return error_response(e)
        return jsonify([p.to_dict() for p in periods])

    @app.route("/api/periods/<int:year>/<int:month>", methods=["GET"], endpoint="periods_get")
    @login_required
    def periods_get(year: int, month: int):
        try:
            period = service.get_period(current_user_id(), year, month)
        except DomainError as e:
            return error_response(e)
        data = period.to_dict()
        data["locked"] = service.is_locked(period)
        return jsonify(data)

    @app.route("/api/periods/<int:year>/<int:month>/can-submit", methods=["GET"], endpoint="periods_can_submit")
    @login_required
    def periods_can_submit(year: int, month: int):
        try:
            check = service.can_submit(current_user_id(), year, month)
        except DomainError as e:
            return error_response(e)
        return jsonify(check.to_dict())

    @app.route("/api/periods/<int:year>/<int:month>/submit", methods=["POST"], endpoint="periods_submit")
    @login_required
    def periods_submit(year: int, month: int):
        try:
            period = service.submit_period(current_user_id(), year, month)
        except DomainError as e:
            return error_response(e)
        return jsonify(period.to_dict())

    @app.route("/api/approvals/pending", methods=["GET"], endpoint="approvals_pending")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def approvals_pending():
        try:
            rows = service.list_pending_approvals(current_user_id())
        except DomainError as e:
            return error_response(e)
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/approvals/<int:period_id>/approve", methods=["POST"], endpoint="approvals_approve")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def approvals_approve(period_id: int):
        try:
            period = service.approve_period(period_id, acting_user_id=current_user_id(), current_role=current_role())
        except DomainError as e:
            return error_response(e)
        return jsonify(period.to_dict())

    @app.route("/api/approvals/<int:period_id>/reject", methods=["POST"], endpoint="approvals_reject")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def approvals_reject(period_id: int):
        data = request.get_json(silent=True) or {}
        try:
            period = service.reject_period(
                period_id,
                str(data.get("reason") or ""),
                acting_user_id=current_user_id(),
                current_role=current_role(),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(period.to_dict())
