from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_role, error_response, json_error, login_required, roles_required
from ..common.validators import require_month
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def _holiday_to_dict(h) -> dict:
    return {"holiday_id": h.holiday_id, "date": h.holiday_date.strftime("%Y-%m-%d"), "name": h.name}


def _exception_to_dict(e) -> dict:
    return {
        "exception_id": e.exception_id,
        "date": e.exception_date.strftime("%Y-%m-%d"),
        "type": e.type.value,
        "name": e.name,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/calendar/expected-hours", methods=["GET"], endpoint="calendar_expected_hours")
    @login_required
    def calendar_expected_hours():
        try:
            year, month = require_month(request.args.get("year"), request.args.get("month"))
            if request.args.get("to_date") in {"1", "true"}:
                hours = container.calendar_service.get_expected_hours_to_date(year, month)
            else:
                hours = container.calendar_service.get_expected_hours(year, month)
        except DomainError as e:
            return error_response(e)
        return jsonify({"year": year, "month": month, "expected_hours": hours})

    @app.route("/api/calendar/months/<int:year>/<int:month>", methods=["GET"], endpoint="calendar_month")
    @login_required
    def calendar_month(year: int, month: int):
        try:
            year, month = require_month(year, month)
            return jsonify(container.calendar_service.get_month_overview(year, month))
        except DomainError as e:
            return error_response(e)

    @app.route("/api/calendar/working-day", methods=["GET"], endpoint="calendar_working_day")
    @login_required
    def calendar_working_day():
        try:
            day = parse_iso_date(request.args.get("date") or "")
        except ValueError:
            return json_error("date must be YYYY-MM-DD", 400)
        return jsonify({"date": day.strftime("%Y-%m-%d"), "working_day": container.calendar_service.is_working_day(day)})

    @app.route("/api/calendar/holidays", methods=["GET"], endpoint="calendar_holidays")
    @login_required
    def calendar_holidays():
        try:
            return jsonify([_holiday_to_dict(h) for h in container.calendar_service.list_holidays()])
        except DomainError as e:
            return error_response(e)

    @app.route("/api/calendar/exceptions", methods=["GET", "POST"], endpoint="calendar_exceptions")
    @login_required
    def calendar_exceptions():
        try:
            if request.method == "POST":
                data = request.get_json(silent=True) or {}
                try:
                    exception_date = parse_iso_date(str(data.get("date") or ""))
                except ValueError:
                    return json_error("date must be YYYY-MM-DD", 400)

                exception_id = container.calendar_service.add_exception(
                    current_role=current_role(),
                    exception_date=exception_date,
                    type=str(data.get("type") or ""),
                    name=data.get("name"),
                )
                return jsonify({"exception_id": exception_id}), 201

            return jsonify([_exception_to_dict(e) for e in container.calendar_service.list_exceptions()])
        except DomainError as e:
            return error_response(e)

    @app.route(
        "/api/calendar/exceptions/<int:exception_id>",
        methods=["DELETE"],
        endpoint="calendar_exceptions_delete",
    )
    @roles_required(Role.ADMIN)
    def calendar_exceptions_delete(exception_id: int):
        try:
            container.calendar_service.delete_exception(current_role=current_role(), exception_id=exception_id)
        except DomainError as e:
            return error_response(e)
        return "", 204
