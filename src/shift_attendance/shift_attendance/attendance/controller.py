from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.serializers import clock_result_to_dict, record_to_dict, today_to_dict
from ..common.web import json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def clock_in(actor):
        data = json_body()
        result = service.clock_in(actor.staff_id, schedule_id=data.get("schedule_id"))
        return jsonify({"message": "Chấm công vào thành công", **clock_result_to_dict(result)})

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def clock_out(actor):
        result = service.clock_out(actor.staff_id)
        message = "Chấm công ra thành công (tự động chấm công vào)" if result.auto_clock_in else "Chấm công ra thành công"
        return jsonify({"message": message, **clock_result_to_dict(result)})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def today(actor):
        return jsonify(today_to_dict(service.today(actor.staff_id)))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history(actor):
        end = request.args.get("end") or container.clock.now().date()
        start = request.args.get("start") or (container.clock.now().date() - timedelta(days=DEFAULT_HISTORY_DAYS))
        rows = service.history(actor.staff_id, start=start, end=end)
        return jsonify([record_to_dict(r) for r in rows])
