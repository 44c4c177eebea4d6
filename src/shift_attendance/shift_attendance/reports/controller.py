from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serializers import coverage_to_dict, staff_stats_to_dict
from ..common.web import admin_required, login_required
from ..container import Container


def _year_month(container: Container) -> tuple[str | int, str | int]:
    today = container.clock.now().date()
    return request.args.get("year") or today.year, request.args.get("month") or today.month


def register(app: Flask, container: Container) -> None:
    stats = container.stats_service

    @app.route("/api/stats/me", methods=["GET"], endpoint="api_stats_me")
    @login_required
    def my_stats(actor):
        year, month = _year_month(container)
        return jsonify(staff_stats_to_dict(stats.staff_month(staff_id=actor.staff_id, year=year, month=month)))

    @app.route("/api/stats/monthly", methods=["GET"], endpoint="api_stats_monthly")
    @admin_required
    def monthly(actor):
        year, month = _year_month(container)
        return jsonify(
            {
                "staff": [staff_stats_to_dict(s) for s in stats.all_staff_month(year=year, month=month)],
                "roles": {
                    role.value: summary.to_dict() for role, summary in stats.role_month(year=year, month=month).items()
                },
            }
        )

    @app.route("/api/stats/shifts", methods=["GET"], endpoint="api_stats_shifts")
    @admin_required
    def shift_coverage(actor):
        work_date = request.args.get("date") or container.clock.now().date()
        coverage = stats.shift_coverage(work_date=work_date)
        return jsonify([coverage_to_dict(c) for c in coverage.values()])
