from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serializers import (
    assignment_to_dict,
    available_shifts_to_dict,
    batch_result_to_dict,
    day_constraints_to_dict,
)
from ..common.web import admin_required, json_body, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _headcount(data: dict) -> dict[Role, int] | None:
    raw = data.get("headcount")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("headcount phải là object {role: số lượng}", details={"field": "headcount"})
    try:
        return {Role(k): int(v) for k, v in raw.items()}
    except (TypeError, ValueError):
        raise ValidationError("headcount không hợp lệ", details={"field": "headcount"})


def register(app: Flask, container: Container) -> None:
    schedules = container.schedule_service
    batch = container.batch_service

    @app.route("/api/schedules", methods=["POST"], endpoint="api_schedule_create")
    @admin_required
    def create(actor):
        data = json_body()
        assignment = schedules.create(
            staff_id=data.get("staff_id"),
            work_date=data.get("work_date"),
            shift=data.get("shift"),
            note=data.get("note"),
        )
        return jsonify({"message": "Tạo lịch làm việc thành công", "schedule": assignment_to_dict(assignment)}), 201

    @app.route("/api/schedules/register", methods=["POST"], endpoint="api_schedule_register")
    @login_required
    def register_shift(actor):
        data = json_body()
        assignment = schedules.register(
            staff_id=actor.staff_id,
            work_date=data.get("work_date"),
            shift=data.get("shift"),
            note=data.get("note"),
        )
        return jsonify({"message": "Đăng ký ca làm việc thành công", "schedule": assignment_to_dict(assignment)}), 201

    @app.route("/api/schedules/<int:schedule_id>/confirm", methods=["POST"], endpoint="api_schedule_confirm")
    @login_required
    def confirm(actor, schedule_id: int):
        assignment = schedules.confirm(staff_id=actor.staff_id, schedule_id=schedule_id)
        return jsonify({"message": "Xác nhận lịch làm việc thành công", "schedule": assignment_to_dict(assignment)})

    @app.route("/api/schedules/<int:schedule_id>/reject", methods=["POST"], endpoint="api_schedule_reject")
    @login_required
    def reject(actor, schedule_id: int):
        data = json_body()
        assignment = schedules.reject(staff_id=actor.staff_id, schedule_id=schedule_id, reason=data.get("reason"))
        return jsonify({"message": "Từ chối lịch làm việc thành công", "schedule": assignment_to_dict(assignment)})

    @app.route("/api/schedules/<int:schedule_id>/cancel", methods=["POST"], endpoint="api_schedule_cancel")
    @login_required
    def cancel(actor, schedule_id: int):
        assignment = schedules.cancel(staff_id=actor.staff_id, schedule_id=schedule_id)
        return jsonify({"message": "Hủy lịch làm việc thành công", "schedule": assignment_to_dict(assignment)})

    @app.route("/api/schedules/<int:schedule_id>/status", methods=["PUT"], endpoint="api_schedule_set_status")
    @admin_required
    def set_status(actor, schedule_id: int):
        data = json_body()
        assignment = schedules.set_status(
            schedule_id=schedule_id, status=data.get("status"), reject_reason=data.get("reject_reason")
        )
        return jsonify({"message": "Cập nhật lịch làm việc thành công", "schedule": assignment_to_dict(assignment)})

    @app.route("/api/schedules/batch", methods=["POST"], endpoint="api_schedule_batch")
    @admin_required
    def create_batch(actor):
        data = json_body()
        result = batch.create_batch(
            staff_ids=data.get("staff_ids"),
            dates=data.get("dates"),
            shift=data.get("shift"),
            note=data.get("note"),
        )
        return jsonify(
            {"message": f"Đã tạo {len(result.successes)} lịch làm việc", **batch_result_to_dict(result)}
        ), 201

    @app.route("/api/schedules/template", methods=["POST"], endpoint="api_schedule_template")
    @admin_required
    def create_from_template(actor):
        data = json_body()
        result = batch.create_from_template(
            start=data.get("start_date"),
            end=data.get("end_date"),
            shifts=data.get("shifts"),
            headcount=_headcount(data),
        )
        return jsonify(
            {"message": f"Đã tạo {len(result.successes)} lịch làm việc từ template", **batch_result_to_dict(result)}
        ), 201

    @app.route("/api/schedules/available", methods=["GET"], endpoint="api_schedule_available")
    @login_required
    def available(actor):
        result = schedules.available_shifts(staff_id=actor.staff_id, work_date=request.args.get("date"))
        return jsonify(available_shifts_to_dict(result))

    @app.route("/api/schedules/constraints", methods=["GET"], endpoint="api_schedule_constraints")
    @admin_required
    def constraints(actor):
        result = schedules.day_constraints(staff_id=request.args.get("staff_id"), work_date=request.args.get("date"))
        return jsonify(day_constraints_to_dict(result))

    @app.route("/api/schedules/mine", methods=["GET"], endpoint="api_schedule_mine")
    @login_required
    def mine(actor):
        rows = schedules.list_for_staff(
            staff_id=actor.staff_id, start=request.args.get("start"), end=request.args.get("end")
        )
        return jsonify([assignment_to_dict(a) for a in rows])
