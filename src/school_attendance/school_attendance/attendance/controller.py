from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, ok, unexpected_error
from ..container import Container
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.exceptions import DomainError


def _rows(rows) -> list[dict]:
    return [r.to_dict() for r in rows]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/record", methods=["POST"], endpoint="record_attendance")
    def record_attendance():
        data = request.get_json(silent=True) or {}
        card_id = str(data.get("cardId") or "").strip()
        if not card_id:
            return jsonify({"success": False, "message": "Card ID is required"}), 400
        try:
            student = container.attendance_service.check_in(card_id)
            return ok(f"Attendance recorded for {student.name}", student=student.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="recording attendance")

    @app.route("/api/attendance/manual-absent/<student_id>", methods=["POST"], endpoint="manual_absent")
    def manual_absent(student_id: str):
        try:
            student = container.attendance_service.mark_absent_manually(student_id)
            return ok(f"{student.name} marked as absent")
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="marking absence")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def attendance_today():
        try:
            return jsonify({"success": True, "data": _rows(container.attendance_service.today())})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="loading today's attendance")

    @app.route("/api/attendance/recent", methods=["GET"], endpoint="attendance_recent")
    def attendance_recent():
        limit = request.args.get("limit", default=DEFAULT_RECENT_LIMIT, type=int) or DEFAULT_RECENT_LIMIT
        try:
            return jsonify({"success": True, "data": _rows(container.attendance_service.recent(limit))})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="loading recent attendance")

    @app.route("/api/attendance/by-date", methods=["GET"], endpoint="attendance_by_date")
    def attendance_by_date():
        raw = (request.args.get("date") or "").strip()
        if not raw:
            return jsonify({"success": False, "message": "Date parameter is required"}), 400
        try:
            mark_date = parse_iso_date(raw)
        except ValueError:
            return jsonify({"success": False, "message": "Date must be in YYYY-MM-DD format"}), 400
        try:
            return jsonify({"success": True, "data": _rows(container.attendance_service.by_date(mark_date))})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="loading attendance by date")
