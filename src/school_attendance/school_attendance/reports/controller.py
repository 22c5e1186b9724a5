from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.http import error_response, ok, unexpected_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports", methods=["GET"], endpoint="list_reports")
    def list_reports():
        try:
            reports = container.report_service.list_reports()
            return jsonify({"success": True, "data": [r.to_dict() for r in reports]})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="listing reports")

    @app.route("/api/reports/generate", methods=["POST"], endpoint="generate_report")
    def generate_report():
        try:
            report = container.report_service.generate_today()
            return ok("Report generated successfully", data=report.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="generating report")

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    def dashboard_stats():
        try:
            return jsonify({"success": True, "data": container.dashboard_service.stats().to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="loading dashboard stats")

    @app.route("/api/system/new-day", methods=["POST"], endpoint="new_day")
    def new_day():
        try:
            container.day_cycle.new_day()
            return ok("New day started successfully")
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="starting a new day")

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok("Server is running", timestamp=now_local().isoformat())
