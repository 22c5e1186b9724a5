from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, ok, unexpected_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    def list_notifications():
        try:
            rows = container.notification_service.list_notifications()
            return jsonify({"success": True, "data": [r.to_dict() for r in rows]})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="listing notifications")

    @app.route("/api/notifications/<notification_id>/send", methods=["POST"], endpoint="send_notification")
    def send_notification(notification_id: str):
        try:
            container.notification_service.send(notification_id)
            return ok("Notification sent successfully")
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="sending notification")
