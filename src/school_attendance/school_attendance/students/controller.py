from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, ok, unexpected_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        try:
            students = container.student_service.list_students()
            return jsonify({"success": True, "data": [s.to_dict() for s in students]})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="listing students")

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    def add_student():
        data = request.get_json(silent=True) or {}
        if not data.get("name") or not data.get("cardId") or not data.get("class"):
            return jsonify({"success": False, "message": "Name, card ID, and class are required"}), 400
        try:
            student = container.student_service.add_student(
                name=data.get("name"),
                card_id=data.get("cardId"),
                student_class=data.get("class"),
                parent_phone=data.get("parentPhone"),
                parent_email=data.get("parentEmail"),
            )
            return ok("Student added successfully", data=student.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="adding student")

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    def update_student(student_id: str):
        data = request.get_json(silent=True) or {}
        try:
            student = container.student_service.update_student(
                student_id,
                name=data.get("name"),
                card_id=data.get("cardId"),
                student_class=data.get("class"),
                parent_phone=data.get("parentPhone"),
                parent_email=data.get("parentEmail"),
            )
            return ok("Student updated successfully", data=student.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="updating student")

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: str):
        try:
            container.student_service.remove_student(student_id)
            return ok("Student deleted successfully")
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return unexpected_error(e, action="deleting student")
