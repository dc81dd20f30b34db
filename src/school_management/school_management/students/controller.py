from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import BadRequestError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/students", methods=["POST"], endpoint="create_student")
    def create_student():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "Request body must be a JSON object."}), 400
        try:
            student = container.student_service.create_student(
                name=data.get("name"),
                email=data.get("email"),
                password=data.get("password"),
                contact=data.get("contact"),
                address=data.get("address"),
                admission_year=data.get("admissionYear"),
                parents_contact=data.get("parentsContact") or [],
                current_std=data.get("currentStd"),
                subjects=data.get("subjects") or [],
                batches=data.get("batches") or [],
            )
            return jsonify({"success": True, "message": "Student created.", "data": student.to_dict()}), 201
        except (BadRequestError, ValidationError) as e:
            logger.info("Rejected student creation: %s", e)
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error creating student")
            return jsonify({"success": False, "message": "Something went wrong."}), 500

    @app.route("/students/<student_id>", methods=["GET"], endpoint="get_student")
    def get_student(student_id: str):
        try:
            student, history = container.attendance_service.student_history(student_id)
            data = student.to_dict()
            data["attendance"] = [h.to_dict() for h in history]
            return jsonify({"success": True, "data": data}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError:
            return jsonify({"success": False, "message": "Student not found"}), 404
        except Exception:
            logger.exception("Error loading student %s", student_id)
            return jsonify({"success": False, "message": "Something went wrong."}), 500

    @app.route("/students/<student_id>", methods=["PATCH"], endpoint="update_student_details")
    def update_student_details(student_id: str):
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "Request body must be a JSON object."}), 400
        try:
            student = container.student_service.update_student_details(
                student_id,
                name=data.get("name"),
                email=data.get("email"),
                contact=data.get("contact"),
                address=data.get("address"),
                batches=data.get("batches"),
            )
            return jsonify({"success": True, "message": "Details updated successfully.", "data": student.to_dict()}), 200
        except NotFoundError:
            return jsonify({"success": False, "message": "Student not found"}), 404
        except ValidationError as e:
            logger.info("Rejected update for student %s: %s", student_id, e)
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error updating student %s", student_id)
            return jsonify({"success": False, "message": "Something went wrong."}), 500

    @app.route("/students/<student_id>/attendance", methods=["GET"], endpoint="student_attendance")
    def student_attendance(student_id: str):
        try:
            student, history = container.attendance_service.student_history(student_id)
            return jsonify({"studentId": student.student_id, "attendance": [h.to_dict() for h in history]}), 200
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        except NotFoundError:
            return jsonify({"message": "Student not found"}), 404
        except Exception:
            logger.exception("Error loading attendance for student %s", student_id)
            return jsonify({"message": "Server error."}), 500
