from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance", methods=["POST"], endpoint="add_student_attendance")
    def add_student_attendance():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"message": "Request body must be a JSON object."}), 400
        try:
            result = container.attendance_service.mark_attendance(
                student=data.get("student"),
                subject=data.get("subject"),
                status=data.get("status"),
                note=data.get("note"),
            )
            return jsonify({
                "message": "Attendance marked successfully.",
                "attendance": result.attendance.to_dict(),
                "student": result.student_dict(),
            }), 201
        except (BadRequestError, ValidationError) as e:
            return jsonify({"message": str(e)}), 400
        except ConflictError as e:
            return jsonify({"message": str(e)}), 409
        except NotFoundError as e:
            return jsonify({"message": str(e)}), 404
        except Exception:
            logger.exception("Error marking attendance")
            return jsonify({"message": "Server error."}), 500

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        try:
            raw_date = request.args.get("date", "").strip()
            try:
                day = parse_iso_date(raw_date) if raw_date else None
            except ValueError:
                return jsonify({"message": "date must be YYYY-MM-DD"}), 400

            records = container.attendance_service.search(
                student=request.args.get("student"),
                subject=request.args.get("subject"),
                day=day,
            )
            return jsonify({"data": [r.to_dict() for r in records]}), 200
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        except Exception:
            logger.exception("Error listing attendance")
            return jsonify({"message": "Server error."}), 500
