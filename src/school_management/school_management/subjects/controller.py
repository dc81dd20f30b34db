from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import BadRequestError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/subjects", methods=["POST"], endpoint="create_subject")
    def create_subject():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"message": "Request body must be a JSON object."}), 400
        try:
            subject = container.subject_service.create_subject(name=data.get("name"))
            return jsonify({"message": "Subject created.", "data": subject.to_dict()}), 201
        except (BadRequestError, ValidationError) as e:
            return jsonify({"message": str(e)}), 400
        except Exception:
            logger.exception("Error creating subject")
            return jsonify({"message": "Server error."}), 500

    @app.route("/subjects", methods=["GET"], endpoint="list_subjects")
    def list_subjects():
        try:
            subjects = container.subject_service.list_subjects()
            return jsonify({"data": [s.to_dict() for s in subjects]}), 200
        except Exception:
            logger.exception("Error listing subjects")
            return jsonify({"message": "Server error."}), 500
