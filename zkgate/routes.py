"""
Proof channel endpoints
=======================

    GET  /pk     → 200 {"pk": "<base64>"}
    GET  /vk     → 200 <verifying key JSON>
    POST /prove  ← {"proof": "<base64>", "y": <int>}
                 → 200 valid, 400 malformed, 403 rejected, 500 internal
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from zkgate.errors import EncodingError, SerializationError
from zkgate.serializers import b64decode

logger = logging.getLogger(__name__)

proof_bp = Blueprint('proof', __name__)

SERVICE_KEY = "zkgate.proof_service"


def get_service():
    return current_app.extensions[SERVICE_KEY]


def error(status, message):
    return jsonify({"status": "error", "error": message}), status


@proof_bp.before_request
def require_setup():
    if not get_service().is_ready:
        return error(503, "trusted setup has not completed")


@proof_bp.route("/pk", methods=["GET"])
def proving_key():
    return jsonify({"pk": get_service().proving_key_b64()})


@proof_bp.route("/vk", methods=["GET"])
def verifying_key():
    return jsonify(get_service().verifying_key_doc())


@proof_bp.route("/prove", methods=["POST"])
def prove():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error(400, "request body must be a JSON object")

    proof_b64 = body.get("proof")
    y = body.get("y")
    if not isinstance(proof_b64, str):
        return error(400, "'proof' must be a base64 string")
    if not isinstance(y, int) or isinstance(y, bool):
        return error(400, "'y' must be an integer")

    try:
        valid, first = get_service().verify_submission(b64decode(proof_b64), y)
    except EncodingError as e:
        logger.info("malformed proof from %s: %s", request.remote_addr, e)
        return error(400, str(e))

    if not valid:
        logger.info("proof from %s rejected for y=%d", request.remote_addr, y)
        return jsonify({"status": "rejected"}), 403

    return jsonify({"status": "ok", "first": first}), 200


@proof_bp.app_errorhandler(SerializationError)
def serialization_failed(e):
    logger.error("serialization failure: %s", e)
    return error(500, "internal serialization error")
