"""
auditlog/api/routes.py - HTTP API for remote producers with Flasgger documentation
"""

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from auditlog.core.levels import LogLevel
from auditlog.core.runtime import rest_api_request
from auditlog.web import get_current_account, require_token

api_bp = Blueprint("api", __name__)
logger = logging.getLogger(__name__)


def get_engine():
    """History engine of the current app"""
    return current_app.extensions["auditlog"]


def marks_rest_api_request(f: Callable[..., Any]) -> Callable[..., Any]:
    """Events logged inside the view are flagged as HTTP-API requests"""

    @wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        with rest_api_request():
            return f(*args, **kwargs)

    return decorated_function


def caller_context(context: dict) -> dict:
    """Context as sent by the caller, minus reserved keys unless the token is trusted

    Reserved keys (leading underscore) carry attribution and grouping, such
    as _user_id, _initiator, _date or _occasionsID.
    """
    account = get_current_account()
    if account is not None and account.trusted:
        return context

    reserved = sorted(key for key in context if key.startswith("_"))
    if reserved:
        logger.warning(f"Dropped reserved context keys from untrusted caller: {', '.join(reserved)}")
    return {key: value for key, value in context.items() if not key.startswith("_")}


# ============================================================================
# HEALTH ENDPOINTS
# ============================================================================


@api_bp.route("/health", methods=["GET"])
def health_check() -> Tuple[Response, int]:
    """
    Get logging engine health status
    ---
    tags:
      - health
    responses:
      200:
        description: Health check successful
        schema:
          type: object
          properties:
            status:
              type: string
              enum: ['healthy']
            timestamp:
              type: string
              description: Health check timestamp (ISO8601)
            producers:
              type: array
              items:
                type: string
            events_logged:
              type: integer
              description: Events logged by this process
            history_version:
              type: integer
              description: Changes whenever an event is stored
    """
    engine = get_engine()
    return (
        jsonify(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "producers": sorted(engine.producers),
                "events_logged": engine.counter.total,
                "history_version": engine.cache.value,
            }
        ),
        200,
    )


# ============================================================================
# EVENT ENDPOINTS
# ============================================================================


@api_bp.route("/events", methods=["POST"])
@require_token
@marks_rest_api_request
def log_event() -> Tuple[Response, int]:
    """
    Log an event for a registered producer
    ---
    tags:
      - events
    security:
      - Bearer: []
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          required: [producer, level]
          properties:
            producer:
              type: string
              description: Slug of a registered producer
            level:
              type: string
              enum: [emergency, alert, critical, error, warning, notice, info, debug]
            message:
              type: string
              description: Literal message (source language)
            message_key:
              type: string
              description: Key of a message declared by the producer
            context:
              type: object
              description: Key/value context for the event; reserved "_" keys need a trusted token
    responses:
      201:
        description: Event logged
      202:
        description: Event accepted but not logged (vetoed or storage failure)
      400:
        description: Invalid request body
      401:
        description: Missing or invalid token
      404:
        description: Unknown producer
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    level = data.get("level")
    if not isinstance(level, str) or not LogLevel.is_valid(level.lower()):
        return jsonify({"error": f"Invalid level: {level!r}"}), 400

    message = data.get("message")
    message_key = data.get("message_key")
    if not message and not message_key:
        return jsonify({"error": "Either message or message_key is required"}), 400
    if message_key and not isinstance(message_key, str):
        return jsonify({"error": "message_key must be a string"}), 400

    context = data.get("context") or {}
    if not isinstance(context, dict):
        return jsonify({"error": "context must be an object"}), 400
    context = caller_context(context)

    slug = data.get("producer")
    if not isinstance(slug, str):
        return jsonify({"error": "producer is required"}), 400

    producer = get_engine().get_producer(slug)
    if producer is None:
        logger.warning(f"Event for unknown producer {slug!r} rejected")
        return jsonify({"error": f"Unknown producer: {slug!r}"}), 404

    if message_key:
        event_id = producer.log_by_key(level, message_key, context)
    else:
        event_id = producer.log(level, message, context)

    if event_id is None:
        return jsonify({"logged": False}), 202
    return jsonify({"logged": True, "id": event_id}), 201


@api_bp.route("/events/<int:event_id>/context", methods=["POST"])
@require_token
@marks_rest_api_request
def append_event_context(event_id: int) -> Tuple[Response, int]:
    """
    Append context to an already logged event
    ---
    tags:
      - events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: integer
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          required: [context]
          properties:
            context:
              type: object
    responses:
      201:
        description: Context written
      202:
        description: Nothing written (empty context or storage failure)
      400:
        description: Invalid request body
      401:
        description: Missing or invalid token
    """
    data = request.get_json(silent=True)
    context = data.get("context") if isinstance(data, dict) else None
    if not isinstance(context, dict):
        return jsonify({"error": "context must be an object"}), 400

    written = get_engine().append_context(event_id, caller_context(context))
    return jsonify({"written": written}), 201 if written else 202
