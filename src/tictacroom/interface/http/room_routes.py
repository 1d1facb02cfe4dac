from __future__ import annotations

from typing import Any
from uuid import uuid4

from flask import Blueprint, current_app, jsonify, request

from tictacroom.infrastructure.transport import (
    ParticipantExistsError,
    ParticipantNotFoundError,
    RoomHost,
)
from tictacroom.interface.telemetry.logging import bind_trace, get_logger

room_bp = Blueprint("room", __name__)
logger = get_logger("tictacroom.api.room")


def _room_host() -> RoomHost:
    return current_app.extensions["room_host"]


def _trace_id() -> str:
    return request.headers.get("X-Trace-Id") or uuid4().hex


def _transport_error(code: str, message: str, status: int = 400, detail: Any | None = None):
    payload: dict[str, Any] = {"code": code, "message": message}
    if detail is not None:
        payload["detail"] = detail
    return jsonify(payload), status


@room_bp.post("/participants")
def connect_participant():
    payload = request.get_json(silent=True) or {}
    trace_id = _trace_id()

    participant_id = payload.get("participantId") or uuid4().hex
    if not isinstance(participant_id, str):
        return _transport_error("invalid_participant_id", "participantId must be a string.")

    log = bind_trace(logger, trace_id, participant_id=participant_id)
    try:
        _room_host().bus.connect(participant_id)
    except ParticipantExistsError as exc:
        log.warning("participant_exists")
        return _transport_error(exc.code, str(exc), status=409)

    return jsonify({"participantId": participant_id, "traceId": trace_id}), 201


@room_bp.delete("/participants/<participant_id>")
def disconnect_participant(participant_id: str):
    log = bind_trace(logger, _trace_id(), participant_id=participant_id)
    try:
        _room_host().bus.disconnect(participant_id)
    except ParticipantNotFoundError as exc:
        log.warning("participant_not_found")
        return _transport_error(exc.code, str(exc), status=404)
    return "", 204


@room_bp.post("/participants/<participant_id>/messages")
def post_message(participant_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, participant_id=participant_id)

    host = _room_host()
    if not host.bus.is_connected(participant_id):
        log.warning("participant_not_found")
        return _transport_error(
            ParticipantNotFoundError.code,
            f"Participant {participant_id} is not connected.",
            status=404,
        )

    message = request.get_json(silent=True)
    if message is None:
        return _transport_error("invalid_message", "Request body must be a JSON value.")

    delivered = host.receive(participant_id, message)
    log.info(
        "message_processed",
        command=message.get("command") if isinstance(message, dict) else None,
        delivered=delivered,
    )
    return jsonify({"delivered": delivered, "traceId": trace_id}), 202


@room_bp.get("/participants/<participant_id>/messages")
def poll_messages(participant_id: str):
    try:
        messages = _room_host().bus.drain(participant_id)
    except ParticipantNotFoundError as exc:
        bind_trace(logger, _trace_id(), participant_id=participant_id).warning("participant_not_found")
        return _transport_error(exc.code, str(exc), status=404)
    return jsonify({"messages": messages}), 200


@room_bp.get("/state")
def room_state():
    host = _room_host()
    snapshot = host.manager.snapshot()
    snapshot["participants"] = len(host.bus.participants())
    return jsonify(snapshot), 200


__all__ = ["room_bp"]
