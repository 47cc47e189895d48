# standoff/sockets.py
import logging

from flask import request
from flask_socketio import emit

from .exceptions import InvalidState, RoomFull, RoomNotFound, Unauthorized

logger = logging.getLogger(__name__)


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def register_standoff_socket_handlers(socketio, server):
    @socketio.on("createRoom")
    def create_room(data=None):
        payload = _payload(data)
        server.create_room(
            request.sid,
            _text(payload.get("playerName")),
            mode=payload.get("mode"),
            custom_config=payload.get("customConfig"),
        )

    @socketio.on("joinRoom")
    def join_room(data=None):
        payload = _payload(data)
        room_id = _text(payload.get("roomId"))
        try:
            server.join_room(request.sid, room_id.upper() if room_id else None, _text(payload.get("playerName")))
        except (RoomNotFound, RoomFull) as exc:
            logger.info("[join-rejected] sid=%s room=%s reason=%s", request.sid, room_id, exc.message)
            emit("errorMessage", {"text": exc.message})

    @socketio.on("chooseAction")
    def choose_action(data=None):
        payload = _payload(data)
        try:
            server.choose_action(request.sid, _text(payload.get("roomId")), payload.get("action"))
        except (Unauthorized, RoomNotFound, InvalidState) as exc:
            logger.debug("chooseAction ignored: %s", exc)

    @socketio.on("nextRound")
    def next_round(data=None):
        payload = _payload(data)
        try:
            server.next_round(request.sid, _text(payload.get("roomId")))
        except (Unauthorized, RoomNotFound, InvalidState) as exc:
            logger.debug("nextRound ignored: %s", exc)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        server.disconnect(request.sid)
