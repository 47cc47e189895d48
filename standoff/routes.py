# standoff/routes.py
from flask import Blueprint, current_app, jsonify

from .server import snapshot_for

standoff_bp = Blueprint("standoff", __name__)


def _server():
    return current_app.extensions["standoff"]


@standoff_bp.route("/health")
def health():
    return jsonify({"status": "ok", "rooms": len(_server().registry)})


@standoff_bp.route("/rooms/<string:room_id>")
def room_state(room_id):
    room = _server().registry.get(room_id.upper())
    if room is None:
        return jsonify({"error": "Room not found"}), 404
    with room.lock:
        return jsonify({"roomId": room.room_id, "state": snapshot_for(room.state)})
