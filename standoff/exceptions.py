# standoff/exceptions.py
"""
Error taxonomy for room and turn handling.

Only RoomNotFound and RoomFull are ever shown to a player; the rest are
caught at the socket boundary and dropped.
"""
from typing import Any, Dict, Optional


class StandoffError(Exception):
    """Base class for every duel-level error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RoomNotFound(StandoffError):
    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room not found", {"room_id": room_id} if room_id else None)
        self.room_id = room_id


class RoomFull(StandoffError):
    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room full", {"room_id": room_id} if room_id else None)
        self.room_id = room_id


class Unauthorized(StandoffError):
    """A connection acted on a room or seat it is not bound to."""

    def __init__(self, sid: Optional[str] = None, room_id: Optional[str] = None):
        details = {}
        if sid:
            details["sid"] = sid
        if room_id:
            details["room_id"] = room_id
        super().__init__("Connection is not bound to this room", details)


class InvalidState(StandoffError):
    """Stale or duplicate input: round over, paused, already submitted..."""
