# standoff/state.py
import logging
import secrets
import string
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .engine.models import GameState, DuelConfig
from .engine.rounds import new_game_state
from .exceptions import RoomNotFound, Unauthorized

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class Room:
    room_id: str
    state: GameState
    sockets: Dict[int, Optional[str]] = field(default_factory=lambda: {1: None, 2: None})
    seed: int = 0                          # for deterministic dice
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def is_empty(self) -> bool:
        return not any(self.sockets.values())

    def other_bound(self, player_id: int) -> bool:
        return bool(self.sockets.get(3 - player_id))


@dataclass(frozen=True)
class Binding:
    room_id: str
    player_id: int


class RoomRegistry:
    """Live rooms by code. Owned by the DuelServer, never global."""

    def __init__(self, code_length: int = 6):
        self.code_length = code_length
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def generate_code(self) -> str:
        return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(self.code_length))

    def create(self, creator_name: str, config: DuelConfig, creator_sid: str) -> Room:
        state = new_game_state(config, creator_name)
        seed = int(time.time() * 1000) & 0xFFFFFFFF
        with self._lock:
            room_id = self.generate_code()
            while room_id in self._rooms:
                room_id = self.generate_code()
            room = Room(room_id=room_id, state=state, seed=seed)
            room.sockets[1] = creator_sid
            self._rooms[room_id] = room
        logger.info("[room-created] room=%s mode=%s creator=%s", room_id, config.mode, creator_name)
        return room

    def get(self, room_id: Optional[str]) -> Optional[Room]:
        if not room_id:
            return None
        return self._rooms.get(room_id)

    def require(self, room_id: Optional[str]) -> Room:
        room = self.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def delete(self, room_id: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.pop(room_id, None)
        if room:
            logger.info("[room-deleted] room=%s", room_id)
        return room


class SessionBinding:
    """Which room and seat each live connection plays."""

    def __init__(self):
        self._bindings: Dict[str, Binding] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._bindings)

    def bind(self, sid: str, room_id: str, player_id: int) -> Binding:
        binding = Binding(room_id=room_id, player_id=player_id)
        with self._lock:
            self._bindings[sid] = binding
        return binding

    def unbind(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._bindings.pop(sid, None)

    def get(self, sid: str) -> Optional[Binding]:
        return self._bindings.get(sid)

    def authorize(self, sid: str, room_id: Optional[str]) -> int:
        binding = self._bindings.get(sid)
        if binding is None or binding.room_id != room_id:
            raise Unauthorized(sid, room_id)
        return binding.player_id
