# standoff/server.py
"""
Room and turn lifecycle for online duels.

Every inbound event (create, join, action, next round, disconnect, timer)
runs to completion under its room's lock, broadcast included, so two events
for the same room never interleave.
"""
import logging
from typing import Any, Dict, Optional

from .engine import resolver, rounds
from .engine.dice import rng_for
from .engine.modes import DEFAULT_MODE, parse_mode, resolve_config
from .engine.models import GameState
from .exceptions import InvalidState, RoomFull
from .scheduler import PAUSE, TURN, TimerHandle, TurnScheduler, now_ms
from .state import Room, RoomRegistry, SessionBinding

logger = logging.getLogger(__name__)

DEFAULT_RESOLVE_PAUSE_MS = 2000
NAMESPACE = "/"


def snapshot_for(state: GameState) -> Dict[str, Any]:
    """
    Wire form of a game state. Pending actions only say whether a seat has
    committed, never what it picked.
    """
    return {
        "players": [p.to_dict() for p in state.players],
        "round": state.round,
        "isRoundOver": state.is_round_over,
        "winnerId": state.winner_id,
        "log": list(state.log),
        "gameStarted": state.game_started,
        "pendingActions": {str(pid): action is not None for pid, action in state.pending_actions.items()},
        "turnEndsAt": state.turn_ends_at,
        "config": state.config.to_dict(),
        "totalTurns": state.total_turns,
    }


class DuelServer:
    def __init__(
        self,
        socketio,
        registry: Optional[RoomRegistry] = None,
        sessions: Optional[SessionBinding] = None,
        resolve_pause_ms: int = DEFAULT_RESOLVE_PAUSE_MS,
        autostart_timers: bool = True,
        default_mode=DEFAULT_MODE,
    ):
        self.socketio = socketio
        self.registry = registry or RoomRegistry()
        self.sessions = sessions or SessionBinding()
        self.scheduler = TurnScheduler(socketio, self.on_timer, autostart=autostart_timers)
        self.resolve_pause_ms = resolve_pause_ms
        self.default_mode = parse_mode(default_mode)

    # ---- transport helpers ----

    def _enter(self, sid: str, room_id: str) -> None:
        self.socketio.server.enter_room(sid, room_id, namespace=NAMESPACE)

    def _send(self, event: str, payload: Dict[str, Any], to: str) -> None:
        self.socketio.emit(event, payload, to=to, namespace=NAMESPACE)

    def broadcast(self, room: Room) -> None:
        self._send("stateUpdate", {"state": snapshot_for(room.state)}, to=room.room_id)

    # ---- turn scheduling ----

    def start_turn(self, room: Room) -> None:
        state = room.state
        duration = state.config.turn_duration_ms
        state.pending_actions = {1: None, 2: None}
        state.turn_ends_at = now_ms() + duration
        self.scheduler.arm(room.room_id, TURN, duration)
        state.push_log(f"New action selection. You have {duration // 1000} seconds.")

    def resolve(self, room: Room, auto_filled=None) -> None:
        state = room.state
        r = rng_for(room.seed, state.total_turns)
        outcome = resolver.resolve_turn(state, r, auto_filled)
        state.turn_ends_at = None
        if outcome.round_over:
            self.scheduler.cancel(room.room_id)
        else:
            self.scheduler.arm(room.room_id, PAUSE, self.resolve_pause_ms)
        logger.info(
            "[turn-resolved] room=%s turn=%s result=%s winner=%s auto=%s",
            room.room_id, state.total_turns, outcome.result, outcome.winner_id, outcome.auto_filled,
        )
        self.broadcast(room)

    def on_timer(self, handle: TimerHandle) -> None:
        room = self.registry.get(handle.room_id)
        if room is None:
            logger.info("[timer-abort] room=%s gone", handle.room_id)
            return
        with room.lock:
            if not self.scheduler.claim(handle):
                logger.info("[timer-abort] room=%s token=%s superseded", handle.room_id, handle.token)
                return
            state = room.state
            if not state.game_started or state.is_round_over:
                return
            if handle.kind == TURN:
                r = rng_for(room.seed, f"{state.total_turns}:auto")
                filled = resolver.auto_fill(state, r)
                state.push_log("Time's up. Automatic actions were chosen.")
                self.resolve(room, filled)
            elif handle.kind == PAUSE:
                self.start_turn(room)
                self.broadcast(room)

    # ---- inbound events ----

    def create_room(self, sid: str, player_name: Optional[str], mode=None, custom_config=None) -> Room:
        self.leave_current(sid)
        config = resolve_config(mode, custom_config, default=self.default_mode)
        room = self.registry.create(player_name or "Player 1", config, sid)
        with room.lock:
            self.sessions.bind(sid, room.room_id, 1)
            self._enter(sid, room.room_id)
            self._send("roomCreated", {
                "roomId": room.room_id,
                "playerId": 1,
                "state": snapshot_for(room.state),
            }, to=sid)
        return room

    def join_room(self, sid: str, room_id: Optional[str], player_name: Optional[str]) -> Room:
        current = self.sessions.get(sid)
        if current is not None and current.room_id == room_id:
            raise RoomFull(room_id)
        if self.registry.require(room_id).sockets[2]:
            raise RoomFull(room_id)
        self.leave_current(sid)
        # the room may have been dropped or filled in the meantime
        room = self.registry.require(room_id)
        with room.lock:
            if room.sockets[2]:
                raise RoomFull(room_id)
            state = room.state
            joiner = state.player(2)
            joiner.name = player_name or "Player 2"
            room.sockets[2] = sid
            self.sessions.bind(sid, room.room_id, 2)
            self._enter(sid, room.room_id)

            state.game_started = True
            state.push_log(f"{joiner.name} joins the room. The duel begins!")
            if not state.is_round_over:
                self.start_turn(room)
            logger.info("[room-joined] room=%s player=%s", room.room_id, joiner.name)

            self._send("roomJoined", {
                "roomId": room.room_id,
                "playerId": 2,
                "state": snapshot_for(state),
            }, to=sid)
            self.broadcast(room)
        return room

    def choose_action(self, sid: str, room_id: Optional[str], action: Any) -> None:
        player_id = self.sessions.authorize(sid, room_id)
        room = self.registry.require(room_id)
        with room.lock:
            state = room.state
            resolver.submit_action(state, player_id, action)
            state.push_log(f"{state.player(player_id).name} has chosen an action.")
            if resolver.ready_to_resolve(state):
                self.scheduler.cancel(room.room_id)
                self.resolve(room)
            else:
                self.broadcast(room)

    def next_round(self, sid: str, room_id: Optional[str]) -> None:
        self.sessions.authorize(sid, room_id)
        room = self.registry.require(room_id)
        with room.lock:
            if not all(room.sockets.values()):
                raise InvalidState("Cannot start a round without both players", {"room_id": room_id})
            if not rounds.next_round(room.state):
                raise InvalidState("Round is still in progress", {"room_id": room_id})
            self.start_turn(room)
            self.broadcast(room)

    def disconnect(self, sid: str) -> None:
        self.leave_current(sid)

    def leave_current(self, sid: str) -> None:
        binding = self.sessions.unbind(sid)
        if binding is None:
            return
        room = self.registry.get(binding.room_id)
        if room is None:
            return
        with room.lock:
            state = room.state
            player = state.player(binding.player_id)
            room.sockets[binding.player_id] = None
            state.push_log(f"{player.name} has disconnected.")

            if room.is_empty():
                self.scheduler.cancel(room.room_id)
                self.registry.delete(room.room_id)
                return

            if room.other_bound(binding.player_id) and state.game_started:
                winner = state.opponent(binding.player_id)
                if rounds.forfeit(state, winner.id):
                    logger.info("[forfeit] room=%s winner=%s", room.room_id, winner.name)
            self.scheduler.cancel(room.room_id)
            state.turn_ends_at = None
            self.broadcast(room)
