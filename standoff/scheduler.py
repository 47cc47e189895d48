# standoff/scheduler.py
import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

TURN = "turn"      # selection window ran out
PAUSE = "pause"    # post-resolution pause is over


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class TimerHandle:
    room_id: str
    kind: str
    delay_ms: int
    fires_at: int
    token: int
    cancelled: bool = False


class TurnScheduler:
    """One cancellable timer per room.

    - arm() always cancels whatever the room had pending first
    - timers run as Socket.IO background tasks; with autostart off (tests)
      handles are only recorded and must be fired by hand
    - a handle acts at most once, and only while it is still current;
      on_fire callbacks call claim() to check that under the room lock
    """

    def __init__(self, socketio, on_fire: Callable[[TimerHandle], None], autostart: bool = True):
        self.socketio = socketio
        self.on_fire = on_fire
        self.autostart = autostart
        self._handles: Dict[str, TimerHandle] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def arm(self, room_id: str, kind: str, delay_ms: int) -> TimerHandle:
        handle = TimerHandle(
            room_id=room_id,
            kind=kind,
            delay_ms=delay_ms,
            fires_at=now_ms() + delay_ms,
            token=next(self._tokens),
        )
        with self._lock:
            previous = self._handles.get(room_id)
            if previous is not None:
                previous.cancelled = True
            self._handles[room_id] = handle
        logger.info("[timer-set] room=%s kind=%s delay=%sms token=%s", room_id, kind, delay_ms, handle.token)
        if self.autostart:
            self.socketio.start_background_task(self._run, handle)
        return handle

    def cancel(self, room_id: str) -> Optional[TimerHandle]:
        with self._lock:
            handle = self._handles.pop(room_id, None)
        if handle is not None:
            handle.cancelled = True
            logger.info("[timer-cancel] room=%s kind=%s token=%s", room_id, handle.kind, handle.token)
        return handle

    def pending(self, room_id: str) -> Optional[TimerHandle]:
        return self._handles.get(room_id)

    def claim(self, handle: TimerHandle) -> bool:
        with self._lock:
            if handle.cancelled or self._handles.get(handle.room_id) is not handle:
                return False
            del self._handles[handle.room_id]
            return True

    def fire(self, handle: TimerHandle) -> None:
        if handle.cancelled:
            logger.info("[timer-abort] room=%s kind=%s token=%s cancelled", handle.room_id, handle.kind, handle.token)
            return
        logger.info("[timer-fire] room=%s kind=%s token=%s", handle.room_id, handle.kind, handle.token)
        self.on_fire(handle)

    def _run(self, handle: TimerHandle) -> None:
        self.socketio.sleep(handle.delay_ms / 1000.0)
        self.fire(handle)
