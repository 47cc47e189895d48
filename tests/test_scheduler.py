import pytest

from standoff.scheduler import PAUSE, TURN, TurnScheduler


class FakeSocketIO:
    def __init__(self):
        self.tasks = []
        self.slept = []

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, seconds):
        self.slept.append(seconds)


@pytest.fixture()
def fired():
    return []


@pytest.fixture()
def scheduler(fired):
    return TurnScheduler(FakeSocketIO(), fired.append, autostart=False)


def test_arm_records_pending_handle(scheduler):
    handle = scheduler.arm("ROOM01", TURN, 10000)
    assert scheduler.pending("ROOM01") is handle
    assert handle.kind == TURN and handle.delay_ms == 10000
    assert handle.fires_at >= 10000
    assert not scheduler.socketio.tasks


def test_rearming_cancels_previous_handle(scheduler, fired):
    first = scheduler.arm("ROOM01", TURN, 10000)
    second = scheduler.arm("ROOM01", PAUSE, 2000)
    assert first.cancelled and not second.cancelled
    assert scheduler.pending("ROOM01") is second

    scheduler.fire(first)
    assert fired == []
    assert not scheduler.claim(first)


def test_claim_succeeds_only_once(scheduler):
    handle = scheduler.arm("ROOM01", TURN, 10000)
    assert scheduler.claim(handle)
    assert not scheduler.claim(handle)
    assert scheduler.pending("ROOM01") is None


def test_cancel_marks_handle(scheduler, fired):
    handle = scheduler.arm("ROOM01", TURN, 10000)
    assert scheduler.cancel("ROOM01") is handle
    assert scheduler.cancel("ROOM01") is None
    scheduler.fire(handle)
    assert fired == []


def test_rooms_have_independent_timers(scheduler, fired):
    a = scheduler.arm("ROOM01", TURN, 10000)
    b = scheduler.arm("ROOM02", TURN, 10000)
    scheduler.cancel("ROOM01")
    scheduler.fire(a)
    scheduler.fire(b)
    assert fired == [b]


def test_autostart_runs_background_sleep_then_fire(fired):
    socketio = FakeSocketIO()
    scheduler = TurnScheduler(socketio, fired.append)
    handle = scheduler.arm("ROOM01", PAUSE, 2000)

    (target, args), = socketio.tasks
    target(*args)

    assert socketio.slept == [2.0]
    assert fired == [handle]
