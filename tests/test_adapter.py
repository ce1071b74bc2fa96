import time

from adapter import GamepadAdapter
from core.events import ButtonEvent, ErrorEvent, MoveEvent
from core.reader import ConnectResult, PollingGamepadReader


class FakeReader:
    def __init__(self, ok=True):
        self.ok = ok
        self.subs = []
        self.stopped = False

    def subscribe(self, callback):
        self.subs.append(callback)

    def connect(self):
        return ConnectResult.success() if self.ok else ConnectResult.failure("device not found")

    def stop(self):
        self.stopped = True

    def emit(self, event):
        for cb in self.subs:
            cb(event)


class FakeTimer:
    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fn()


def make_adapter(outcomes, delay=2.0):
    readers = []
    timers = []

    def factory():
        reader = FakeReader(outcomes.pop(0))
        readers.append(reader)
        return reader

    def timer_factory(d, fn):
        timer = FakeTimer(d, fn)
        timers.append(timer)
        return timer

    adapter = GamepadAdapter(0, factory, delay, timer_factory=timer_factory)
    return adapter, readers, timers


def test_failed_connect_retries_on_fixed_delay():
    adapter, readers, timers = make_adapter([False, False, True])
    adapter.start()
    assert not adapter.connected
    assert len(timers) == 1 and timers[0].delay == 2.0 and timers[0].started

    timers[0].fire()
    assert len(timers) == 2 and timers[1].delay == 2.0

    timers[1].fire()
    assert adapter.connected
    assert len(readers) == 3
    assert len(timers) == 2


def test_events_reach_translator():
    adapter, readers, _ = make_adapter([True])
    adapter.start()
    readers[0].emit(ButtonEvent("up", True))
    readers[0].emit(MoveEvent("joystick_left", 128, 128))
    snap = adapter.translator.snapshot
    assert snap.digital_buttons == {"up": True}
    assert snap.analog_mode is True
    assert "analog/0 true\n" in adapter.scratchify()


def test_error_event_reinitializes_with_fresh_state():
    adapter, readers, timers = make_adapter([True, True])
    adapter.start()
    readers[0].emit(ButtonEvent("start", True))

    readers[0].emit(ErrorEvent("unplugged"))
    assert not adapter.connected
    assert timers[0].delay == 2.0

    timers[0].fire()
    assert readers[0].stopped
    assert len(readers) == 2 and adapter.connected
    assert adapter.translator.snapshot.digital_buttons == {}
    assert "button/start/0 undefined\n" in adapter.scratchify()


def test_repeated_errors_schedule_one_retry():
    adapter, readers, timers = make_adapter([True, True])
    adapter.start()
    readers[0].emit(ErrorEvent("a"))
    readers[0].emit(ErrorEvent("b"))
    assert len(timers) == 1


def test_stop_cancels_retry():
    adapter, readers, timers = make_adapter([False, True])
    adapter.start()
    adapter.stop()
    assert timers[0].cancelled

    timers[0].fire()
    assert len(readers) == 1


def test_stop_closes_reader():
    adapter, readers, _ = make_adapter([True])
    adapter.start()
    adapter.stop()
    assert readers[0].stopped
    assert not adapter.connected


def test_failing_reads_wait_before_reconnecting():
    opened = []

    class FailingPoll(PollingGamepadReader):
        def _open(self):
            opened.append(time.monotonic())

        def _poll(self):
            raise OSError("read error")

    adapter = GamepadAdapter(0, FailingPoll, reconnect_delay=0.5)
    adapter.start()
    time.sleep(0.3)
    adapter.stop()
    assert len(opened) == 1
    assert not adapter.connected
