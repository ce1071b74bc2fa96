"""Base reader abstraction"""
import abc
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from core.events import ButtonEvent, MoveEvent, ErrorEvent
from core.state import DecodedFrame

LOG = logging.getLogger("padbridge.reader")


@dataclass(frozen=True)
class ConnectResult:
    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls):
        return cls(True)

    @classmethod
    def failure(cls, error):
        return cls(False, str(error))


class DeviceReader(abc.ABC):
    @abc.abstractmethod
    def connect(self) -> ConnectResult:
        raise NotImplementedError

    @abc.abstractmethod
    def stop(self):
        raise NotImplementedError

    @abc.abstractmethod
    def subscribe(self, callback):
        raise NotImplementedError


class PollingGamepadReader(DeviceReader):
    """Polls a device on a worker thread and emits events for what changed.

    Subclasses implement `_open()` (raising when the device is absent),
    `_poll()` returning a DecodedFrame or None, and `_close()`. Any exception
    from `_poll()` ends the loop with an ErrorEvent.
    """

    name = "gamepad"

    def __init__(self):
        self._subs = []
        self._t = None
        self._stop = threading.Event()
        self._last_frame = None

    def subscribe(self, callback):
        self._subs.append(callback)

    def connect(self) -> ConnectResult:
        try:
            self._open()
        except Exception as e:
            return ConnectResult.failure(e)
        self._stop.clear()
        self._last_frame = None
        self._t = threading.Thread(target=self._loop, name=type(self).__name__, daemon=True)
        self._t.start()
        return ConnectResult.success()

    def stop(self):
        self._stop.set()
        # an error handler may stop the reader from inside its own thread
        if self._t and self._t is not threading.current_thread():
            self._t.join(timeout=1.0)
        try:
            self._close()
        except Exception:
            LOG.exception("error closing %s", self.name)

    @abc.abstractmethod
    def _open(self):
        raise NotImplementedError

    @abc.abstractmethod
    def _poll(self) -> Optional[DecodedFrame]:
        raise NotImplementedError

    def _close(self):
        pass

    def _emit(self, event):
        LOG.debug("%s event -> %s", self.name, event)
        for cb in self._subs:
            try:
                cb(event)
            except Exception:
                LOG.exception("subscriber callback failed")

    def _publish_changes(self, frame: DecodedFrame):
        prev = self._last_frame
        self._last_frame = frame
        for control, pressed in frame.buttons.items():
            before = prev.buttons.get(control, False) if prev else False
            if pressed != before:
                self._emit(ButtonEvent(control, pressed))
        for joystick, (x, y) in frame.joysticks.items():
            if prev is None or prev.joysticks.get(joystick) != (x, y):
                self._emit(MoveEvent(joystick, x, y))

    def _loop(self):
        while not self._stop.is_set():
            try:
                frame = self._poll()
            except Exception as e:
                LOG.exception("error reading %s; will attempt reconnect", self.name)
                self._emit(ErrorEvent(str(e)))
                return
            if frame is not None:
                self._publish_changes(frame)
