"""Per-slot lifecycle: connect a reader, feed its events to a translator, and
re-initialize from scratch whenever the device fails.
"""
import logging
import threading

from core.events import ErrorEvent
from translator import GamepadTranslator

LOG = logging.getLogger("padbridge.adapter")

RECONNECT_DELAY = 2.0


class GamepadAdapter:
    def __init__(self, index: int, reader_factory, reconnect_delay: float = RECONNECT_DELAY,
                 timer_factory=threading.Timer):
        self.index = index
        self.translator = GamepadTranslator(index)
        self._reader_factory = reader_factory
        self._reconnect_delay = reconnect_delay
        self._timer_factory = timer_factory
        self._reader = None
        self._timer = None
        self._lock = threading.Lock()
        self._stopped = False
        self.connected = False

    def start(self):
        with self._lock:
            self._stopped = False
        self._initialize()

    def stop(self):
        with self._lock:
            self._stopped = True
            if self._timer:
                self._timer.cancel()
                self._timer = None
            reader, self._reader = self._reader, None
            self.connected = False
        if reader:
            reader.stop()

    def scratchify(self) -> str:
        return self.translator.scratchify()

    def _initialize(self):
        with self._lock:
            self._timer = None
            if self._stopped:
                return
            old, self._reader = self._reader, None
        if old:
            old.stop()

        # a fresh start drops everything the previous connection reported
        self.translator.reset()
        reader = self._reader_factory()
        reader.subscribe(self._on_event)
        result = reader.connect()
        if not result.ok:
            with self._lock:
                self.connected = False
            LOG.warning("slot %d: failed to connect to device (%s), retrying in %.1fs",
                        self.index, result.error, self._reconnect_delay)
            self._schedule(self._reconnect_delay)
            return
        with self._lock:
            stopped = self._stopped
            if not stopped:
                self._reader = reader
                # the reader may already have failed and scheduled a retry
                self.connected = self._timer is None
        if stopped:
            reader.stop()
            return
        LOG.info("slot %d: device connected", self.index)

    def _schedule(self, delay):
        with self._lock:
            if self._stopped or self._timer is not None:
                return
            self._timer = self._timer_factory(delay, self._initialize)
            self._timer.daemon = True
            self._timer.start()

    def _on_event(self, event):
        if isinstance(event, ErrorEvent):
            LOG.error("slot %d: device error: %s, reconnecting in %.1fs",
                      self.index, event.error, self._reconnect_delay)
            with self._lock:
                self.connected = False
            # re-initialize off the reader thread, which is about to exit
            self._schedule(self._reconnect_delay)
            return
        self.translator.apply(event)
