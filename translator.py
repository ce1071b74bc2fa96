"""Translation engine: accumulate device events into a ControllerSnapshot and
render it as Scratch 2.0 poll text.

Besides plain bookkeeping the translator smooths over the two modes of cheap
dual-stick pads. In digital mode the left stick doubles as a D-pad and the face
buttons 1..4 drive the right stick, so Scratch projects see the same controls
whichever mode the pad is in.
"""
import logging
import math
import threading

from core.events import ButtonEvent, MoveEvent
from core.state import (
    ANALOG_IDLE,
    BUTTONS,
    DIGITAL_IDLE,
    ControllerSnapshot,
)

LOG = logging.getLogger("padbridge.translator")

UNDEFINED = "undefined"

# (output name, snapshot key) for the buttons rendered verbatim
_PLAIN_BUTTONS = (
    ("1", "1"), ("2", "2"), ("3", "3"), ("4", "4"),
    ("l1", "l1"), ("l2", "l2"), ("r1", "r1"), ("r2", "r2"),
    ("joystick_left", "joystick_left_button"),
    ("joystick_right", "joystick_right_button"),
    ("select", "select"), ("start", "start"),
)

# (glyph, button, left-stick component, raw value that stands in for the button)
_DIRECTIONS = (
    ("˄", "up", "y", 0),
    ("˃", "right", "x", 255),
    ("˅", "down", "y", 255),
    ("˂", "left", "x", 0),
)


def analog_xy_to_scratch(value, negate, mid):
    """Map a raw byte to [-100, 100] around `mid`; `mid` or a non-number maps to 0."""
    result = 0
    if isinstance(value, (int, float)):
        if value > mid:
            result = 100 * (value - mid) / (255 - mid)
        if value < mid:
            result = -100 + 100 * value / mid
    if negate:
        result *= -1
    return result


def xy_to_angle(x, y):
    """Stick direction in degrees; 90 at rest."""
    if x == 0 and y == 0:
        return 90
    result = 180 * math.atan2(x, y) / math.pi
    return 90 if math.isnan(result) else result


def format_bool(value):
    if value is None:
        return UNDEFINED
    return "true" if value else "false"


def format_number(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value) if isinstance(value, int) else repr(value)


def _button_pair(plus, minus):
    if plus and not minus:
        return 100
    if minus and not plus:
        return -100
    return 0


class GamepadTranslator:
    """Owns one slot's snapshot; `apply` and `scratchify` may run on different threads."""

    def __init__(self, device_index: int):
        self.device_index = device_index
        self._lock = threading.Lock()
        self._snapshot = ControllerSnapshot(device_index)
        self._handlers = {
            ButtonEvent: self._on_button,
            MoveEvent: self._on_move,
        }

    @property
    def snapshot(self) -> ControllerSnapshot:
        return self._snapshot

    def reset(self):
        with self._lock:
            self._snapshot = ControllerSnapshot(self.device_index)
        LOG.debug("slot %d state reset", self.device_index)

    def apply(self, event):
        handler = self._handlers.get(type(event))
        if handler is None:
            LOG.debug("slot %d ignoring %r", self.device_index, event)
            return
        with self._lock:
            handler(self._snapshot, event)

    def _on_button(self, snap, event: ButtonEvent):
        if event.control not in BUTTONS:
            LOG.debug("slot %d ignoring unknown control %r", self.device_index, event.control)
            return
        snap.digital_buttons[event.control] = bool(event.pressed)

    def _on_move(self, snap, event: MoveEvent):
        if event.joystick == "joystick_left":
            axis = snap.left_axis
            # the idle byte tells the modes apart: 128 analog, 127 digital
            if event.x == ANALOG_IDLE:
                snap.analog_mode = True
            elif event.x == DIGITAL_IDLE:
                snap.analog_mode = False
        elif event.joystick == "joystick_right":
            axis = snap.right_axis
        else:
            LOG.debug("slot %d ignoring unknown joystick %r", self.device_index, event.joystick)
            return
        axis.x = event.x
        axis.y = event.y

    def scratchify(self) -> str:
        with self._lock:
            return render(self._snapshot)


def render(snap: ControllerSnapshot) -> str:
    """Render a snapshot as poll lines; never raises on missing data."""
    idx = str(snap.device_index)
    buttons = snap.digital_buttons
    analog = bool(snap.analog_mode)
    mid = ANALOG_IDLE if analog else DIGITAL_IDLE
    left = snap.left_axis
    right = snap.right_axis
    lines = []

    for glyph, name, component, stand_in in _DIRECTIONS:
        pressed = bool(buttons.get(name)) or (not analog and getattr(left, component) == stand_in)
        lines.append(f"button/{glyph}/{idx} {format_bool(pressed)}")

    for label, key in _PLAIN_BUTTONS:
        lines.append(f"button/{label}/{idx} {format_bool(buttons.get(key))}")

    left_x = analog_xy_to_scratch(left.x, False, mid)
    left_y = analog_xy_to_scratch(left.y, True, mid)
    lines.append(f"joystick/x/left/{idx} {format_number(left_x)}")
    lines.append(f"joystick/y/left/{idx} {format_number(left_y)}")
    lines.append(f"joystick_angle/left/{idx} {format_number(xy_to_angle(left_x, left_y))}")

    if analog:
        right_x = analog_xy_to_scratch(right.x, False, mid)
        right_y = analog_xy_to_scratch(right.y, True, mid)
    else:
        right_x = _button_pair(buttons.get("2"), buttons.get("4"))
        right_y = _button_pair(buttons.get("1"), buttons.get("3"))
    lines.append(f"joystick/x/right/{idx} {format_number(right_x)}")
    lines.append(f"joystick/y/right/{idx} {format_number(right_y)}")
    lines.append(f"joystick_angle/right/{idx} {format_number(xy_to_angle(right_x, right_y))}")

    lines.append(f"analog/{idx} {format_bool(snap.analog_mode)}")
    return "".join(line + "\n" for line in lines)
