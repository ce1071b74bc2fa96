"""Typed device events

Readers emit one of three event kinds. `event_from_name` converts the
string-keyed form (`up:press`, `joystick_left:move`, `error`) used by event-bus
style sources at the boundary, so nothing downstream dispatches on strings.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from core.state import BUTTONS, JOYSTICKS


@dataclass(frozen=True)
class ButtonEvent:
    control: str
    pressed: bool


@dataclass(frozen=True)
class MoveEvent:
    joystick: str
    x: Optional[int]
    y: Optional[int]


@dataclass(frozen=True)
class ErrorEvent:
    error: str


DeviceEvent = Union[ButtonEvent, MoveEvent, ErrorEvent]


def event_from_name(name: str, payload: Any = None) -> Optional[DeviceEvent]:
    """Build a typed event from `<control>:<action>`; None for unknown names."""
    if name == "error":
        return ErrorEvent(str(payload))
    control, sep, action = name.rpartition(":")
    if not sep:
        return None
    if action in ("press", "release") and control in BUTTONS:
        return ButtonEvent(control, action == "press")
    if action == "move" and control in JOYSTICKS:
        data = payload if isinstance(payload, Mapping) else {}
        return MoveEvent(control, data.get("x"), data.get("y"))
    return None
