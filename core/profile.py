"""Device profiles: YAML descriptions of how a gamepad reports its controls.

A `hid` profile names byte positions ("pins") inside the raw HID report::

    name: Generic USB gamepad
    backend: hid
    vendor_id: 0x0079
    product_id: 0x0006
    report_size: 8
    joysticks:
      joystick_left: {x: {pin: 3}, y: {pin: 4}}
    buttons:
      - {name: "1", pin: 5, value: 0x10}
      - {name: up, pin: 5, mask: 0x0f, value: 0}

A button is pressed when `report[pin] & mask == value`; `mask` defaults to
`value`. A `pygame` profile maps SDL axis/button/hat indices instead.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import yaml

from core.state import BUTTONS, JOYSTICKS

LOG = logging.getLogger("padbridge.profile")

BACKENDS = ("hid", "pygame")
DIRECTIONS = ("up", "right", "down", "left")


class ProfileError(ValueError):
    pass


@dataclass(frozen=True)
class ButtonSpec:
    name: str
    pin: int
    value: int
    mask: int

    def pressed(self, report) -> bool:
        return (report[self.pin] & self.mask) == self.value


@dataclass
class GamepadProfile:
    name: str
    backend: str
    vendor_id: Optional[int] = None
    product_id: Optional[int] = None
    report_size: int = 64
    joysticks: Dict[str, Tuple[int, int]] = field(default_factory=dict)  # name -> (x pin, y pin)
    buttons: List[ButtonSpec] = field(default_factory=list)
    # pygame backend
    joystick: int = 0
    axes: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    button_map: Dict[int, str] = field(default_factory=dict)
    hat: Optional[int] = None

    @classmethod
    def load(cls, path: str):
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ProfileError(f"{path}: {e}")
        LOG.debug("loaded profile %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ProfileError("profile must be a mapping")
        backend = data.get("backend", "hid")
        if backend not in BACKENDS:
            raise ProfileError(f"unknown backend {backend!r}")
        profile = cls(name=str(data.get("name", backend)), backend=backend)
        if backend == "hid":
            profile._load_hid(data)
        else:
            profile._load_pygame(data)
        return profile

    def _load_hid(self, data):
        self.vendor_id = _int(data.get("vendor_id"), "vendor_id")
        self.product_id = _int(data.get("product_id"), "product_id")
        self.report_size = _int(data.get("report_size", 64), "report_size")
        if self.report_size < 1:
            raise ProfileError(f"report_size must be positive, got {self.report_size}")
        for js_name, pins in _mapping(data, "joysticks").items():
            _check_joystick(js_name)
            try:
                x_pin, y_pin = int(pins["x"]["pin"]), int(pins["y"]["pin"])
            except (KeyError, TypeError, ValueError):
                raise ProfileError(f"joystick {js_name!r} needs x.pin and y.pin")
            for pin in (x_pin, y_pin):
                self._check_pin(js_name, pin)
            self.joysticks[js_name] = (x_pin, y_pin)
        buttons = data.get("buttons") or []
        if not isinstance(buttons, list):
            raise ProfileError("buttons must be a list")
        for entry in buttons:
            try:
                name = str(entry["name"])
                pin = int(entry["pin"])
                value = int(entry["value"])
                mask = int(entry.get("mask", value))
            except (AttributeError, KeyError, TypeError, ValueError):
                raise ProfileError(f"bad button entry {entry!r}")
            _check_button(name)
            if mask == 0:
                raise ProfileError(f"button {name!r} needs a non-zero mask")
            self._check_pin(name, pin)
            self.buttons.append(ButtonSpec(name, pin, value, mask))

    def _check_pin(self, name, pin):
        if not 0 <= pin < self.report_size:
            raise ProfileError(f"{name!r} pin {pin} is outside the {self.report_size}-byte report")

    def _load_pygame(self, data):
        self.joystick = _int(data.get("joystick", 0), "joystick")
        for js_name, pair in _mapping(data, "axes").items():
            _check_joystick(js_name)
            try:
                x_axis, y_axis = pair
                self.axes[js_name] = (int(x_axis), int(y_axis))
            except (TypeError, ValueError):
                raise ProfileError(f"axes for {js_name!r} must be [x_axis, y_axis]")
        for idx, name in _mapping(data, "buttons").items():
            name = str(name)
            _check_button(name)
            self.button_map[_int(idx, "button index")] = name
        hat = data.get("hat")
        self.hat = None if hat is None else _int(hat, "hat")


def _int(value, what):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ProfileError(f"{what} must be an integer, got {value!r}")


def _mapping(data, key):
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ProfileError(f"{key} must be a mapping")
    return value


def _check_button(name):
    if name not in BUTTONS:
        raise ProfileError(f"unknown button {name!r}")


def _check_joystick(name):
    if name not in JOYSTICKS:
        raise ProfileError(f"unknown joystick {name!r}")
