"""Gamepad reader using SDL via pygame.joystick

For pads the OS already exposes as game controllers. Axes come back from SDL as
floats in [-1, 1] and are turned back into raw bytes, so an idle analog stick
reads 128 just like the HID backend.
"""
import logging

try:
    import pygame
except Exception:
    pygame = None

from core.profile import GamepadProfile
from core.reader import PollingGamepadReader
from core.state import DecodedFrame

LOG = logging.getLogger("padbridge.pygame")

POLL_INTERVAL = 1.0 / 120.0


def axis_to_byte(value: float) -> int:
    return max(0, min(255, int(round((value + 1.0) * 127.5))))


def hat_to_buttons(hat):
    hx, hy = hat
    return {"up": hy > 0, "right": hx > 0, "down": hy < 0, "left": hx < 0}


def open_joystick(index):
    if pygame is None:
        raise OSError("pygame not available")
    pygame.init()
    pygame.joystick.init()
    if index >= pygame.joystick.get_count():
        raise OSError(f"no joystick at index {index}")
    js = pygame.joystick.Joystick(index)
    js.init()
    return js


class PygameGamepadReader(PollingGamepadReader):
    """Reads a joystick by SDL index.

    Emits the same events as the HID reader; axis/button numbering comes from
    the profile.
    """

    name = "pygame"

    def __init__(self, profile: GamepadProfile, joystick_factory=open_joystick, pump=None, sleep=None):
        super().__init__()
        self._profile = profile
        self._joystick_factory = joystick_factory
        self._pump = pump or (lambda: pygame.event.pump())
        self._sleep = sleep or self._stop.wait
        self._joystick = None

    def _open(self):
        js = self._joystick_factory(self._profile.joystick)
        LOG.info(f"Found joystick: {js.get_name()} (index {self._profile.joystick}, "
                 f"axes={js.get_numaxes()}, buttons={js.get_numbuttons()}, hats={js.get_numhats()})")
        self._joystick = js

    def read_frame(self) -> DecodedFrame:
        js = self._joystick
        frame = DecodedFrame()
        for js_name, (x_axis, y_axis) in self._profile.axes.items():
            frame.joysticks[js_name] = (axis_to_byte(js.get_axis(x_axis)), axis_to_byte(js.get_axis(y_axis)))
        for idx, name in self._profile.button_map.items():
            frame.buttons[name] = bool(js.get_button(idx))
        if self._profile.hat is not None:
            for name, pressed in hat_to_buttons(js.get_hat(self._profile.hat)).items():
                frame.buttons[name] = frame.buttons.get(name, False) or pressed
        return frame

    def _poll(self):
        self._pump()
        frame = self.read_frame()
        self._sleep(POLL_INTERVAL)
        return frame

    def _close(self):
        if self._joystick is not None:
            self._joystick.quit()
            self._joystick = None
