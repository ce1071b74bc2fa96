"""Gamepad reader using hidapi (raw HID reports)

Opens the device named by a `hid` profile and decodes each report into button
states and raw joystick bytes, using the byte positions from the profile.
"""
import logging

try:
    import hid
except Exception:
    hid = None

from core.profile import GamepadProfile
from core.reader import PollingGamepadReader
from core.state import DecodedFrame

LOG = logging.getLogger("padbridge.hid")

READ_TIMEOUT_MS = 100


def open_hid_device(vendor_id, product_id):
    if hid is None:
        raise OSError("hidapi not available")
    device = hid.device()
    device.open(vendor_id, product_id)
    return device


def decode_report(profile: GamepadProfile, data):
    """Decode one raw report; None if it is shorter than the profile needs."""
    if not data:
        return None
    needed = 1 + max(
        [pin for pins in profile.joysticks.values() for pin in pins]
        + [b.pin for b in profile.buttons]
        + [-1]
    )
    if len(data) < needed:
        LOG.debug("skipping short report (%d < %d bytes): %s", len(data), needed, data)
        return None
    frame = DecodedFrame()
    for js_name, (x_pin, y_pin) in profile.joysticks.items():
        frame.joysticks[js_name] = (data[x_pin], data[y_pin])
    for spec in profile.buttons:
        # several specs may share a name (e.g. hat codes for diagonals)
        frame.buttons[spec.name] = frame.buttons.get(spec.name, False) or spec.pressed(data)
    return frame


class HidGamepadReader(PollingGamepadReader):
    """Reads a USB gamepad via hidapi."""

    name = "hid"

    def __init__(self, profile: GamepadProfile, device_factory=open_hid_device):
        super().__init__()
        self._profile = profile
        self._device_factory = device_factory
        self._device = None
        self._report_count = 0

    def _open(self):
        p = self._profile
        self._device = self._device_factory(p.vendor_id, p.product_id)
        LOG.info("opened %s (VID:%04x, PID:%04x)", p.name, p.vendor_id, p.product_id)

    def _poll(self):
        data = self._device.read(self._profile.report_size, timeout_ms=READ_TIMEOUT_MS)
        if not data:
            return None
        self._report_count += 1
        if self._report_count % 120 == 0:
            LOG.debug("raw report (%d bytes): %s", len(data), " ".join(f"{b:02X}" for b in data))
        return decode_report(self._profile, data)

    def _close(self):
        if self._device:
            self._device.close()
            self._device = None
