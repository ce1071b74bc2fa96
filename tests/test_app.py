from pathlib import Path

from app import build_adapters, main, make_reader
from core.profile import GamepadProfile
from devices.hid_gamepad import HidGamepadReader
from devices.pygame_gamepad import PygameGamepadReader

PROFILES = Path(__file__).resolve().parent.parent / "profiles"


def test_make_reader_picks_backend():
    hid_profile = GamepadProfile.load(str(PROFILES / "generic_usb.yaml"))
    sdl_profile = GamepadProfile.load(str(PROFILES / "sdl_gamepad.yaml"))
    assert isinstance(make_reader(hid_profile), HidGamepadReader)
    assert isinstance(make_reader(sdl_profile), PygameGamepadReader)


def test_build_adapters_assigns_slots():
    profile = GamepadProfile.load(str(PROFILES / "generic_usb.yaml"))
    adapters = build_adapters([profile, profile], first_index=2, reconnect_delay=0.5)
    assert [a.index for a in adapters] == [2, 3]
    assert "analog/3 undefined" in adapters[1].scratchify()


def test_main_rejects_missing_profile(tmp_path):
    assert main(["--profile", str(tmp_path / "nope.yaml")]) == 2


def test_main_rejects_invalid_profile(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("backend: evdev\n", encoding="utf-8")
    assert main(["--profile", str(path)]) == 2


def test_main_rejects_non_numeric_report_size(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("vendor_id: 1\nproduct_id: 2\nreport_size: big\n", encoding="utf-8")
    assert main(["--profile", str(path)]) == 2


def test_main_rejects_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("backend: [hid\n", encoding="utf-8")
    assert main(["--profile", str(path)]) == 2
