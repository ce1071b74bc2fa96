"""Entry point for padbridge

Starts one adapter per gamepad profile and serves their state to Scratch.
"""
import argparse
import functools
import logging
import sys

from adapter import GamepadAdapter, RECONNECT_DELAY
from core.profile import GamepadProfile, ProfileError
from devices.hid_gamepad import HidGamepadReader
from devices.pygame_gamepad import PygameGamepadReader
from scratch.server import create_app, serve

LOG = logging.getLogger("padbridge")

READERS = {
    "hid": HidGamepadReader,
    "pygame": PygameGamepadReader,
}


def make_reader(profile: GamepadProfile):
    return READERS[profile.backend](profile)


def build_adapters(profiles, first_index=0, reconnect_delay=RECONNECT_DELAY):
    return [
        GamepadAdapter(first_index + i, functools.partial(make_reader, profile), reconnect_delay)
        for i, profile in enumerate(profiles)
    ]


def main(argv=None):
    parser = argparse.ArgumentParser(description="padbridge: USB gamepad → Scratch 2.0 HTTP extension")
    parser.add_argument("--profile", required=True, action="append",
                        help="YAML device profile (repeat for more gamepads)")
    parser.add_argument("--first-index", type=int, default=0, help="slot index of the first gamepad")
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=8080, help="HTTP port")
    parser.add_argument("--reconnect-delay", type=float, default=RECONNECT_DELAY,
                        help="seconds between reconnect attempts (default: 2.0)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g., 'hid', 'pygame', 'translator', 'adapter')")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=args.log_format)

    for module in args.debug_modules:
        logging.getLogger(f"padbridge.{module}").setLevel(logging.DEBUG)

    try:
        profiles = [GamepadProfile.load(path) for path in args.profile]
    except (OSError, ProfileError) as e:
        LOG.error("cannot load profile: %s", e)
        return 2

    adapters = build_adapters(profiles, args.first_index, args.reconnect_delay)

    try:
        for adapter in adapters:
            adapter.start()
        LOG.info("padbridge running with %d gamepad(s), press Ctrl+C to stop", len(adapters))
        serve(create_app(adapters), args.host, args.port, args.log_level)
    except KeyboardInterrupt:
        LOG.info("shutdown requested")
    finally:
        for adapter in adapters:
            adapter.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
