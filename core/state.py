"""State models and lightweight DTOs"""
from dataclasses import InitVar, dataclass, field
from typing import Dict, Optional, Tuple

# Digital controls in output order (the four directions come first)
BUTTONS = (
    "up", "right", "down", "left",
    "1", "2", "3", "4",
    "l1", "l2", "r1", "r2",
    "joystick_left_button", "joystick_right_button",
    "select", "start",
)
JOYSTICKS = ("joystick_left", "joystick_right")

ANALOG_IDLE = 128
DIGITAL_IDLE = 127


@dataclass
class Axis:
    """Raw byte sample of one joystick; None until the first move."""
    x: Optional[int] = None
    y: Optional[int] = None


@dataclass
class ControllerSnapshot:
    index: InitVar[int]
    digital_buttons: Dict[str, bool] = field(default_factory=dict)
    left_axis: Axis = field(default_factory=Axis)
    right_axis: Axis = field(default_factory=Axis)
    analog_mode: Optional[bool] = None  # None until inferred from the left stick

    def __post_init__(self, index):
        self._device_index = index

    @property
    def device_index(self) -> int:
        return self._device_index


@dataclass
class DecodedFrame:
    """One decoded device report: buttons and raw joystick bytes."""
    buttons: Dict[str, bool] = field(default_factory=dict)
    joysticks: Dict[str, Tuple[int, int]] = field(default_factory=dict)
