"""
Per-tick input snapshot and helpers for building it from raw devices
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .utils import normalize, Vec2


@dataclass(frozen=True)
class InputFrame:
    """Input for a single tick. `aim` is a unit vector or (0, 0)."""
    fire_pressed: bool = False
    fire_held: bool = False
    fire_released: bool = False
    aim: Vec2 = (0.0, 0.0)
    pause_toggled: bool = False


class TriggerTracker:
    """Derives press/release edges from a held/not-held signal"""

    def __init__(self):
        self.was_held = False

    def frame(self, held: bool, aim: Vec2, pause_toggled: bool = False) -> InputFrame:
        pressed = held and not self.was_held
        released = self.was_held and not held
        self.was_held = held
        return InputFrame(
            fire_pressed=pressed,
            fire_held=held,
            fire_released=released,
            aim=aim,
            pause_toggled=pause_toggled,
        )

    def reset(self):
        self.was_held = False


def aim_towards(origin: Vec2, point: Vec2) -> Tuple[float, float]:
    """Mouse aiming: unit vector from the firer to the pointer"""
    return normalize(point[0] - origin[0], point[1] - origin[1])


def aim_from_axes(horizontal: float, vertical: float, previous: Vec2) -> Tuple[float, float]:
    """Keyboard-axis aiming; keeps the previous aim when no axis is held"""
    if horizontal == 0 and vertical == 0:
        return previous
    return normalize(horizontal, vertical)
