"""Ambient slosh driver: a slow sinusoidal tilt fed to the surface rest profile."""

import math
from typing import Any, Dict


class SloshDriver:
    """
    tilt(frame) = sin(frame * speed) * amount.
    Advance once per frame, after reading the tilt for that frame.
    """

    def __init__(self, amount: float = 10.0, speed: float = 0.02) -> None:
        """
        Args:
            amount: peak tilt, in height units, end to end across the surface.
            speed: phase advance per frame (radians).
        """
        self.amount = float(amount)
        self.speed = float(speed)
        self._frame = 0

    def tilt(self) -> float:
        return math.sin(self._frame * self.speed) * self.amount

    def advance(self) -> float:
        """Return the tilt for the current frame and move to the next one."""
        value = self.tilt()
        self._frame += 1
        return value

    def reset(self) -> None:
        self._frame = 0

    def state_dict(self) -> Dict[str, Any]:
        return {"frame": self._frame, "amount": self.amount, "speed": self.speed}
