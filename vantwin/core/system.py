"""Panel orchestrator: frame loop over the tank views and the heater's timer clock."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from vantwin.config import PanelConfig
from vantwin.control.heater import DeviceState, HeaterStatus, TimedDeviceController
from vantwin.control.scheduler import ManualScheduler
from vantwin.core.history import TwinHistory
from vantwin.physics.tank import WaterTank

logger = logging.getLogger(__name__)


@dataclass
class PanelStep:
    """Result of one frame: time, surface heights per tank, heater status."""

    frame: int
    time: float
    heights: Dict[str, np.ndarray] = field(default_factory=dict)
    heater_status: Optional[HeaterStatus] = None


class PanelTwin:
    """
    Host-side loop for the control panel core.
    Each step(): every attached tank advances one frame, then the heater's
    virtual clock moves to start + frame * dt so due stage transitions fire
    on the frame whose time reaches their deadline.
    """

    def __init__(
        self,
        config: Optional[PanelConfig] = None,
        heater: Optional[TimedDeviceController] = None,
        history: Optional[TwinHistory] = None,
    ) -> None:
        """
        Args:
            config: panel tuning (default: PanelConfig()).
            heater: heater controller; if None one is created on this panel's
                ManualScheduler with the configured stage delays.
            history: optional per-frame recorder (mean height per tank, heater status).
        """
        self.config = config or PanelConfig()
        self.config.validate()
        self.dt = self.config.frame_dt
        self.scheduler = ManualScheduler()
        if heater is None:
            heater = TimedDeviceController(scheduler=self.scheduler, delays=self.config.heater_delays)
        elif not isinstance(heater.scheduler, ManualScheduler):
            raise ValueError("heater must use a ManualScheduler to be driven by the panel clock")
        else:
            self.scheduler = heater.scheduler
        self.heater = heater
        self.history = history
        self._start = self.scheduler.now()
        self.tanks: Dict[str, WaterTank] = {}
        self._frame = 0

    def add_tank(
        self,
        name: str,
        level: float,
        width: Optional[float] = None,
        height: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> WaterTank:
        """Create a tank view; attach it right away when a size is given."""
        if name in self.tanks:
            raise ValueError(f"tank '{name}' already exists")
        tank = WaterTank(level, config=self.config.tank, surface_params=self.config.surface, seed=seed)
        if width is not None and height is not None:
            tank.attach(width, height)
        self.tanks[name] = tank
        logger.debug("Tank '%s' added at %.1f%%", name, level)
        return tank

    def tank(self, name: str) -> WaterTank:
        try:
            return self.tanks[name]
        except KeyError:
            raise KeyError(f"unknown tank '{name}'") from None

    def set_level(self, name: str, level: float) -> None:
        self.tank(name).set_level(level)

    def press(self, name: str, x: float) -> Optional[int]:
        return self.tank(name).press(x)

    def set_heater_power(self, desired: bool) -> bool:
        return self.heater.set_power(desired)

    def step(self) -> PanelStep:
        heights = {}
        for name, tank in self.tanks.items():
            if tank.attached:
                heights[name] = tank.step()
        self._frame += 1
        self.scheduler.advance_to(self._start + self._frame * self.dt)
        result = PanelStep(
            frame=self._frame,
            time=self.time,
            heights=heights,
            heater_status=self.heater.status,
        )
        if self.history is not None:
            record = {f"{name}_mean_height": float(np.mean(h)) for name, h in heights.items()}
            self.history.append(time=result.time, heater_status=self.heater.status.value, **record)
        return result

    def run(self, frames: int) -> PanelStep:
        if frames < 1:
            raise ValueError(f"frames must be >= 1, got {frames}")
        result = self.step()
        for _ in range(frames - 1):
            result = self.step()
        return result

    @property
    def time(self) -> float:
        return self.scheduler.now()

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def heater_state(self) -> DeviceState:
        return self.heater.state

    def state_dict(self) -> Dict[str, object]:
        return {
            "frame": self._frame,
            "time": self.time,
            "heater": self.heater.state,
            "tanks": {name: tank.state_dict() for name, tank in self.tanks.items()},
        }
