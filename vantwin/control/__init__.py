"""Timed device control: heater state machine and timer facilities."""

from vantwin.control.heater import (
    DeviceState,
    HeaterMode,
    HeaterStatus,
    StageDelays,
    TimedDeviceController,
)
from vantwin.control.scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "DeviceState",
    "HeaterMode",
    "HeaterStatus",
    "StageDelays",
    "TimedDeviceController",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
]
