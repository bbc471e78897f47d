"""
Diesel heater with timed start-up and shutdown stages.

    off --power on--> starting --3s--> warming_up --5s--> running
    running / starting / warming_up --power off--> shutting_down --5s--> off

Entering a transitional status schedules exactly one delayed transition;
every status change cancels the pending one first.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional

from vantwin.control.scheduler import ManualScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class HeaterStatus(str, Enum):
    OFF = "off"
    STARTING = "starting"
    WARMING_UP = "warming_up"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"

    @property
    def is_transitional(self) -> bool:
        return self in _NEXT_STATUS

    @property
    def is_stable(self) -> bool:
        return not self.is_transitional

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


class HeaterMode(str, Enum):
    TEMPERATURE = "temperature"
    POWER = "power"
    VENTILATION = "ventilation"


DEFAULT_MODE = HeaterMode.TEMPERATURE

_NEXT_STATUS: Dict[HeaterStatus, HeaterStatus] = {
    HeaterStatus.STARTING: HeaterStatus.WARMING_UP,
    HeaterStatus.WARMING_UP: HeaterStatus.RUNNING,
    HeaterStatus.SHUTTING_DOWN: HeaterStatus.OFF,
}

_STATUS_LABELS: Dict[HeaterStatus, str] = {
    HeaterStatus.OFF: "Off",
    HeaterStatus.STARTING: "Starting...",
    HeaterStatus.WARMING_UP: "Warming Up",
    HeaterStatus.RUNNING: "Running",
    HeaterStatus.SHUTTING_DOWN: "Shutting Down",
}

SETPOINT_RANGE = (18.0, 30.0)
POWER_LEVEL_RANGE = (0, 9)
VENTILATION_RANGE = (0, 100)


@dataclass
class StageDelays:
    """Duration of each transitional stage, in scheduler time units."""

    starting: float = 3.0
    warming_up: float = 5.0
    shutting_down: float = 5.0

    def validate(self) -> None:
        for name in ("starting", "warming_up", "shutting_down"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} delay must be > 0, got {value}")

    def for_status(self, status: HeaterStatus) -> float:
        return float(getattr(self, status.value))


@dataclass
class DeviceState:
    """Heater record as the host persists it."""

    status: HeaterStatus = HeaterStatus.OFF
    mode: HeaterMode = DEFAULT_MODE
    setpoint: float = 22.0
    power_level: int = 0
    ventilation_level: int = 0
    error_code: Optional[str] = None


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return min(max(value, low), high)


class TimedDeviceController:
    """
    Owns one DeviceState and at most one pending timer.

    Requests that do not apply to the current status are ignored and return
    False. on_change is called with a copy of the state after every status
    change, user-requested or timed.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        delays: Optional[StageDelays] = None,
        state: Optional[DeviceState] = None,
        on_change: Optional[Callable[[DeviceState], None]] = None,
        name: str = "diesel_heater",
    ) -> None:
        """
        Args:
            scheduler: timer facility (default: a fresh ManualScheduler).
            delays: stage durations, fixed for the controller's lifetime.
            state: initial record; a transitional status schedules its timer immediately.
            on_change: completion callback fed with the new state.
            name: device name used in log messages.
        """
        self._delays = delays or StageDelays()
        self._delays.validate()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._state = replace(state) if state is not None else DeviceState()
        self._state.status = HeaterStatus(self._state.status)
        self._state.mode = HeaterMode(self._state.mode)
        self._pending: Optional[TimerHandle] = None
        self.on_change = on_change
        self.name = name
        if self._state.status.is_transitional:
            self._schedule(self._state.status)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    @property
    def status(self) -> HeaterStatus:
        return self._state.status

    @property
    def state(self) -> DeviceState:
        return replace(self._state)

    @property
    def delays(self) -> StageDelays:
        return replace(self._delays)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def is_on(self) -> bool:
        return self._state.status is not HeaterStatus.OFF

    @property
    def is_transitioning(self) -> bool:
        return self._state.status.is_transitional

    # ------------------------------------------------------------------
    # Power requests
    # ------------------------------------------------------------------
    def request_power_on(self) -> bool:
        if self._state.status is not HeaterStatus.OFF:
            logger.debug("%s: power on ignored while %s", self.name, self._state.status.value)
            return False
        self._enter(HeaterStatus.STARTING)
        return True

    def request_power_off(self) -> bool:
        if self._state.status in (HeaterStatus.OFF, HeaterStatus.SHUTTING_DOWN):
            logger.debug("%s: power off ignored while %s", self.name, self._state.status.value)
            return False
        self._enter(HeaterStatus.SHUTTING_DOWN)
        return True

    def set_power(self, desired: bool) -> bool:
        """Host toggle: True requests power on, False power off."""
        return self.request_power_on() if desired else self.request_power_off()

    # ------------------------------------------------------------------
    # Payload (outside the state machine)
    # ------------------------------------------------------------------
    def set_mode(self, mode: HeaterMode) -> bool:
        if self._state.status is HeaterStatus.OFF:
            logger.debug("%s: mode change ignored while off", self.name)
            return False
        self._state.mode = HeaterMode(mode)
        return True

    def set_setpoint(self, celsius: float) -> None:
        self._state.setpoint = float(_clamp(float(celsius), SETPOINT_RANGE))

    def set_power_level(self, level: int) -> None:
        self._state.power_level = int(_clamp(int(level), POWER_LEVEL_RANGE))

    def set_ventilation_level(self, level: int) -> None:
        self._state.ventilation_level = int(_clamp(int(level), VENTILATION_RANGE))

    def set_error(self, code: Optional[str]) -> None:
        """Carried until the next warming_up -> running completion clears it."""
        self._state.error_code = code
        if code is not None:
            logger.warning("%s: error code %s", self.name, code)

    def close(self) -> None:
        """Cancel the pending timer; the status stays where it is."""
        self._cancel_pending()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _enter(self, status: HeaterStatus) -> None:
        self._cancel_pending()
        previous = self._state.status
        self._state.status = status
        logger.info("%s: %s -> %s", self.name, previous.value, status.value)
        if status.is_transitional:
            self._schedule(status)
        if self.on_change is not None:
            self.on_change(self.state)

    def _schedule(self, status: HeaterStatus) -> None:
        handle: Optional[TimerHandle] = None

        def fire() -> None:
            # A handle that is no longer the pending one was cancelled.
            if self._pending is not handle or self._state.status is not status:
                return
            self._pending = None
            self._complete(status)

        handle = self.scheduler.call_later(self._delays.for_status(status), fire)
        self._pending = handle
        logger.debug("%s: %s -> %s in %gs", self.name, status.value,
                     _NEXT_STATUS[status].value, self._delays.for_status(status))

    def _complete(self, status: HeaterStatus) -> None:
        target = _NEXT_STATUS[status]
        if target is HeaterStatus.RUNNING:
            self._state.error_code = None
        elif target is HeaterStatus.OFF:
            self._state.mode = DEFAULT_MODE
        self._enter(target)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("%s: pending transition cancelled", self.name)
