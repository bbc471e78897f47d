"""
Panel configuration
===================
Groups the tuning values of the core (surface constants, tank view, heater
stage delays, frame period) in one dataclass that can be loaded from and
saved to JSON.

Exports:
    PanelConfig: the configuration tree.
    load_panel_config / save_panel_config: JSON round trip via vantwin.io.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

from vantwin.control.heater import StageDelays
from vantwin.io.serializers import load_config, save_config
from vantwin.physics.surface import SurfaceParams
from vantwin.physics.tank import TankConfig

T = TypeVar("T")


def _section(cls: Type[T], data: Dict[str, Any], name: str) -> T:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"unknown keys in '{name}': {sorted(unknown)}")
    return cls(**data)


@dataclass
class PanelConfig:
    surface: SurfaceParams = field(default_factory=SurfaceParams)
    tank: TankConfig = field(default_factory=TankConfig)
    heater_delays: StageDelays = field(default_factory=StageDelays)
    frame_dt: float = 1.0 / 60.0

    def validate(self) -> None:
        self.surface.validate()
        self.tank.validate()
        self.heater_delays.validate()
        if not self.frame_dt > 0:
            raise ValueError(f"frame_dt must be > 0, got {self.frame_dt}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PanelConfig":
        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            raise ValueError(f"unknown configuration keys: {sorted(unknown)}")
        config = cls(
            surface=_section(SurfaceParams, data.get("surface", {}), "surface"),
            tank=_section(TankConfig, data.get("tank", {}), "tank"),
            heater_delays=_section(StageDelays, data.get("heater_delays", {}), "heater_delays"),
            frame_dt=float(data.get("frame_dt", 1.0 / 60.0)),
        )
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_panel_config(path: Union[str, Path]) -> PanelConfig:
    return PanelConfig.from_dict(load_config(path))


def save_panel_config(config: PanelConfig, path: Union[str, Path]) -> None:
    save_config(config.to_dict(), path)
