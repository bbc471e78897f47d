"""
Fill-level tank view: a SurfaceSimulator bound to a container of width x height
pixels, driven by a fill level and an ambient slosh.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from vantwin.core.component import TwinComponent
from vantwin.physics.slosh import SloshDriver
from vantwin.physics.surface import (
    SurfaceParams,
    SurfaceSimulator,
    rest_height_for_fill,
    sample_count_for_width,
)

logger = logging.getLogger(__name__)


@dataclass
class TankConfig:
    """Renderer-side tuning of a tank view."""

    sample_spacing: float = 4.0
    press_strength: float = 20.0
    slosh_amount: float = 10.0
    slosh_speed: float = 0.02

    def validate(self) -> None:
        if self.sample_spacing <= 0:
            raise ValueError(f"sample_spacing must be > 0, got {self.sample_spacing}")
        if self.press_strength < 0:
            raise ValueError(f"press_strength must be >= 0, got {self.press_strength}")


def surface_outline(
    heights: np.ndarray,
    width: float,
    container_height: float,
    points_per_segment: int = 8,
) -> np.ndarray:
    """
    Closed polygon (K, 2) of the liquid region, for filling.

    Goes from the bottom-left corner up to the first sample, follows a
    quadratic curve through the midpoints between samples (each sample is the
    control point of its segment), reaches the last sample and closes along
    the bottom edge. Sample i sits at x = i / (N - 1) * width.
    """
    h = np.asarray(heights, dtype=float).ravel()
    n = h.size
    if n < 2:
        raise ValueError(f"need at least 2 heights, got {n}")
    if points_per_segment < 1:
        raise ValueError(f"points_per_segment must be >= 1, got {points_per_segment}")
    xs = np.arange(n, dtype=float) / (n - 1) * float(width)
    t = np.linspace(0.0, 1.0, points_per_segment + 1)[1:, None]

    points = [np.array([[0.0, container_height], [xs[0], h[0]]])]
    start = np.array([xs[0], h[0]])
    for i in range(1, n):
        control = np.array([xs[i - 1], h[i - 1]])
        end = np.array([(xs[i - 1] + xs[i]) / 2.0, (h[i - 1] + h[i]) / 2.0])
        curve = (1 - t) ** 2 * start + 2 * (1 - t) * t * control + t ** 2 * end
        points.append(curve)
        start = end
    points.append(np.array([[float(width), h[-1]], [float(width), container_height]]))
    return np.vstack(points)


class WaterTank(TwinComponent):
    """
    Animated tank for one fill sensor (fresh water, gray water, ...).

    attach() / resize() rebuild the surface from scratch; set_level() only moves
    the rest profile, so the liquid flows to the new level.
    """

    def __init__(
        self,
        level: float,
        config: Optional[TankConfig] = None,
        surface_params: Optional[SurfaceParams] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Args:
            level: fill level in percent (0-100, not clamped).
            config: renderer tuning (sample spacing, press strength, slosh).
            surface_params: simulation constants; sample_count is overridden
                from the container width at attach time.
            seed: seed for the surface's ambient disturbance.
        """
        self.config = config or TankConfig()
        self.config.validate()
        self.surface_params = surface_params or SurfaceParams()
        self.level = float(level)
        self._seed = seed
        self._width: Optional[float] = None
        self._height: Optional[float] = None
        self._surface: Optional[SurfaceSimulator] = None
        self._slosh = SloshDriver(self.config.slosh_amount, self.config.slosh_speed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def attach(self, width: float, height: float) -> None:
        """Bind to a rendering surface; full reset at the current level."""
        if width <= 0 or height <= 0:
            raise ValueError(f"container size must be positive, got {width}x{height}")
        self._width = float(width)
        self._height = float(height)
        p = self.surface_params
        n = sample_count_for_width(self._width, self.config.sample_spacing)
        if self._surface is None:
            self._surface = SurfaceSimulator(
                SurfaceParams(
                    sample_count=n,
                    tension=p.tension,
                    damping=p.damping,
                    spread=p.spread,
                    relaxation_iterations=p.relaxation_iterations,
                    disturbance_probability=p.disturbance_probability,
                    disturbance_strength=p.disturbance_strength,
                ),
                rest_height=self.base_height,
                seed=self._seed,
            )
        else:
            self._surface.configure(
                sample_count=n,
                tension=p.tension,
                damping=p.damping,
                spread=p.spread,
                relaxation_iterations=p.relaxation_iterations,
                rest_height=self.base_height,
            )
        self._slosh.reset()
        logger.info("Tank attached: %gx%g px, %d samples, level %.1f%%", width, height, n, self.level)

    def resize(self, width: float, height: float) -> None:
        self.attach(width, height)

    def detach(self) -> None:
        self._surface = None
        self._width = None
        self._height = None
        logger.debug("Tank detached")

    def initialize(self, **kwargs: Any) -> None:
        self.attach(kwargs["width"], kwargs["height"])

    @property
    def attached(self) -> bool:
        return self._surface is not None

    @property
    def surface(self) -> SurfaceSimulator:
        if self._surface is None:
            raise RuntimeError("Tank not attached: call attach(width, height) first.")
        return self._surface

    @property
    def base_height(self) -> float:
        if self._height is None:
            raise RuntimeError("Tank not attached: call attach(width, height) first.")
        return rest_height_for_fill(self._height, self.level)

    # ------------------------------------------------------------------
    # Per-frame drive and input
    # ------------------------------------------------------------------
    def set_level(self, level: float) -> None:
        self.level = float(level)

    def step(self, **kwargs: Any) -> np.ndarray:
        """One frame: rest profile from level and slosh, then integrate."""
        surface = self.surface
        surface.set_rest_profile(self.base_height, self._slosh.advance())
        return surface.step()

    def advance(self) -> np.ndarray:
        return self.step()

    def press(self, x: float) -> Optional[int]:
        """
        Pointer press at pixel x inside the container.

        Returns:
            The struck sample index, or None if x is outside the container.

        Raises:
            RuntimeError: tank not attached (before attach or after detach).
        """
        surface = self.surface
        if x < 0 or x >= self._width:
            return None
        return surface.apply_impulse(x / self._width, self.config.press_strength)

    def heights(self) -> np.ndarray:
        return self.surface.heights_at_frame()

    def outline(self, points_per_segment: int = 8) -> np.ndarray:
        return surface_outline(self.heights(), self._width, self._height, points_per_segment)

    def state_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "width": self._width,
            "height": self._height,
            "slosh": self._slosh.state_dict(),
            "surface": self._surface.state_dict() if self._surface is not None else {},
        }
