"""
Liquid surface as a 1-D chain of damped, tension-coupled height samples.

Heights are measured downward from the top of the container (smaller = higher
liquid), so a column at rest sits at container_height * (1 - fill / 100).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from vantwin.core.component import TwinComponent
from vantwin.physics.integrators import (
    kinetic_energy,
    max_stable_spread,
    relax_neighbors,
    semi_implicit_euler_step,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sample:
    """Snapshot of one surface column."""

    rest_height: float
    height: float
    velocity: float


@dataclass
class SurfaceParams:
    """Simulation constants. Defaults reproduce the dashboard tank animation."""

    sample_count: int = 64
    tension: float = 0.005
    damping: float = 0.005
    spread: float = 0.05
    relaxation_iterations: int = 5
    disturbance_probability: float = 0.005
    disturbance_strength: float = 5.0

    def validate(self) -> None:
        """Raise ValueError for parameters that would make the integration unstable."""
        if int(self.sample_count) != self.sample_count or self.sample_count < 2:
            raise ValueError(f"sample_count must be an integer >= 2, got {self.sample_count}")
        if not 0.0 < self.tension < 1.0:
            raise ValueError(f"tension must be in (0, 1), got {self.tension}")
        if not 0.0 < self.damping < 1.0:
            raise ValueError(f"damping must be in (0, 1), got {self.damping}")
        if int(self.relaxation_iterations) != self.relaxation_iterations or self.relaxation_iterations < 1:
            raise ValueError(
                f"relaxation_iterations must be an integer >= 1, got {self.relaxation_iterations}"
            )
        bound = max_stable_spread(self.relaxation_iterations)
        if not 0.0 < self.spread < bound:
            raise ValueError(
                f"spread must be in (0, {bound:.4f}) for {self.relaxation_iterations} "
                f"relaxation passes, got {self.spread}"
            )
        if not 0.0 <= self.disturbance_probability <= 1.0:
            raise ValueError(
                f"disturbance_probability must be in [0, 1], got {self.disturbance_probability}"
            )
        if self.disturbance_strength < 0.0:
            raise ValueError(f"disturbance_strength must be >= 0, got {self.disturbance_strength}")


@dataclass
class SurfaceState:
    """Owned per-sample arrays plus the constants they are integrated with."""

    params: SurfaceParams
    rest_height: np.ndarray = field(default_factory=lambda: np.zeros(0))
    height: np.ndarray = field(default_factory=lambda: np.zeros(0))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @classmethod
    def flat(cls, params: SurfaceParams, rest_height: float) -> "SurfaceState":
        n = int(params.sample_count)
        return cls(
            params=params,
            rest_height=np.full(n, float(rest_height)),
            height=np.full(n, float(rest_height)),
            velocity=np.zeros(n),
        )

    def __len__(self) -> int:
        return int(self.height.size)


def rest_height_for_fill(container_height: float, fill_percent: float) -> float:
    """Rest height (offset from the top) for a fill level in percent."""
    return float(container_height) * (1.0 - float(fill_percent) / 100.0)


def sample_count_for_width(width: float, sample_spacing: float = 4.0) -> int:
    """One sample every `sample_spacing` pixels, never fewer than two."""
    if sample_spacing <= 0:
        raise ValueError(f"sample_spacing must be > 0, got {sample_spacing}")
    return max(2, int(np.floor(width / sample_spacing)))


class SurfaceSimulator(TwinComponent):
    """
    Damped spring-chain surface driven once per frame.

    Per frame the host calls set_rest_profile(base, tilt), then step(), then
    reads heights_at_frame(). apply_impulse() may be called between frames.

    Example:
        sim = SurfaceSimulator()
        sim.configure(sample_count=50, rest_height=40.0)
        sim.set_rest_profile(40.0, tilt=3.0)
        sim.step()
        heights = sim.heights_at_frame()
    """

    def __init__(
        self,
        params: Optional[SurfaceParams] = None,
        rest_height: float = 0.0,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Args:
            params: simulation constants (default: SurfaceParams()).
            rest_height: initial flat height of every sample.
            rng: random source for the ambient disturbance (overrides seed).
            seed: seed for a fresh numpy Generator.
        """
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._state: SurfaceState
        self._frame = 0
        p = params or SurfaceParams()
        self.configure(
            sample_count=p.sample_count,
            tension=p.tension,
            damping=p.damping,
            spread=p.spread,
            relaxation_iterations=p.relaxation_iterations,
            rest_height=rest_height,
            disturbance_probability=p.disturbance_probability,
            disturbance_strength=p.disturbance_strength,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure(
        self,
        sample_count: int,
        tension: float = 0.005,
        damping: float = 0.005,
        spread: float = 0.05,
        relaxation_iterations: int = 5,
        rest_height: float = 0.0,
        disturbance_probability: Optional[float] = None,
        disturbance_strength: Optional[float] = None,
    ) -> None:
        """
        (Re)initialize every sample flat at rest_height with zero velocity.

        Raises:
            ValueError: sample_count < 2, tension or damping outside (0, 1),
                relaxation_iterations < 1, spread outside
                (0, max_stable_spread(relaxation_iterations)).
        """
        previous = getattr(self, "_state", None)
        if disturbance_probability is None:
            disturbance_probability = (
                previous.params.disturbance_probability if previous else SurfaceParams.disturbance_probability
            )
        if disturbance_strength is None:
            disturbance_strength = (
                previous.params.disturbance_strength if previous else SurfaceParams.disturbance_strength
            )
        params = SurfaceParams(
            sample_count=sample_count,
            tension=float(tension),
            damping=float(damping),
            spread=float(spread),
            relaxation_iterations=relaxation_iterations,
            disturbance_probability=float(disturbance_probability),
            disturbance_strength=float(disturbance_strength),
        )
        params.validate()
        params.sample_count = int(params.sample_count)
        params.relaxation_iterations = int(params.relaxation_iterations)
        self._state = SurfaceState.flat(params, rest_height)
        self._frame = 0
        logger.info(
            "Surface configured: %d samples, tension=%g, damping=%g, spread=%g, passes=%d",
            params.sample_count,
            params.tension,
            params.damping,
            params.spread,
            params.relaxation_iterations,
        )

    def initialize(self, **kwargs: Any) -> None:
        """TwinComponent entry point; same arguments as configure()."""
        p = self._state.params
        kwargs.setdefault("sample_count", p.sample_count)
        kwargs.setdefault("tension", p.tension)
        kwargs.setdefault("damping", p.damping)
        kwargs.setdefault("spread", p.spread)
        kwargs.setdefault("relaxation_iterations", p.relaxation_iterations)
        self.configure(**kwargs)

    @property
    def params(self) -> SurfaceParams:
        return self._state.params

    @property
    def sample_count(self) -> int:
        return len(self._state)

    # ------------------------------------------------------------------
    # Per-frame drive
    # ------------------------------------------------------------------
    def set_rest_profile(self, base_height: float, tilt: float = 0.0) -> None:
        """
        rest[i] = base_height + tilt * (i / (N - 1) - 0.5).
        The tilt term is antisymmetric about the centre, so it moves no volume.
        """
        n = self.sample_count
        position = np.arange(n, dtype=float) / (n - 1)
        self._state.rest_height[:] = float(base_height) + float(tilt) * (position - 0.5)

    def step(self, **kwargs: Any) -> np.ndarray:
        """
        Advance one frame: spring + damping, neighbour relaxation, then the
        occasional ambient disturbance. Returns the new heights (copy).
        """
        s = self._state
        p = s.params
        semi_implicit_euler_step(s.height, s.velocity, s.rest_height, p.tension, p.damping)
        relax_neighbors(s.height, s.velocity, p.spread, p.relaxation_iterations)
        if p.disturbance_probability > 0.0 and self._rng.random() < p.disturbance_probability:
            index = int(self._rng.integers(0, len(s)))
            s.velocity[index] = -p.disturbance_strength
        self._frame += 1
        return self.heights_at_frame()

    def apply_impulse(self, position_fraction: float, strength: float) -> int:
        """
        Set the velocity of the sample under position_fraction (0 = left edge,
        1 = right edge) to -strength; positive strength lifts the surface.

        Returns:
            Index of the struck sample.
        """
        n = self.sample_count
        fraction = min(max(float(position_fraction), 0.0), 1.0)
        index = min(int(np.floor(fraction * n)), n - 1)
        self._state.velocity[index] = -float(strength)
        return index

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def heights_at_frame(self) -> np.ndarray:
        return self._state.height.copy()

    def velocities(self) -> np.ndarray:
        return self._state.velocity.copy()

    def rest_heights(self) -> np.ndarray:
        return self._state.rest_height.copy()

    @property
    def samples(self) -> Tuple[Sample, ...]:
        s = self._state
        return tuple(
            Sample(rest_height=float(r), height=float(h), velocity=float(v))
            for r, h, v in zip(s.rest_height, s.height, s.velocity)
        )

    @property
    def frame(self) -> int:
        """Frames stepped since the last configure()."""
        return self._frame

    def kinetic_energy(self) -> float:
        return kinetic_energy(self._state.velocity)

    def max_abs_velocity(self) -> float:
        return float(np.max(np.abs(self._state.velocity)))

    def mean_height(self) -> float:
        return float(np.mean(self._state.height))

    def state_dict(self) -> Dict[str, Any]:
        s = self._state
        return {
            "frame": self._frame,
            "rest_height": s.rest_height.copy(),
            "height": s.height.copy(),
            "velocity": s.velocity.copy(),
        }
