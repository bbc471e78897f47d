"""
Liquid-surface physics for the tank views.

Hierarchy:
  - integrators: per-frame numerical kernels (semi-implicit Euler, neighbour relaxation)
  - surface: SurfaceSimulator, the damped tension-coupled height field
  - slosh: SloshDriver, ambient tilt for the rest profile
  - tank: WaterTank, a surface bound to a container and a fill level
"""

# --- Numerical kernels ---
from vantwin.physics.integrators import (
    kinetic_energy,
    max_stable_spread,
    relax_neighbors,
    semi_implicit_euler_step,
)

# --- Surface ---
from vantwin.physics.surface import (
    Sample,
    SurfaceParams,
    SurfaceSimulator,
    SurfaceState,
    rest_height_for_fill,
    sample_count_for_width,
)

# --- Drivers and tank view ---
from vantwin.physics.slosh import SloshDriver
from vantwin.physics.tank import TankConfig, WaterTank, surface_outline

__all__ = [
    # Kernels
    "semi_implicit_euler_step",
    "relax_neighbors",
    "kinetic_energy",
    "max_stable_spread",
    # Surface
    "Sample",
    "SurfaceParams",
    "SurfaceState",
    "SurfaceSimulator",
    "rest_height_for_fill",
    "sample_count_for_width",
    # Tank
    "SloshDriver",
    "TankConfig",
    "WaterTank",
    "surface_outline",
]
