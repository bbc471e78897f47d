"""
Numerical kernels for the liquid surface, one frame at a time (dt = 1 frame).

Pure numerical level: no dependency on TwinComponent.
Arrays are updated in place; callers own them.
"""

import numpy as np


def semi_implicit_euler_step(
    height: np.ndarray,
    velocity: np.ndarray,
    rest_height: np.ndarray,
    tension: float,
    damping: float,
) -> None:
    """
    Damped spring toward rest_height, semi-implicit Euler:
    v_{n+1} = v_n - tension * (h_n - rest) - damping * v_n
    h_{n+1} = h_n + v_{n+1}
    """
    acceleration = -tension * (height - rest_height) - damping * velocity
    velocity += acceleration
    height += velocity


def relax_neighbors(
    height: np.ndarray,
    velocity: np.ndarray,
    spread: float,
    iterations: int,
) -> None:
    """
    Explicit relaxation of the lateral coupling.

    Each pass computes, for every adjacent pair (i, i+1), the transfer
    d = spread * (h[i] - h[i+1]) from the heights at the start of the pass and
    applies it with opposite signs to both members of the pair, on velocity and
    on height. Sums of velocity and height are conserved by every pass.
    End samples have a single neighbour (open boundary).
    Combined with semi_implicit_euler_step the frame update is stable for
    0 < spread < max_stable_spread(iterations).
    """
    for _ in range(iterations):
        transfer = spread * (height[:-1] - height[1:])
        velocity[:-1] -= transfer
        velocity[1:] += transfer
        height[:-1] -= transfer
        height[1:] += transfer


def max_stable_spread(iterations: int) -> float:
    """
    Upper bound (exclusive) on spread for a full frame to stay stable.

    After P passes the fastest mode keeps a factor r = (1 - 4 * spread) ** P
    of its height, and the relaxation feeds 1 - r of it into velocity. The
    frame update then stays bounded iff |r| < 1 / (3 - tension - 2 * damping)
    whenever r < 0, so |r| < 1/3 is sufficient for every tension and damping
    in (0, 1). Even P never makes r negative: spread < 0.5 suffices.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    if iterations % 2 == 0:
        return 0.5
    return (1.0 + 3.0 ** (-1.0 / iterations)) / 4.0


def kinetic_energy(velocity: np.ndarray) -> float:
    """Sum of squared velocities."""
    return float(np.dot(velocity, velocity))
