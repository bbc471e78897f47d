"""
Visualization utilities: tank surface fill and heater status timeline.

Matplotlib is optional; functions raise ImportError if it is not installed.
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from vantwin.control.heater import HeaterStatus
from vantwin.physics.tank import surface_outline

_STATUS_ORDER: List[HeaterStatus] = [
    HeaterStatus.OFF,
    HeaterStatus.STARTING,
    HeaterStatus.WARMING_UP,
    HeaterStatus.RUNNING,
    HeaterStatus.SHUTTING_DOWN,
]


def _pyplot() -> Any:
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for plotting (pip install vantwin[plot]).")
    return plt


def plot_surface(
    heights: Sequence[float],
    width: float,
    container_height: float,
    ax: Optional[Any] = None,
    color: str = "#3B82F6",
    alpha: float = 0.85,
    points_per_segment: int = 8,
    title: str = "",
) -> Any:
    """
    Fill the liquid region under the smoothed surface curve.

    The y axis is inverted so that heights (offsets from the top) draw the
    way they do on screen.

    Returns:
        matplotlib axes.
    """
    plt = _pyplot()
    polygon = surface_outline(np.asarray(heights), width, container_height, points_per_segment)
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(3, 4))
    ax.fill(polygon[:, 0], polygon[:, 1], color=color, alpha=alpha)
    ax.set_xlim(0, width)
    ax.set_ylim(container_height, 0)
    ax.set_aspect("equal", adjustable="box")
    if title:
        ax.set_title(title)
    return ax


def plot_status_timeline(
    history: Optional[Any] = None,
    time: Optional[Sequence[float]] = None,
    status: Optional[Sequence[Any]] = None,
    ax: Optional[Any] = None,
    title: str = "Heater status",
    **kwargs: Any,
) -> Any:
    """
    Step plot of the heater status over time.

    Args:
        history: TwinHistory with 'time' and 'heater_status' keys.
        time, status: raw sequences if history is not used.
        ax: matplotlib axes (new figure if None).
        **kwargs: passed to ax.step().
    """
    plt = _pyplot()
    if history is not None:
        time = history.get("time")
        status = history.get("heater_status")
    if time is None or status is None:
        raise ValueError("Provide either history= or (time=, status=).")
    levels = [_STATUS_ORDER.index(HeaterStatus(s)) for s in status]
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(8, 3))
    ax.step(np.asarray(time, dtype=float), levels, where="post", **kwargs)
    ax.set_yticks(range(len(_STATUS_ORDER)))
    ax.set_yticklabels([s.label for s in _STATUS_ORDER])
    ax.set_xlabel("time")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    return ax
