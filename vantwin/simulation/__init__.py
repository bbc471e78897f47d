"""
Simulation helpers: plotting of tank surfaces and heater timelines (_utils).
"""

from vantwin.simulation._utils import plot_status_timeline, plot_surface

__all__ = ["plot_surface", "plot_status_timeline"]
