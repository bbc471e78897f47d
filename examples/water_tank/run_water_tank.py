"""
Example: fresh/gray water tanks on a virtual frame clock, with a few pointer
presses and a level change; plots the final surfaces if matplotlib is available.
"""

import logging
import sys
from pathlib import Path

import numpy as np

# Add repository root (VanTwin) to the path
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from vantwin.config import PanelConfig
from vantwin.core import PanelTwin, TwinHistory
from vantwin.logging_config import setup_logging


def main() -> None:
    setup_logging(logging.INFO)
    history = TwinHistory()
    panel = PanelTwin(config=PanelConfig(), history=history)
    fresh = panel.add_tank("fresh", 82.0, width=160, height=240, seed=42)
    gray = panel.add_tank("gray", 34.0, width=160, height=240, seed=43)

    n_frames = 600
    for frame in range(n_frames):
        if frame == 60:
            panel.press("fresh", 40.0)
        if frame == 200:
            panel.press("gray", 120.0)
        if frame == 300:
            panel.set_level("fresh", 70.0)
        panel.step()

    for name, tank in (("fresh", fresh), ("gray", gray)):
        h = tank.heights()
        print(f"{name}: mean height {h.mean():.2f} px, ripple {np.ptp(h):.2f} px, "
              f"max |v| {tank.surface.max_abs_velocity():.3f}")

    try:
        import matplotlib.pyplot as plt
        from vantwin.simulation import plot_surface

        _, axes = plt.subplots(1, 2, figsize=(6, 4))
        plot_surface(fresh.heights(), 160, 240, ax=axes[0], title="Fresh water")
        plot_surface(gray.heights(), 160, 240, ax=axes[1], color="#6B7280", title="Gray water")
        plt.tight_layout()
        # plt.savefig("tanks.png", dpi=120)
        plt.close()
    except ImportError:
        print("matplotlib not available, skip plots")


if __name__ == "__main__":
    main()
