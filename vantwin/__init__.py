"""
VanTwin: liquid-surface and timed-device core of a camper van control panel.
"""

__version__ = "0.1.0"

from vantwin.core.system import PanelTwin
from vantwin.core.component import TwinComponent
from vantwin.physics.surface import SurfaceSimulator
from vantwin.control.heater import TimedDeviceController

__all__ = [
    "__version__",
    "PanelTwin",
    "TwinComponent",
    "SurfaceSimulator",
    "TimedDeviceController",
]
