"""Core: component interface, frame history and panel orchestrator."""

from vantwin.core.component import TwinComponent
from vantwin.core.history import TwinHistory
from vantwin.core.system import PanelStep, PanelTwin

__all__ = ["TwinComponent", "TwinHistory", "PanelTwin", "PanelStep"]
