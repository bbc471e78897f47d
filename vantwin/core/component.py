"""Interfaccia base per i componenti a passo di frame del twin."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class TwinComponent(ABC):
    """
    Base interface for frame-driven components (liquid surface, tank view).

    The host calls initialize() once when the component is bound to a rendering
    surface and step() once per display frame.
    """

    @abstractmethod
    def initialize(self, **kwargs: Any) -> None:
        """(Re)initialize the component state."""
        pass

    @abstractmethod
    def step(self, **kwargs: Any) -> Any:
        """
        Advance one frame.

        Not reentrant: a call must complete before the next one begins.
        """
        pass

    def state_dict(self) -> Dict[str, Any]:
        """
        Internal state for checkpoints and debugging.
        Override for stateful components.
        """
        return {}
