"""Base class for component finder strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from archscan_core.diagnostics import Diagnostics
from archscan_core.exceptions import ConfigurationError
from archscan_core.model import Component

if TYPE_CHECKING:
    from archscan_core.analysis.component_finder import ComponentFinder


class ComponentFinderStrategy(ABC):
    """One way of discovering components and their relationships.

    A ComponentFinder drives every strategy in two phases:
    1. find_components() on all strategies
    2. after_find_components() on all strategies, once every component is known
    """

    def __init__(self) -> None:
        self._component_finder: ComponentFinder | None = None
        self.diagnostics = Diagnostics()

    @property
    def component_finder(self) -> ComponentFinder:
        if self._component_finder is None:
            raise ConfigurationError(
                f"{type(self).__name__} has not been registered with a component finder."
            )
        return self._component_finder

    def set_component_finder(self, component_finder: ComponentFinder) -> None:
        self._component_finder = component_finder

    def before_find_components(self) -> None:
        """Reset per-run state."""
        self.diagnostics = Diagnostics()

    @abstractmethod
    def find_components(self) -> set[Component]:
        """Discover components and register them in the finder's container.

        Returns:
            The components this strategy found
        """
        pass

    def after_find_components(self) -> None:
        """Resolve relationships once all strategies have found their components."""
        pass
