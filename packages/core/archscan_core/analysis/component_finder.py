"""Component finder: drives strategies over one container."""

from __future__ import annotations

import logging

from archscan_core.analysis.strategy import ComponentFinderStrategy
from archscan_core.diagnostics import Diagnostics
from archscan_core.exceptions import ConfigurationError
from archscan_core.metadata import TypeMetadataSource
from archscan_core.model import ArchitectureModel, Component, Container

logger = logging.getLogger(__name__)


class ComponentFinder:
    """Finds the components of one container using one or more strategies.

    Every strategy's find_components() completes before any strategy's
    after_find_components() starts, so relationship resolution always sees the
    complete set of components of the container.
    """

    def __init__(
        self,
        container: Container | None,
        package_to_scan: str | None,
        metadata_source: TypeMetadataSource,
        *strategies: ComponentFinderStrategy,
    ) -> None:
        if container is None:
            raise ConfigurationError("A container must be provided.")
        if container.model is None:
            raise ConfigurationError(f'The container "{container.name}" does not belong to a model.')
        if not strategies:
            raise ConfigurationError("At least one component finder strategy must be provided.")

        self.container = container
        self.package_to_scan = (package_to_scan or "").strip(".") or None
        self.metadata_source = metadata_source
        self.strategies = list(strategies)
        self.diagnostics = Diagnostics()

        for strategy in self.strategies:
            strategy.set_component_finder(self)

    @property
    def model(self) -> ArchitectureModel:
        model = self.container.model
        if model is None:
            raise ConfigurationError(f'The container "{self.container.name}" does not belong to a model.')
        return model

    def is_in_scope(self, type_name: str) -> bool:
        """Check if a type lies in the package being scanned."""
        if self.package_to_scan is None:
            return True
        return type_name == self.package_to_scan or type_name.startswith(f"{self.package_to_scan}.")

    def find_components(self) -> set[Component]:
        """Run all strategies and return the components they found.

        Raises:
            MetadataSourceUnavailableError: If the metadata source cannot be read
        """
        self.diagnostics = Diagnostics()
        components: set[Component] = set()

        for strategy in self.strategies:
            strategy.before_find_components()

        for strategy in self.strategies:
            components |= strategy.find_components()

        logger.debug(
            "Found %d components in %s; resolving relationships",
            len(components),
            self.container.canonical_name,
        )

        for strategy in self.strategies:
            strategy.after_find_components()

        for strategy in self.strategies:
            self.diagnostics.extend(strategy.diagnostics)

        return components
