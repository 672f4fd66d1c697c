"""Component finder strategy driven by archscan markers.

Looks for the following markers:
- Definitions: @component
- Efferent dependencies: uses_component (field-level), @uses_software_system, @uses_container
- Afferent dependencies: @used_by_person, @used_by_software_system, @used_by_container

Component-to-component edges are expected to come from structural analysis, so
the uses_component marker only describes edges that already exist. The other
markers cross model layers that code structure cannot see; they create the
edge, or merge into the one that is already there.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from archscan_core.analysis.naming import (
    resolve_component_of_type,
    resolve_container,
    resolve_person,
    resolve_software_system,
)
from archscan_core.analysis.strategy import ComponentFinderStrategy
from archscan_core.analysis.structural import FieldTypeDependencyPass
from archscan_core.diagnostics import (
    DUPLICATE_COMPONENT,
    INVALID_RELATIONSHIP,
    TYPE_NOT_FOUND,
    UNRESOLVED_REFERENCE,
    NotFound,
    Resolution,
)
from archscan_core.exceptions import DuplicateElementError, ModelError, TypeNotFoundError
from archscan_core.metadata import Marker, MarkerKind, TypeMetadata
from archscan_core.model import Component, Element

logger = logging.getLogger(__name__)

Resolver = Callable[[Component, str], Resolution]


class AnnotationsComponentFinderStrategy(ComponentFinderStrategy):
    """Finds @component types and resolves their dependency markers.

    Args:
        structural_pass: Runs before marker resolution to add the undescribed
            component-to-component edges. Leave unset when the model already
            holds them.
    """

    def __init__(self, structural_pass: FieldTypeDependencyPass | None = None) -> None:
        super().__init__()
        self.structural_pass = structural_pass

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def find_components(self) -> set[Component]:
        """Register every @component type of the scanned package in the container."""
        finder = self.component_finder
        model = finder.model
        source = finder.metadata_source
        components: set[Component] = set()

        for type_name in source.find_types_with_marker(MarkerKind.COMPONENT):
            if not finder.is_in_scope(type_name):
                continue
            try:
                metadata = source.get_markers(type_name)
            except TypeNotFoundError as e:
                self.diagnostics.warn(TYPE_NOT_FOUND, type_name, str(e))
                continue

            marker = metadata.component_marker or Marker(kind=MarkerKind.COMPONENT)
            try:
                component = model.add_component(
                    finder.container,
                    metadata.simple_name,
                    type_name,
                    marker.description,
                    marker.technology,
                )
            except DuplicateElementError as e:
                self.diagnostics.warn(DUPLICATE_COMPONENT, type_name, str(e))
                continue
            components.add(component)

        return components

    # ------------------------------------------------------------------
    # Relationship resolution
    # ------------------------------------------------------------------

    def after_find_components(self) -> None:
        """Resolve the dependency markers of every component in the container."""
        finder = self.component_finder
        if self.structural_pass is not None:
            self.structural_pass.find_dependencies(finder.container, finder.metadata_source)

        for component in list(finder.container.components):
            if component.type is None:
                continue
            code_metadata = self._load_code_metadata(component)

            # efferent dependencies
            for metadata in code_metadata:
                self._find_uses_component_markers(component, metadata)
            for metadata in code_metadata:
                self._find_type_markers(
                    component, metadata, MarkerKind.USES_SOFTWARE_SYSTEM, self._software_system
                )
            for metadata in code_metadata:
                self._find_type_markers(
                    component, metadata, MarkerKind.USES_CONTAINER, resolve_container
                )

            # and the afferent dependencies
            for metadata in code_metadata:
                self._find_type_markers(component, metadata, MarkerKind.USED_BY_PERSON, self._person)
            for metadata in code_metadata:
                self._find_type_markers(
                    component, metadata, MarkerKind.USED_BY_SOFTWARE_SYSTEM, self._software_system
                )
            for metadata in code_metadata:
                self._find_type_markers(
                    component, metadata, MarkerKind.USED_BY_CONTAINER, resolve_container
                )

    def _load_code_metadata(self, component: Component) -> list[TypeMetadata]:
        loaded: list[TypeMetadata] = []
        for code in component.code:
            try:
                loaded.append(self.component_finder.metadata_source.get_markers(code.type))
            except TypeNotFoundError as e:
                self.diagnostics.warn(TYPE_NOT_FOUND, component.canonical_name, str(e))
        return loaded

    def _find_uses_component_markers(self, component: Component, metadata: TypeMetadata) -> None:
        """Describe existing component dependencies marked with uses_component."""
        for field_type, marker in metadata.get_field_markers(MarkerKind.USES_COMPONENT):
            resolution = resolve_component_of_type(component, field_type)
            if isinstance(resolution, NotFound):
                self._warn_unresolved(component, metadata, marker, resolution)
                continue

            matched = [
                relationship
                for relationship in component.relationships
                if relationship.destination is resolution.element
            ]
            if not matched:
                logger.debug(
                    "%s has no relationship with %s to describe",
                    component.canonical_name,
                    resolution.element.canonical_name,
                )
            for relationship in matched:
                relationship.description = marker.description
                if marker.technology:
                    relationship.technology = marker.technology

    def _find_type_markers(
        self,
        component: Component,
        metadata: TypeMetadata,
        kind: MarkerKind,
        resolve: Resolver,
    ) -> None:
        """Create or merge the relationships declared by one kind of type-level marker."""
        for marker in metadata.get_type_markers(kind):
            resolution = resolve(component, marker.name)
            if isinstance(resolution, NotFound):
                self._warn_unresolved(component, metadata, marker, resolution)
                continue

            source, destination = self._endpoints(kind, component, resolution.element)
            try:
                source.uses(destination, marker.description, marker.technology)
            except ModelError as e:
                self.diagnostics.warn(INVALID_RELATIONSHIP, component.canonical_name, str(e))

    @staticmethod
    def _endpoints(
        kind: MarkerKind, component: Component, target: Element
    ) -> tuple[Element, Element]:
        if kind in (
            MarkerKind.USED_BY_PERSON,
            MarkerKind.USED_BY_SOFTWARE_SYSTEM,
            MarkerKind.USED_BY_CONTAINER,
        ):
            return target, component
        return component, target

    def _software_system(self, component: Component, name: str) -> Resolution:
        return resolve_software_system(self.component_finder.model, name)

    def _person(self, component: Component, name: str) -> Resolution:
        return resolve_person(self.component_finder.model, name)

    def _warn_unresolved(
        self,
        component: Component,
        metadata: TypeMetadata,
        marker: Marker,
        resolution: NotFound,
    ) -> None:
        self.diagnostics.warn(
            UNRESOLVED_REFERENCE,
            component.canonical_name,
            f"{resolution.message()} Referenced by {marker.kind.value} on {metadata.name}.",
        )
