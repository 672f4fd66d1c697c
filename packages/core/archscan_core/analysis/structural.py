"""Structural dependencies derived from declared field types."""

from __future__ import annotations

import logging

from archscan_core.exceptions import TypeNotFoundError
from archscan_core.metadata import TypeMetadataSource
from archscan_core.model import Container, Relationship

logger = logging.getLogger(__name__)


class FieldTypeDependencyPass:
    """Adds undescribed "uses" edges between components of one container.

    A component depends on another when one of its code elements declares a
    field whose type backs the other component. Descriptions stay empty: code
    structure says that a dependency exists, not what it is for.
    """

    def find_dependencies(
        self, container: Container, metadata_source: TypeMetadataSource
    ) -> list[Relationship]:
        """Add the missing structural relationships.

        Returns:
            The relationships that were added
        """
        model = container.model
        if model is None:
            return []

        added: list[Relationship] = []
        for component in list(container.components):
            for code in component.code:
                try:
                    metadata = metadata_source.get_markers(code.type)
                except TypeNotFoundError as e:
                    # Reported by the relationship resolution pass
                    logger.debug("No structural dependencies for %s: %s", code.type, e)
                    continue

                for field in metadata.fields:
                    destination = container.get_component_of_type(field.type_name)
                    if destination is None or destination is component:
                        continue
                    if component.has_efferent_relationship_with(destination):
                        continue
                    added.append(model.add_relationship(component, destination))

        logger.debug(
            "Added %d structural relationships in %s", len(added), container.canonical_name
        )
        return added
