"""Component discovery and relationship resolution.

Main components:
- ComponentFinder: Runs strategies over one container, discovery before resolution
- ComponentFinderStrategy: Base class for discovery strategies
- AnnotationsComponentFinderStrategy: Marker-driven discovery and resolution
- FieldTypeDependencyPass: Structural edges from declared field types
- resolve_container: Scoped-then-canonical container name resolution
"""

from archscan_core.analysis.annotations_strategy import AnnotationsComponentFinderStrategy
from archscan_core.analysis.component_finder import ComponentFinder
from archscan_core.analysis.naming import (
    resolve_component_of_type,
    resolve_container,
    resolve_person,
    resolve_software_system,
)
from archscan_core.analysis.strategy import ComponentFinderStrategy
from archscan_core.analysis.structural import FieldTypeDependencyPass

__all__ = [
    "AnnotationsComponentFinderStrategy",
    "ComponentFinder",
    "ComponentFinderStrategy",
    "FieldTypeDependencyPass",
    "resolve_component_of_type",
    "resolve_container",
    "resolve_person",
    "resolve_software_system",
]
