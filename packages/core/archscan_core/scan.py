"""End-to-end scan of one container."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from archscan_core.analysis import (
    AnnotationsComponentFinderStrategy,
    ComponentFinder,
    FieldTypeDependencyPass,
)
from archscan_core.diagnostics import Diagnostics
from archscan_core.metadata import PythonSourceMetadataSource, TypeMetadataSource
from archscan_core.model import Component, Container
from archscan_core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Components found in one container plus the scan's warnings."""

    container: Container
    components: set[Component] = field(default_factory=set)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def warnings(self) -> list[str]:
        return self.diagnostics.messages


def build_metadata_source(settings: Settings | None = None) -> PythonSourceMetadataSource:
    """Create the Python source metadata source described by the settings."""
    settings = settings or get_settings()
    return PythonSourceMetadataSource(settings.source_roots, exclude=settings.exclude_patterns)


def scan(
    container: Container,
    settings: Settings | None = None,
    source: TypeMetadataSource | None = None,
) -> ScanResult:
    """Discover the components of a container and resolve their markers.

    Args:
        container: Container that receives the components
        settings: Scanner settings (defaults to get_settings())
        source: Metadata source; built from settings.source_roots when omitted

    Returns:
        ScanResult with the components and warnings

    Raises:
        ConfigurationError: If the container is not part of a model
        MetadataSourceUnavailableError: If the sources cannot be read
    """
    settings = settings or get_settings()
    source = source or build_metadata_source(settings)

    structural_pass = FieldTypeDependencyPass() if settings.include_structural else None
    finder = ComponentFinder(
        container,
        settings.package_to_scan,
        source,
        AnnotationsComponentFinderStrategy(structural_pass=structural_pass),
    )
    components = finder.find_components()
    logger.info(
        "Scanned %s: %d components, %d warnings",
        container.canonical_name,
        len(components),
        len(finder.diagnostics),
    )
    return ScanResult(container=container, components=components, diagnostics=finder.diagnostics)
