"""Annotation-driven C4 architecture model discovery."""

from archscan_core.analysis import (
    AnnotationsComponentFinderStrategy,
    ComponentFinder,
    ComponentFinderStrategy,
    FieldTypeDependencyPass,
    resolve_container,
)
from archscan_core.diagnostics import Diagnostics, Found, NotFound, ScanWarning
from archscan_core.exceptions import (
    ArchscanError,
    ConfigurationError,
    DuplicateElementError,
    MetadataError,
    MetadataSourceUnavailableError,
    ModelError,
    TypeNotFoundError,
    WorkspaceFormatError,
)
from archscan_core.metadata import (
    FieldMetadata,
    InMemoryMetadataSource,
    Marker,
    MarkerKind,
    PythonSourceMetadataSource,
    TypeMetadata,
    TypeMetadataSource,
)
from archscan_core.model import (
    ArchitectureModel,
    CodeElement,
    Component,
    Container,
    Element,
    Person,
    Relationship,
    SoftwareSystem,
)
from archscan_core.scan import ScanResult, scan
from archscan_core.workspace import Workspace
from archscan_core.workspace_io import (
    load_workspace_from_json,
    print_workspace_as_json,
    save_workspace_to_json,
)

__all__ = [
    "AnnotationsComponentFinderStrategy",
    "ArchitectureModel",
    "ArchscanError",
    "CodeElement",
    "Component",
    "ComponentFinder",
    "ComponentFinderStrategy",
    "ConfigurationError",
    "Container",
    "Diagnostics",
    "DuplicateElementError",
    "Element",
    "FieldMetadata",
    "FieldTypeDependencyPass",
    "Found",
    "InMemoryMetadataSource",
    "Marker",
    "MarkerKind",
    "MetadataError",
    "MetadataSourceUnavailableError",
    "ModelError",
    "NotFound",
    "Person",
    "PythonSourceMetadataSource",
    "Relationship",
    "ScanResult",
    "ScanWarning",
    "SoftwareSystem",
    "TypeMetadata",
    "TypeMetadataSource",
    "TypeNotFoundError",
    "Workspace",
    "WorkspaceFormatError",
    "load_workspace_from_json",
    "print_workspace_as_json",
    "resolve_container",
    "save_workspace_to_json",
    "scan",
]
