"""Type metadata: marker records and the sources that provide them.

Main components:
- TypeMetadataSource: Interface returning markers for a type name
- InMemoryMetadataSource: Metadata extracted ahead of time
- PythonSourceMetadataSource: Static AST scan of Python source roots
- Marker, MarkerKind, TypeMetadata, FieldMetadata: Marker records
"""

from archscan_core.metadata.markers import (
    FIELD_MARKER_KINDS,
    TYPE_MARKER_KINDS,
    FieldMetadata,
    Marker,
    MarkerKind,
    TypeMetadata,
)
from archscan_core.metadata.memory import InMemoryMetadataSource
from archscan_core.metadata.python_source import (
    PythonSourceMetadataSource,
    extract_type_metadata,
    module_name_for,
)
from archscan_core.metadata.source import TypeMetadataSource

__all__ = [
    "FIELD_MARKER_KINDS",
    "TYPE_MARKER_KINDS",
    "FieldMetadata",
    "InMemoryMetadataSource",
    "Marker",
    "MarkerKind",
    "PythonSourceMetadataSource",
    "TypeMetadata",
    "TypeMetadataSource",
    "extract_type_metadata",
    "module_name_for",
]
