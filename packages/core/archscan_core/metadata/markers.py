"""Marker records extracted from type metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MarkerKind(str, Enum):
    """Kinds of declarative markers understood by the scanner."""

    COMPONENT = "component"

    # Efferent dependencies
    USES_COMPONENT = "uses_component"  # field-level
    USES_SOFTWARE_SYSTEM = "uses_software_system"
    USES_CONTAINER = "uses_container"

    # Afferent dependencies
    USED_BY_PERSON = "used_by_person"
    USED_BY_SOFTWARE_SYSTEM = "used_by_software_system"
    USED_BY_CONTAINER = "used_by_container"


FIELD_MARKER_KINDS = frozenset({MarkerKind.USES_COMPONENT})
TYPE_MARKER_KINDS = frozenset(kind for kind in MarkerKind if kind not in FIELD_MARKER_KINDS)


@dataclass(frozen=True)
class Marker:
    """One declarative marker attached to a type or a field."""

    kind: MarkerKind
    name: str = ""
    """Referenced element name (empty for component and uses-component markers)."""

    description: str = ""
    technology: str = ""


@dataclass(frozen=True)
class FieldMetadata:
    """A declared field of a type."""

    name: str
    type_name: str
    """Fully-qualified type of the field."""

    markers: tuple[Marker, ...] = ()


@dataclass
class TypeMetadata:
    """Markers declared on one type and on its fields."""

    name: str
    """Fully-qualified type name."""

    type_markers: list[Marker] = field(default_factory=list)
    fields: list[FieldMetadata] = field(default_factory=list)
    source_file: str | None = None

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def field_markers(self) -> list[tuple[str, Marker]]:
        """(field type name, marker) pairs across all fields."""
        return [(item.type_name, marker) for item in self.fields for marker in item.markers]

    def get_type_markers(self, kind: MarkerKind) -> list[Marker]:
        """Type-level markers of one kind, in declaration order."""
        return [marker for marker in self.type_markers if marker.kind == kind]

    def get_field_markers(self, kind: MarkerKind) -> list[tuple[str, Marker]]:
        return [(type_name, marker) for type_name, marker in self.field_markers if marker.kind == kind]

    def has_marker(self, kind: MarkerKind) -> bool:
        if kind in FIELD_MARKER_KINDS:
            return bool(self.get_field_markers(kind))
        return bool(self.get_type_markers(kind))

    @property
    def component_marker(self) -> Marker | None:
        markers = self.get_type_markers(MarkerKind.COMPONENT)
        return markers[0] if markers else None
