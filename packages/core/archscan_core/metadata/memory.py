"""Dictionary-backed metadata source."""

from __future__ import annotations

from collections.abc import Iterable

from archscan_core.exceptions import TypeNotFoundError
from archscan_core.metadata.markers import MarkerKind, TypeMetadata
from archscan_core.metadata.source import TypeMetadataSource


class InMemoryMetadataSource(TypeMetadataSource):
    """Serves metadata that was extracted ahead of time."""

    def __init__(self, types: Iterable[TypeMetadata] = ()) -> None:
        self._types: dict[str, TypeMetadata] = {}
        for metadata in types:
            self.add(metadata)

    def add(self, metadata: TypeMetadata) -> None:
        """Add or replace the metadata of one type."""
        self._types[metadata.name] = metadata

    def get_markers(self, type_name: str) -> TypeMetadata:
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeNotFoundError(type_name) from None

    def find_types_with_marker(self, kind: MarkerKind) -> list[str]:
        return sorted(name for name, metadata in self._types.items() if metadata.has_marker(kind))

    def __len__(self) -> int:
        return len(self._types)
