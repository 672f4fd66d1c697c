"""Type metadata source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from archscan_core.metadata.markers import MarkerKind, TypeMetadata


class TypeMetadataSource(ABC):
    """Provides declared markers for types without executing them.

    Implementations raise:
    - TypeNotFoundError when a single type cannot be loaded
    - MetadataSourceUnavailableError when the source itself cannot be used
    """

    @abstractmethod
    def get_markers(self, type_name: str) -> TypeMetadata:
        """Return the type-level and field-level markers of a type.

        Args:
            type_name: Fully-qualified type name

        Returns:
            TypeMetadata for the type

        Raises:
            TypeNotFoundError: If the type cannot be located
            MetadataSourceUnavailableError: If the source cannot be read at all
        """
        pass

    @abstractmethod
    def find_types_with_marker(self, kind: MarkerKind) -> list[str]:
        """Return the sorted names of all types carrying a type-level marker.

        Raises:
            MetadataSourceUnavailableError: If the source cannot be read at all
        """
        pass
