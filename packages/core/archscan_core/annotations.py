"""Marker declarations for code scanned by archscan.

Usage:
    from typing import Annotated

    from archscan_core.annotations import component, uses_component, uses_software_system

    @component("Handles orders", technology="Python")
    @uses_software_system("Payments", description="Processes payment")
    class OrderService:
        repository: Annotated[OrderRepository, uses_component("Reads and writes orders")]

The scanner reads these declarations statically. At runtime the decorators only
record Marker objects on the class, so decorated code behaves unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from archscan_core.metadata.markers import Marker, MarkerKind

T = TypeVar("T", bound=type)

MARKERS_ATTRIBUTE = "__archscan_markers__"


def _type_marker(marker: Marker) -> Callable[[T], T]:
    def decorate(cls: T) -> T:
        # Decorators apply bottom-up; prepend to keep source order
        declared = cls.__dict__.get(MARKERS_ATTRIBUTE, ())
        setattr(cls, MARKERS_ATTRIBUTE, (marker, *declared))
        return cls

    return decorate


def component(description: str | T = "", technology: str = "") -> Callable[[T], T] | T:
    """Declare the decorated class as a component.

    Usable bare (``@component``) or called (``@component("Handles orders")``).
    """
    if isinstance(description, type):
        return _type_marker(Marker(kind=MarkerKind.COMPONENT))(description)
    return _type_marker(
        Marker(kind=MarkerKind.COMPONENT, description=description, technology=technology)
    )


def uses_software_system(name: str, description: str = "", technology: str = "") -> Callable[[T], T]:
    """Declare that the component uses the named software system. Repeatable."""
    return _type_marker(Marker(MarkerKind.USES_SOFTWARE_SYSTEM, name, description, technology))


def uses_container(name: str, description: str = "", technology: str = "") -> Callable[[T], T]:
    """Declare that the component uses a container, by short or canonical name. Repeatable."""
    return _type_marker(Marker(MarkerKind.USES_CONTAINER, name, description, technology))


def used_by_person(name: str, description: str = "", technology: str = "") -> Callable[[T], T]:
    return _type_marker(Marker(MarkerKind.USED_BY_PERSON, name, description, technology))


def used_by_software_system(
    name: str, description: str = "", technology: str = ""
) -> Callable[[T], T]:
    return _type_marker(Marker(MarkerKind.USED_BY_SOFTWARE_SYSTEM, name, description, technology))


def used_by_container(name: str, description: str = "", technology: str = "") -> Callable[[T], T]:
    return _type_marker(Marker(MarkerKind.USED_BY_CONTAINER, name, description, technology))


def uses_component(description: str = "", technology: str = "") -> Marker:
    """Field marker describing a dependency on another component.

    Attach it with typing.Annotated; the field's type names the component.
    """
    return Marker(kind=MarkerKind.USES_COMPONENT, description=description, technology=technology)


def get_declared_markers(cls: type) -> list[Marker]:
    """Type-level markers declared directly on cls, in source order."""
    return list(cls.__dict__.get(MARKERS_ATTRIBUTE, ()))
