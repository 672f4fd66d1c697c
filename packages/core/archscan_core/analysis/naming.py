"""Resolve names declared in markers to model elements."""

from __future__ import annotations

from archscan_core.diagnostics import Found, NotFound, Resolution
from archscan_core.exceptions import ConfigurationError
from archscan_core.model import (
    ArchitectureModel,
    Component,
    Container,
    Person,
    SoftwareSystem,
)


def _owning_container(component: Component) -> Container:
    container = getattr(component, "container", None)
    if container is None:
        raise ConfigurationError(f'The component "{component.name}" is not owned by a container.')
    if container.model is None:
        raise ConfigurationError(f'The container "{container.name}" does not belong to a model.')
    return container


def resolve_container(component: Component, name: str) -> Resolution[Container]:
    """Resolve a container name declared on a component.

    First match wins:
    1. a container with that name in the component's own software system
    2. an element with that canonical name (e.g. "Marketing.Backend"), accepted
       only if it is a container

    Raises:
        ConfigurationError: If the component has no owning container
    """
    container = _owning_container(component)

    scoped = container.software_system.get_container_with_name(name)
    if scoped is not None:
        return Found(scoped)

    element = container.model.get_element_with_canonical_name(name)
    if isinstance(element, Container):
        return Found(element)
    return NotFound(name=name, kind="container")


def resolve_component_of_type(component: Component, type_name: str) -> Resolution[Component]:
    """Resolve a field type to the component owning it, within the same container."""
    container = _owning_container(component)
    destination = container.get_component_of_type(type_name)
    if destination is None:
        return NotFound(name=type_name, kind="component")
    return Found(destination)


def resolve_software_system(model: ArchitectureModel, name: str) -> Resolution[SoftwareSystem]:
    software_system = model.get_software_system_with_name(name)
    if software_system is None:
        return NotFound(name=name, kind="software system")
    return Found(software_system)


def resolve_person(model: ArchitectureModel, name: str) -> Resolution[Person]:
    person = model.get_person_with_name(name)
    if person is None:
        return NotFound(name=name, kind="person")
    return Found(person)
