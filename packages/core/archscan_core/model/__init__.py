"""Architecture model: people, software systems, containers and components.

Main types:
- ArchitectureModel: In-memory model with name, canonical-name and type indices
- Person, SoftwareSystem, Container, Component: The element hierarchy
- CodeElement: Implementation type backing a component
- Relationship: Directed "uses" edge between two elements
"""

from archscan_core.model.architecture import ArchitectureModel
from archscan_core.model.elements import (
    CANONICAL_NAME_SEPARATOR,
    CodeElement,
    CodeElementRole,
    Component,
    Container,
    Element,
    Person,
    Relationship,
    SoftwareSystem,
    simple_type_name,
)

__all__ = [
    "CANONICAL_NAME_SEPARATOR",
    "ArchitectureModel",
    "CodeElement",
    "CodeElementRole",
    "Component",
    "Container",
    "Element",
    "Person",
    "Relationship",
    "SoftwareSystem",
    "simple_type_name",
]
