"""Element and relationship types of the architecture model.

The model is a strict ownership tree:
- Person: an actor outside the modelled systems
- SoftwareSystem: owns containers
- Container: owned by one software system, owns components
- Component: owned by one container, backed by one or more code elements

Relationships are directed "uses" edges between any two elements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from archscan_core.exceptions import ModelError

if TYPE_CHECKING:
    from archscan_core.model.architecture import ArchitectureModel

CANONICAL_NAME_SEPARATOR = "."


class CodeElementRole(str, Enum):
    """How a type contributes to a component."""

    PRIMARY = "primary"
    SUPPORTING = "supporting"


@dataclass(frozen=True)
class CodeElement:
    """Association between a component and one implementation type."""

    type: str
    """Fully-qualified type name, e.g. shop.orders.OrderService"""

    role: CodeElementRole = CodeElementRole.SUPPORTING

    @property
    def name(self) -> str:
        """Simple type name."""
        return simple_type_name(self.type)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "role": self.role.value}


@dataclass(eq=False, kw_only=True)
class Element:
    """Common base of everything that can take part in a relationship."""

    id: str
    name: str
    description: str = ""
    model: ArchitectureModel | None = field(default=None, repr=False)

    kind: ClassVar[str] = "element"

    @property
    def parent(self) -> Element | None:
        return None

    @property
    def canonical_name(self) -> str:
        parent = self.parent
        if parent is None:
            return self.name
        return f"{parent.canonical_name}{CANONICAL_NAME_SEPARATOR}{self.name}"

    @property
    def relationships(self) -> list[Relationship]:
        """Efferent relationships, in creation order."""
        return self._require_model().get_efferent_relationships(self)

    def uses(self, destination: Element, description: str, technology: str = "") -> Relationship:
        """Create the "uses" relationship to destination, or merge into the existing one."""
        return self._require_model().add_or_update_relationship(
            self, destination, description, technology
        )

    def has_efferent_relationship_with(self, destination: Element) -> bool:
        return bool(self._require_model().get_relationships_between(self, destination))

    def is_ancestor_of(self, other: Element) -> bool:
        parent = other.parent
        while parent is not None:
            if parent is self:
                return True
            parent = parent.parent
        return False

    def _require_model(self) -> ArchitectureModel:
        if self.model is None:
            raise ModelError(f'The element "{self.name}" does not belong to a model.')
        return self.model


@dataclass(eq=False, kw_only=True)
class Person(Element):
    """A named actor external to the modelled systems."""

    kind: ClassVar[str] = "person"

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(eq=False, kw_only=True)
class SoftwareSystem(Element):
    """A named software system owning zero or more containers."""

    containers: list[Container] = field(default_factory=list, repr=False)

    kind: ClassVar[str] = "software_system"

    def get_container_with_name(self, name: str) -> Container | None:
        for container in self.containers:
            if container.name == name:
                return container
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "containers": [container.to_dict() for container in self.containers],
        }


@dataclass(eq=False, kw_only=True)
class Container(Element):
    """A deployable unit owned by exactly one software system."""

    software_system: SoftwareSystem = field(repr=False)
    technology: str = ""
    components: list[Component] = field(default_factory=list, repr=False)

    kind: ClassVar[str] = "container"

    @property
    def parent(self) -> Element | None:
        return self.software_system

    def get_component_with_name(self, name: str) -> Component | None:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def get_component_of_type(self, type_name: str) -> Component | None:
        """Return the component backed by type_name, preferring its primary type."""
        for component in self.components:
            if component.type == type_name:
                return component
        for component in self.components:
            if any(code.type == type_name for code in component.code):
                return component
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "technology": self.technology,
            "components": [component.to_dict() for component in self.components],
        }


@dataclass(eq=False, kw_only=True)
class Component(Element):
    """The smallest modelled unit, backed by one or more implementation types."""

    container: Container = field(repr=False)
    technology: str = ""
    type: str | None = None
    """Primary type name used to drive discovery."""

    code: list[CodeElement] = field(default_factory=list)

    kind: ClassVar[str] = "component"

    @property
    def parent(self) -> Element | None:
        return self.container

    def set_type(self, type_name: str) -> CodeElement:
        """Set the primary type, registering it as a code element."""
        self.type = type_name
        self.code = [code for code in self.code if code.type != type_name]
        primary = CodeElement(type=type_name, role=CodeElementRole.PRIMARY)
        self.code.insert(0, primary)
        if self.model is not None:
            self.model._index_code_element(self, type_name)
        return primary

    def add_supporting_type(self, type_name: str) -> CodeElement:
        """Attach another implementation type to this component."""
        for code in self.code:
            if code.type == type_name:
                return code
        supporting = CodeElement(type=type_name, role=CodeElementRole.SUPPORTING)
        self.code.append(supporting)
        if self.model is not None:
            self.model._index_code_element(self, type_name)
        return supporting

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "technology": self.technology,
            "type": self.type,
            "code": [code.to_dict() for code in self.code],
        }


@dataclass(eq=False, kw_only=True)
class Relationship:
    """A directed "uses" edge between two elements."""

    id: str
    source: Element = field(repr=False)
    destination: Element = field(repr=False)
    description: str = ""
    technology: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source_id": self.source.id,
            "destination_id": self.destination.id,
            "description": self.description,
            "technology": self.technology,
        }

    def __str__(self) -> str:
        return f"{self.source.canonical_name} -> {self.destination.canonical_name} ({self.description!r})"


def simple_type_name(type_name: str) -> str:
    """Return the last segment of a fully-qualified type name."""
    return type_name.rsplit(".", 1)[-1]
