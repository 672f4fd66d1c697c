"""In-memory architecture model with lookup indices."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from archscan_core.exceptions import DuplicateElementError, ModelError
from archscan_core.model.elements import (
    CodeElementRole,
    Component,
    Container,
    Element,
    Person,
    Relationship,
    SoftwareSystem,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Element)


class ArchitectureModel:
    """People, software systems, containers, components and their relationships.

    Provides lookup by:
    - Element ID (direct)
    - Name (people and software systems share one namespace)
    - Canonical name (System.Container.Component)
    - Type name (component backing a code element)

    Relationships are directed; several edges may exist for one pair when they
    come from add_relationship, while add_or_update_relationship merges.
    """

    def __init__(self) -> None:
        self._elements: dict[str, Element] = {}
        self._relationships: list[Relationship] = []
        self._relationship_ids: set[str] = set()
        self._sequence = 0

        # Indices for efficient lookup
        self._people: dict[str, Person] = {}
        self._software_systems: dict[str, SoftwareSystem] = {}
        self._by_canonical_name: dict[str, Element] = {}
        self._components_by_type: dict[str, list[Component]] = {}
        self._outgoing: dict[str, list[Relationship]] = {}  # source_id -> relationships
        self._incoming: dict[str, list[Relationship]] = {}  # destination_id -> relationships

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def add_person(self, name: str, description: str = "", *, id: str | None = None) -> Person:
        """Add a person.

        Raises:
            DuplicateElementError: If a person or software system already uses the name
        """
        self._check_top_level_name(name)
        person = self._register(Person(id=self._claim_id(id), name=name, description=description))
        self._people[name] = person
        return person

    def add_software_system(
        self, name: str, description: str = "", *, id: str | None = None
    ) -> SoftwareSystem:
        """Add a software system.

        Raises:
            DuplicateElementError: If a person or software system already uses the name
        """
        self._check_top_level_name(name)
        software_system = self._register(
            SoftwareSystem(id=self._claim_id(id), name=name, description=description)
        )
        self._software_systems[name] = software_system
        return software_system

    def add_container(
        self,
        software_system: SoftwareSystem,
        name: str,
        description: str = "",
        technology: str = "",
        *,
        id: str | None = None,
    ) -> Container:
        """Add a container to a software system.

        Raises:
            DuplicateElementError: If the software system already has a container of that name
        """
        self._require_owned(software_system)
        if software_system.get_container_with_name(name) is not None:
            raise DuplicateElementError(
                f'A container named "{name}" already exists in "{software_system.name}".'
            )
        container = self._register(
            Container(
                id=self._claim_id(id),
                name=name,
                description=description,
                technology=technology,
                software_system=software_system,
            )
        )
        software_system.containers.append(container)
        return container

    def add_component(
        self,
        container: Container,
        name: str,
        type_name: str | None = None,
        description: str = "",
        technology: str = "",
        *,
        id: str | None = None,
    ) -> Component:
        """Add a component to a container, or return the one already registered.

        A component is identified by its container plus primary type name. A
        same-named component without a type adopts the given type.

        Raises:
            DuplicateElementError: If a same-named component is backed by another type
        """
        self._require_owned(container)

        if type_name:
            for existing in container.components:
                if existing.type == type_name:
                    return existing

        named = container.get_component_with_name(name)
        if named is not None:
            if type_name and named.type is None:
                named.set_type(type_name)
                return named
            if not type_name or named.type == type_name:
                return named
            raise DuplicateElementError(
                f'A component named "{name}" already exists in "{container.canonical_name}" '
                f'with type "{named.type}".'
            )

        component = self._register(
            Component(
                id=self._claim_id(id),
                name=name,
                description=description,
                technology=technology,
                container=container,
            )
        )
        container.components.append(component)
        if type_name:
            component.set_type(type_name)
        logger.debug("Added component %s", component.canonical_name)
        return component

    def get_element(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def get_elements(self) -> list[Element]:
        return list(self._elements.values())

    def get_people(self) -> list[Person]:
        return list(self._people.values())

    def get_software_systems(self) -> list[SoftwareSystem]:
        return list(self._software_systems.values())

    def get_person_with_name(self, name: str) -> Person | None:
        return self._people.get(name)

    def get_software_system_with_name(self, name: str) -> SoftwareSystem | None:
        return self._software_systems.get(name)

    def get_container_with_name(
        self, software_system: SoftwareSystem, name: str
    ) -> Container | None:
        return software_system.get_container_with_name(name)

    def get_components(self, container: Container) -> set[Component]:
        return set(container.components)

    def get_component_of_type(
        self, type_name: str, container: Container | None = None
    ) -> Component | None:
        """Return the component backed by type_name.

        Args:
            type_name: Fully-qualified type name
            container: Restrict the lookup to this container

        Returns:
            The owning component if found, None otherwise
        """
        if container is not None:
            return container.get_component_of_type(type_name)
        candidates = self._components_by_type.get(type_name, [])
        for component in candidates:
            if component.type == type_name:
                return component
        return candidates[0] if candidates else None

    def get_element_with_canonical_name(self, canonical_name: str) -> Element | None:
        return self._by_canonical_name.get(canonical_name)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def add_relationship(
        self,
        source: Element,
        destination: Element,
        description: str = "",
        technology: str = "",
        *,
        id: str | None = None,
    ) -> Relationship:
        """Add a relationship.

        Duplicate relationships (same source and destination) are allowed.

        Raises:
            ModelError: If an endpoint is foreign to the model or the edge links an
                element to itself, its parent or its child
        """
        self._require_owned(source)
        self._require_owned(destination)
        if source is destination:
            raise ModelError(f'"{source.canonical_name}" cannot use itself.')
        if source.is_ancestor_of(destination) or destination.is_ancestor_of(source):
            raise ModelError(
                "Relationships cannot be added between parents and children "
                f'("{source.canonical_name}" and "{destination.canonical_name}").'
            )

        relationship = Relationship(
            id=self._claim_id(id),
            source=source,
            destination=destination,
            description=description,
            technology=technology,
        )
        self._relationships.append(relationship)
        self._relationship_ids.add(relationship.id)
        self._outgoing.setdefault(source.id, []).append(relationship)
        self._incoming.setdefault(destination.id, []).append(relationship)
        return relationship

    def add_or_update_relationship(
        self,
        source: Element,
        destination: Element,
        description: str,
        technology: str = "",
    ) -> Relationship:
        """Create the relationship, or update every existing one for the pair.

        Returns:
            The created relationship, or the first existing one
        """
        existing = self.get_relationships_between(source, destination)
        if not existing:
            return self.add_relationship(source, destination, description, technology)

        for relationship in existing:
            relationship.description = description
            if technology:
                relationship.technology = technology
        return existing[0]

    def get_relationships_between(self, source: Element, destination: Element) -> list[Relationship]:
        return [
            relationship
            for relationship in self._outgoing.get(source.id, [])
            if relationship.destination is destination
        ]

    def get_efferent_relationships(self, element: Element) -> list[Relationship]:
        return list(self._outgoing.get(element.id, []))

    def get_afferent_relationships(self, element: Element) -> list[Relationship]:
        return list(self._incoming.get(element.id, []))

    @property
    def relationships(self) -> list[Relationship]:
        return list(self._relationships)

    def relationship_count(self) -> int:
        return len(self._relationships)

    def element_count(self) -> int:
        return len(self._elements)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the model to a dictionary."""
        return {
            "people": [person.to_dict() for person in self._people.values()],
            "software_systems": [
                software_system.to_dict() for software_system in self._software_systems.values()
            ],
            "relationships": [relationship.to_dict() for relationship in self._relationships],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ArchitectureModel:
        """Deserialize a model from a dictionary produced by to_dict.

        Raises:
            ModelError: If a relationship refers to an unknown element
        """
        model = cls()
        for person_data in data.get("people", []):
            model.add_person(
                person_data["name"], person_data.get("description", ""), id=person_data.get("id")
            )
        for system_data in data.get("software_systems", []):
            software_system = model.add_software_system(
                system_data["name"], system_data.get("description", ""), id=system_data.get("id")
            )
            for container_data in system_data.get("containers", []):
                container = model.add_container(
                    software_system,
                    container_data["name"],
                    container_data.get("description", ""),
                    container_data.get("technology", ""),
                    id=container_data.get("id"),
                )
                for component_data in container_data.get("components", []):
                    component = model.add_component(
                        container,
                        component_data["name"],
                        component_data.get("type"),
                        component_data.get("description", ""),
                        component_data.get("technology", ""),
                        id=component_data.get("id"),
                    )
                    for code_data in component_data.get("code", []):
                        if CodeElementRole(code_data.get("role", "supporting")) is CodeElementRole.PRIMARY:
                            continue
                        component.add_supporting_type(code_data["type"])
        for relationship_data in data.get("relationships", []):
            source = model.get_element(str(relationship_data["source_id"]))
            destination = model.get_element(str(relationship_data["destination_id"]))
            if source is None or destination is None:
                raise ModelError(
                    f'Relationship {relationship_data.get("id")} refers to an unknown element.'
                )
            model.add_relationship(
                source,
                destination,
                relationship_data.get("description", ""),
                relationship_data.get("technology", ""),
                id=relationship_data.get("id"),
            )
        return model

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _claim_id(self, requested: str | None) -> str:
        if requested is None:
            self._sequence += 1
            while str(self._sequence) in self._elements or self._relationship_id_taken(
                str(self._sequence)
            ):
                self._sequence += 1
            return str(self._sequence)

        element_id = str(requested)
        if element_id in self._elements or self._relationship_id_taken(element_id):
            raise DuplicateElementError(f'The id "{element_id}" is already in use.')
        if element_id.isdigit():
            self._sequence = max(self._sequence, int(element_id))
        return element_id

    def _relationship_id_taken(self, candidate: str) -> bool:
        return candidate in self._relationship_ids

    def _register(self, element: E) -> E:
        element.model = self
        self._elements[element.id] = element
        self._by_canonical_name[element.canonical_name] = element
        return element

    def _index_code_element(self, component: Component, type_name: str) -> None:
        owners = self._components_by_type.setdefault(type_name, [])
        if component not in owners:
            owners.append(component)

    def _check_top_level_name(self, name: str) -> None:
        if name in self._people or name in self._software_systems:
            raise DuplicateElementError(
                f'A person or software system named "{name}" already exists.'
            )

    def _require_owned(self, element: Element) -> None:
        if element.model is not self or self._elements.get(element.id) is not element:
            raise ModelError(f'The element "{element.name}" does not belong to this model.')
