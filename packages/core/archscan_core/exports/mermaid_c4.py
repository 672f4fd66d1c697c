"""Mermaid C4 export of an architecture model."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from archscan_core.model import (
    Component,
    Container,
    Element,
    Person,
    Relationship,
    SoftwareSystem,
)
from archscan_core.settings import get_settings
from archscan_core.workspace import Workspace

SUPPORTED_C4_VIEWS = {"context", "container", "component"}
DEFAULT_C4_VIEW = "component"


@dataclass(frozen=True)
class C4ExportResult:
    """Rendered C4 content with metadata for callers."""

    content: str
    c4_view: str
    c4_scope: str | None
    warnings: list[str]


@dataclass(frozen=True)
class _Edge:
    source: Element
    destination: Element
    description: str
    technology: str


def _safe_id(element: Element) -> str:
    return f"{element.kind}_{element.id}".replace("-", "_").replace(":", "_").replace("/", "_")


def _safe_text(value: str | None, fallback: str = "") -> str:
    text = str(value or fallback).strip()
    if not text:
        text = fallback
    return text.replace('"', "'").replace("\n", " ").strip()


def _normalize_c4_view(value: str | None) -> str:
    candidate = str(value or DEFAULT_C4_VIEW).strip().lower()
    if candidate in SUPPORTED_C4_VIEWS:
        return candidate
    return DEFAULT_C4_VIEW


def _normalize_scope(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None


def _top_level(element: Element) -> Element:
    while element.parent is not None:
        element = element.parent
    return element


def _ancestor_of_kind(element: Element, kind: type[Element]) -> Element:
    current: Element | None = element
    while current is not None:
        if isinstance(current, kind):
            return current
        current = current.parent
    return element


def _representative(element: Element, boundary: Element | None) -> Element:
    """Map an element to the node that stands for it in a view around boundary."""
    if boundary is None:
        return _top_level(element)
    if element is boundary:
        return element
    if boundary.is_ancestor_of(element):
        if isinstance(boundary, SoftwareSystem):
            return _ancestor_of_kind(element, Container)
        return _ancestor_of_kind(element, Component)
    if isinstance(boundary, Container) and boundary.software_system.is_ancestor_of(element):
        return _ancestor_of_kind(element, Container)
    return _top_level(element)


def _lift_relationships(
    relationships: list[Relationship], boundary: Element | None
) -> list[_Edge]:
    """Project relationships onto the view level, merging parallel edges."""
    edges: dict[tuple[str, str], _Edge] = {}
    for relationship in relationships:
        source = _representative(relationship.source, boundary)
        destination = _representative(relationship.destination, boundary)
        if source is destination or boundary in (source, destination):
            continue
        key = (source.id, destination.id)
        existing = edges.get(key)
        if existing is None or (not existing.description and relationship.description):
            edges[key] = _Edge(
                source=source,
                destination=destination,
                description=relationship.description,
                technology=relationship.technology,
            )
    return list(edges.values())


def _limit_nodes_by_degree(
    internal: list[Element],
    external: list[Element],
    edges: list[_Edge],
    max_elements: int,
) -> tuple[list[Element], list[Element], list[_Edge], bool]:
    total = len(internal) + len(external)
    if max_elements <= 0 or total <= max_elements:
        return internal, external, edges, False

    degree: dict[str, int] = defaultdict(int)
    for edge in edges:
        degree[edge.source.id] += 1
        degree[edge.destination.id] += 1

    ranked = sorted(
        [*internal, *external],
        key=lambda element: (degree.get(element.id, 0), element.name),
        reverse=True,
    )
    keep_ids = {element.id for element in ranked[:max_elements]}

    return (
        [element for element in internal if element.id in keep_ids],
        [element for element in external if element.id in keep_ids],
        [
            edge
            for edge in edges
            if edge.source.id in keep_ids and edge.destination.id in keep_ids
        ],
        True,
    )


def _element_line(element: Element, external: bool = False) -> str:
    node_id = _safe_id(element)
    label = _safe_text(element.name, element.kind)
    description = _safe_text(element.description)
    suffix = "_Ext" if external else ""

    if isinstance(element, Person):
        return f'Person{suffix}({node_id}, "{label}", "{description}")'
    if isinstance(element, SoftwareSystem):
        return f'System{suffix}({node_id}, "{label}", "{description}")'
    if isinstance(element, Container):
        technology = _safe_text(element.technology)
        return f'Container{suffix}({node_id}, "{label}", "{technology}", "{description}")'
    if isinstance(element, Component):
        technology = _safe_text(element.technology)
        return f'Component{suffix}({node_id}, "{label}", "{technology}", "{description}")'
    return f'System_Ext({node_id}, "{label}", "{description}")'


def _build_relation_lines(edges: list[_Edge]) -> list[str]:
    lines: list[str] = []
    for edge in edges:
        src = _safe_id(edge.source)
        dst = _safe_id(edge.destination)
        label = _safe_text(edge.description, "uses")
        if edge.technology:
            lines.append(f'Rel({src}, {dst}, "{label}", "{_safe_text(edge.technology)}")')
        else:
            lines.append(f'Rel({src}, {dst}, "{label}")')
    return lines


def _external_nodes(internal: list[Element], edges: list[_Edge]) -> list[Element]:
    internal_ids = {element.id for element in internal}
    seen: dict[str, Element] = {}
    for edge in edges:
        for element in (edge.source, edge.destination):
            if element.id not in internal_ids:
                seen.setdefault(element.id, element)
    return sorted(seen.values(), key=lambda element: (element.kind, element.name))


def _render(
    header: str,
    title: str,
    boundary: Element | None,
    internal: list[Element],
    workspace: Workspace,
    max_elements: int,
    warnings: list[str],
) -> str:
    edges = _lift_relationships(workspace.model.relationships, boundary)
    if boundary is not None:
        allowed_ids = {element.id for element in internal}
        edges = [
            edge
            for edge in edges
            if edge.source.id in allowed_ids or edge.destination.id in allowed_ids
        ]
    external = _external_nodes(internal, edges) if boundary is not None else []

    internal, external, edges, truncated = _limit_nodes_by_degree(
        internal, external, edges, max_elements
    )
    if truncated:
        warnings.append(f"Diagram limited to {max_elements} elements by relationship count.")

    lines = [header, f'title "{_safe_text(title, "Architecture")}"']
    for element in external:
        lines.append(_element_line(element, external=True))

    if isinstance(boundary, SoftwareSystem):
        lines.append(f'System_Boundary({_safe_id(boundary)}, "{_safe_text(boundary.name)}") {{')
    elif isinstance(boundary, Container):
        lines.append(f'Container_Boundary({_safe_id(boundary)}, "{_safe_text(boundary.name)}") {{')
    indent = "  " if boundary is not None else ""
    for element in internal:
        lines.append(f"{indent}{_element_line(element)}")
    if boundary is not None:
        lines.append("}")

    lines.extend(_build_relation_lines(edges))
    return "\n".join(lines)


def _find_software_system(workspace: Workspace, scope: str | None) -> SoftwareSystem | None:
    model = workspace.model
    if scope:
        return model.get_software_system_with_name(scope)
    for software_system in model.get_software_systems():
        if software_system.containers:
            return software_system
    return None


def _find_container(workspace: Workspace, scope: str | None) -> Container | None:
    model = workspace.model
    if scope:
        element = model.get_element_with_canonical_name(scope)
        if isinstance(element, Container):
            return element
        matches = [
            container
            for software_system in model.get_software_systems()
            for container in software_system.containers
            if container.name == scope
        ]
        return matches[0] if len(matches) == 1 else None
    for software_system in model.get_software_systems():
        for container in software_system.containers:
            if container.components:
                return container
    return None


def export_mermaid_c4_result(
    workspace: Workspace,
    c4_view: str | None = DEFAULT_C4_VIEW,
    c4_scope: str | None = None,
    max_elements: int | None = None,
) -> C4ExportResult:
    """Render one C4 view of the workspace as Mermaid.

    Args:
        workspace: Workspace to render
        c4_view: "context", "container" or "component"; unknown values use the default
        c4_scope: Software system name (container view) or container name or
            canonical name (component view)
        max_elements: Node limit, 0 for unlimited; defaults to the c4_max_elements setting

    Returns:
        C4ExportResult with the diagram and any warnings
    """
    if max_elements is None:
        max_elements = get_settings().c4_max_elements
    view = _normalize_c4_view(c4_view)
    scope = _normalize_scope(c4_scope)
    warnings: list[str] = []
    model = workspace.model

    if view == "context":
        internal: list[Element] = [*model.get_people(), *model.get_software_systems()]
        if not internal:
            warnings.append("No people or software systems available; returning minimal diagram.")
        content = _render(
            "C4Context", workspace.name, None, internal, workspace, max_elements, warnings
        )
        return C4ExportResult(content=content, c4_view=view, c4_scope=scope, warnings=warnings)

    if view == "container":
        software_system = _find_software_system(workspace, scope)
        if software_system is None:
            if scope:
                warnings.append(f'No software system matched scope "{scope}".')
            warnings.append("No containers available; returning minimal diagram.")
            return C4ExportResult(
                content=f'C4Container\ntitle "{_safe_text(workspace.name, "Architecture")}"',
                c4_view=view,
                c4_scope=scope,
                warnings=warnings,
            )
        content = _render(
            "C4Container",
            f"Containers of {software_system.name}",
            software_system,
            list(software_system.containers),
            workspace,
            max_elements,
            warnings,
        )
        return C4ExportResult(content=content, c4_view=view, c4_scope=scope, warnings=warnings)

    container = _find_container(workspace, scope)
    if container is None:
        if scope:
            warnings.append(f'No container matched scope "{scope}".')
        warnings.append("No components available; returning minimal diagram.")
        return C4ExportResult(
            content=f'C4Component\ntitle "{_safe_text(workspace.name, "Architecture")}"',
            c4_view=view,
            c4_scope=scope,
            warnings=warnings,
        )
    content = _render(
        "C4Component",
        f"Components of {container.canonical_name}",
        container,
        list(container.components),
        workspace,
        max_elements,
        warnings,
    )
    return C4ExportResult(content=content, c4_view=view, c4_scope=scope, warnings=warnings)


def export_mermaid_c4(
    workspace: Workspace,
    c4_view: str | None = DEFAULT_C4_VIEW,
    c4_scope: str | None = None,
    max_elements: int | None = None,
) -> str:
    """Render one C4 view of the workspace as Mermaid text."""
    return export_mermaid_c4_result(workspace, c4_view, c4_scope, max_elements).content
