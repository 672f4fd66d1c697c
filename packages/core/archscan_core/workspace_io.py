"""Load, save and print workspaces as JSON documents."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from archscan_core.exceptions import ModelError, WorkspaceFormatError
from archscan_core.model import ArchitectureModel, CodeElementRole
from archscan_core.workspace import Workspace

logger = logging.getLogger(__name__)


class CodeElementDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1)
    role: CodeElementRole = CodeElementRole.SUPPORTING


class ComponentDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    technology: str = ""
    type: str | None = None
    code: list[CodeElementDocument] = Field(default_factory=list)


class ContainerDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    technology: str = ""
    components: list[ComponentDocument] = Field(default_factory=list)


class SoftwareSystemDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    containers: list[ContainerDocument] = Field(default_factory=list)


class PersonDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""


class RelationshipDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    source_id: str = Field(min_length=1)
    destination_id: str = Field(min_length=1)
    description: str = ""
    technology: str = ""


class ModelDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    people: list[PersonDocument] = Field(default_factory=list)
    software_systems: list[SoftwareSystemDocument] = Field(default_factory=list)
    relationships: list[RelationshipDocument] = Field(default_factory=list)


class WorkspaceDocument(BaseModel):
    """Strict schema of a workspace JSON document."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: str = ""
    model: ModelDocument = Field(default_factory=ModelDocument)


def workspace_from_json(content: str, origin: str = "<string>") -> Workspace:
    """Parse a workspace JSON document.

    Raises:
        WorkspaceFormatError: If the document is malformed or inconsistent
    """
    try:
        document = WorkspaceDocument.model_validate_json(content)
    except ValidationError as e:
        raise WorkspaceFormatError(f"Invalid workspace document {origin}: {e}") from e

    try:
        model = ArchitectureModel.from_dict(document.model.model_dump(mode="json"))
    except ModelError as e:
        raise WorkspaceFormatError(f"Inconsistent workspace document {origin}: {e}") from e

    return Workspace(name=document.name, description=document.description, model=model)


def workspace_to_json(workspace: Workspace) -> str:
    """Render a workspace as an indented JSON document."""
    document = WorkspaceDocument.model_validate(workspace.to_dict())
    return document.model_dump_json(indent=2)


def load_workspace_from_json(path: str | Path | None) -> Workspace:
    """Load a workspace from a JSON file.

    Raises:
        ValueError: If no path is given
        FileNotFoundError: If the file does not exist
        WorkspaceFormatError: If the document is malformed
    """
    if path is None:
        raise ValueError("The path to a JSON file must be specified.")
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"The JSON file {path} does not exist.")

    workspace = workspace_from_json(path.read_text(encoding="utf-8"), origin=str(path))
    logger.debug("Loaded workspace %r from %s", workspace.name, path)
    return workspace


def save_workspace_to_json(workspace: Workspace | None, path: str | Path | None) -> None:
    """Save a workspace to a JSON file, replacing its content.

    Raises:
        ValueError: If no workspace or no path is given
    """
    if workspace is None:
        raise ValueError("A workspace must be provided.")
    if path is None:
        raise ValueError("The path to a JSON file must be specified.")

    path = Path(path)
    path.write_text(workspace_to_json(workspace) + "\n", encoding="utf-8")
    logger.debug("Saved workspace %r to %s", workspace.name, path)


def print_workspace_as_json(workspace: Workspace | None) -> None:
    """Print a workspace as JSON to stdout, for debugging."""
    if workspace is None:
        raise ValueError("A workspace must be provided.")
    print(workspace_to_json(workspace))
