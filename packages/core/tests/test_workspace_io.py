"""Tests for workspace JSON documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from archscan_core.exceptions import WorkspaceFormatError
from archscan_core.workspace import Workspace
from archscan_core.workspace_io import (
    load_workspace_from_json,
    print_workspace_as_json,
    save_workspace_to_json,
    workspace_from_json,
    workspace_to_json,
)


@pytest.fixture
def workspace() -> Workspace:
    workspace = Workspace(name="Shop", description="Online shop")
    model = workspace.model
    customer = model.add_person("Customer")
    sales = model.add_software_system("Sales")
    web = model.add_container(sales, "Web", technology="FastAPI")
    orders = model.add_component(web, "OrderService", "shop.orders.OrderService", "Handles orders")
    orders.add_supporting_type("shop.orders.OrderServiceImpl")
    customer.uses(orders, "Places orders", "HTTPS")
    return workspace


def test_save_and_load(workspace: Workspace, tmp_path: Path) -> None:
    path = tmp_path / "workspace.json"

    save_workspace_to_json(workspace, path)
    loaded = load_workspace_from_json(path)

    assert loaded.name == "Shop"
    assert loaded.description == "Online shop"
    assert loaded.to_dict() == workspace.to_dict()
    orders = loaded.model.get_element_with_canonical_name("Sales.Web.OrderService")
    assert [code.type for code in orders.code] == [
        "shop.orders.OrderService",
        "shop.orders.OrderServiceImpl",
    ]
    [relationship] = loaded.model.relationships
    assert relationship.source is loaded.model.get_person_with_name("Customer")
    assert relationship.technology == "HTTPS"


def test_save_replaces_existing_content(workspace: Workspace, tmp_path: Path) -> None:
    path = tmp_path / "workspace.json"
    path.write_text("stale", encoding="utf-8")

    save_workspace_to_json(workspace, str(path))

    assert json.loads(path.read_text(encoding="utf-8"))["name"] == "Shop"


def test_loaded_model_keeps_assigning_fresh_ids(workspace: Workspace) -> None:
    loaded = workspace_from_json(workspace_to_json(workspace))

    marketing = loaded.model.add_software_system("Marketing")

    existing = {element.id for element in workspace.model.get_elements()}
    assert marketing.id not in existing


def test_print(workspace: Workspace, capsys: pytest.CaptureFixture[str]) -> None:
    print_workspace_as_json(workspace)

    assert json.loads(capsys.readouterr().out)["model"]["people"][0]["name"] == "Customer"


def test_missing_arguments(workspace: Workspace, tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_workspace_from_json(None)
    with pytest.raises(ValueError):
        save_workspace_to_json(None, tmp_path / "workspace.json")
    with pytest.raises(ValueError):
        save_workspace_to_json(workspace, None)
    with pytest.raises(ValueError):
        print_workspace_as_json(None)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_workspace_from_json(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '{"description": "no name"}',
        '{"name": "Shop", "unexpected": true}',
        '{"name": "Shop", "model": {"people": [{"id": "1"}]}}',
    ],
)
def test_malformed_documents(content: str) -> None:
    with pytest.raises(WorkspaceFormatError):
        workspace_from_json(content)


def test_inconsistent_documents() -> None:
    document = {
        "name": "Shop",
        "model": {
            "people": [{"id": "1", "name": "Customer"}],
            "relationships": [{"id": "2", "source_id": "1", "destination_id": "99"}],
        },
    }
    with pytest.raises(WorkspaceFormatError, match="unknown element"):
        workspace_from_json(json.dumps(document))
