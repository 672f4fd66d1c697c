"""End-to-end scans of Python sources on disk."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from archscan_core.diagnostics import UNRESOLVED_REFERENCE
from archscan_core.exceptions import ConfigurationError, MetadataSourceUnavailableError
from archscan_core.model import ArchitectureModel, Container
from archscan_core.scan import build_metadata_source, scan
from archscan_core.settings import Settings

ORDERS = '''
from typing import Annotated

from archscan_core.annotations import component, used_by_person, uses_component, uses_software_system

from .repository import OrderRepository


@component("Handles orders", technology="Python")
@uses_software_system("Payments", "Processes payment")
@used_by_person("Customer", "Places orders")
@used_by_person("Auditor", "Reviews orders")
class OrderService:
    repository: Annotated[OrderRepository, uses_component("Reads and writes orders", "SQL")]
'''

REPOSITORY = '''
from archscan_core.annotations import component


@component("Stores orders")
class OrderRepository:
    pass
'''

FIXTURE = '''
from archscan_core.annotations import component


@component("Should never be found")
class FakeService:
    pass
'''


def _write(root: Path, relative: str, content: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    _write(tmp_path, "shop/__init__.py", "")
    _write(tmp_path, "shop/orders.py", ORDERS)
    _write(tmp_path, "shop/repository.py", REPOSITORY)
    _write(tmp_path, "tests/test_orders.py", FIXTURE)
    return tmp_path


@pytest.fixture
def web() -> Container:
    model = ArchitectureModel()
    model.add_person("Customer")
    model.add_software_system("Payments")
    return model.add_container(model.add_software_system("Sales"), "Web")


def test_scan_builds_components_and_relationships(source_root: Path, web: Container) -> None:
    settings = Settings(source_roots=[str(source_root)], package_to_scan="shop")

    result = scan(web, settings)

    assert {c.canonical_name for c in result.components} == {
        "Sales.Web.OrderService",
        "Sales.Web.OrderRepository",
    }
    model = web.model
    orders = web.get_component_with_name("OrderService")
    repository = web.get_component_with_name("OrderRepository")
    assert orders.technology == "Python"

    [dependency] = model.get_relationships_between(orders, repository)
    assert (dependency.description, dependency.technology) == ("Reads and writes orders", "SQL")
    [payment] = model.get_relationships_between(
        orders, model.get_software_system_with_name("Payments")
    )
    assert payment.description == "Processes payment"
    [placed] = model.get_relationships_between(model.get_person_with_name("Customer"), orders)
    assert placed.description == "Places orders"
    assert model.relationship_count() == 3

    [warning] = result.diagnostics.warnings
    assert warning.category == UNRESOLVED_REFERENCE
    assert result.warnings == [
        'A person named "Auditor" could not be found. '
        "Referenced by used_by_person on shop.orders.OrderService."
    ]


def test_rescanning_changes_nothing(source_root: Path, web: Container) -> None:
    settings = Settings(source_roots=[str(source_root)])

    scan(web, settings)
    before = web.model.to_dict()
    scan(web, settings)

    assert web.model.to_dict() == before


def test_excluded_files_are_not_scanned(source_root: Path, web: Container) -> None:
    result = scan(web, Settings(source_roots=[str(source_root)]))

    assert "FakeService" not in {c.name for c in result.components}


def test_without_structural_pass_dependencies_stay_undeclared(
    source_root: Path, web: Container
) -> None:
    settings = Settings(source_roots=[str(source_root)], include_structural=False)

    scan(web, settings)

    orders = web.get_component_with_name("OrderService")
    repository = web.get_component_with_name("OrderRepository")
    assert web.model.get_relationships_between(orders, repository) == []


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, source_root: Path) -> None:
    monkeypatch.setenv("ARCHSCAN_SOURCE_ROOTS", f'["{source_root}"]')
    monkeypatch.setenv("ARCHSCAN_PACKAGE_TO_SCAN", "shop")
    monkeypatch.setenv("ARCHSCAN_INCLUDE_STRUCTURAL", "false")

    settings = Settings()

    assert settings.source_roots == [str(source_root)]
    assert settings.package_to_scan == "shop"
    assert settings.include_structural is False
    assert build_metadata_source(settings).roots == [source_root]


def test_missing_source_root(tmp_path: Path, web: Container) -> None:
    with pytest.raises(MetadataSourceUnavailableError):
        scan(web, Settings(source_roots=[str(tmp_path / "missing")]))


def test_container_outside_a_model(source_root: Path, web: Container) -> None:
    web.model = None
    with pytest.raises(ConfigurationError):
        scan(web, Settings(source_roots=[str(source_root)]))
