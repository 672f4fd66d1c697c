"""Tests for resolving marker names to model elements."""

from __future__ import annotations

import pytest
from archscan_core.analysis.naming import (
    resolve_component_of_type,
    resolve_container,
    resolve_person,
    resolve_software_system,
)
from archscan_core.diagnostics import Found, NotFound
from archscan_core.model import ArchitectureModel, Component


@pytest.fixture
def model() -> ArchitectureModel:
    model = ArchitectureModel()
    model.add_person("Customer")
    sales = model.add_software_system("Sales")
    model.add_container(sales, "Web")
    model.add_container(sales, "API")
    marketing = model.add_software_system("Marketing")
    backend = model.add_container(marketing, "Backend")
    model.add_container(marketing, "API")
    model.add_component(backend, "Leads", "marketing.Leads")
    return model


@pytest.fixture
def orders(model: ArchitectureModel) -> Component:
    web = model.get_software_system_with_name("Sales").get_container_with_name("Web")
    return model.add_component(web, "OrderService", "shop.orders.OrderService")


def test_short_name_prefers_own_software_system(model: ArchitectureModel, orders: Component) -> None:
    resolution = resolve_container(orders, "API")

    assert isinstance(resolution, Found)
    assert resolution.element.canonical_name == "Sales.API"


def test_canonical_name_reaches_other_software_system(
    model: ArchitectureModel, orders: Component
) -> None:
    resolution = resolve_container(orders, "Marketing.Backend")

    assert isinstance(resolution, Found)
    assert resolution.element is model.get_element_with_canonical_name("Marketing.Backend")


def test_short_name_does_not_leave_own_software_system(orders: Component) -> None:
    resolution = resolve_container(orders, "Backend")

    assert resolution == NotFound(name="Backend", kind="container")
    assert resolution.message() == 'A container named "Backend" could not be found.'


def test_canonical_name_of_component_is_not_a_container(orders: Component) -> None:
    assert isinstance(resolve_container(orders, "Marketing.Backend.Leads"), NotFound)


def test_component_of_type_is_scoped_to_container(orders: Component) -> None:
    assert isinstance(resolve_component_of_type(orders, "marketing.Leads"), NotFound)
    found = resolve_component_of_type(orders, "shop.orders.OrderService")
    assert isinstance(found, Found)
    assert found.element is orders


def test_software_system_and_person(model: ArchitectureModel) -> None:
    assert resolve_software_system(model, "Sales").found
    assert resolve_person(model, "Customer").found
    assert resolve_software_system(model, "Customer") == NotFound(
        name="Customer", kind="software system"
    )
    assert resolve_person(model, "Sales").message() == 'A person named "Sales" could not be found.'
