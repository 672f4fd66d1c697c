"""Tests for static marker extraction from Python sources."""

from pathlib import Path, PurePosixPath

import pytest
from archscan_core.exceptions import MetadataSourceUnavailableError, TypeNotFoundError
from archscan_core.metadata import (
    Marker,
    MarkerKind,
    PythonSourceMetadataSource,
    extract_type_metadata,
    module_name_for,
)


class TestExtractTypeMetadata:
    """Tests for single-module extraction."""

    def test_component_and_type_markers(self) -> None:
        content = '''
from archscan_core.annotations import component, uses_software_system, used_by_person

@component("Handles orders", technology="Python")
@uses_software_system("Payments", description="Processes payment")
@uses_software_system(name="Email", description="Sends confirmations", technology="SMTP")
@used_by_person("Customer", "Places orders")
class OrderService:
    pass
'''
        [metadata] = extract_type_metadata("shop.orders", content)

        assert metadata.name == "shop.orders.OrderService"
        assert metadata.simple_name == "OrderService"
        component = metadata.component_marker
        assert component is not None
        assert component.description == "Handles orders"
        assert component.technology == "Python"

        systems = metadata.get_type_markers(MarkerKind.USES_SOFTWARE_SYSTEM)
        assert [(m.name, m.description) for m in systems] == [
            ("Payments", "Processes payment"),
            ("Email", "Sends confirmations"),
        ]
        assert systems[1].technology == "SMTP"
        [person] = metadata.get_type_markers(MarkerKind.USED_BY_PERSON)
        assert person.name == "Customer"
        assert person.description == "Places orders"

    def test_qualified_decorator_names(self) -> None:
        content = '''
import archscan_core.annotations as arch

@arch.component(description="Stores orders")
@arch.used_by_container("Sales.Web")
class OrderRepository:
    pass
'''
        [metadata] = extract_type_metadata("shop.repo", content)

        assert metadata.component_marker is not None
        assert metadata.component_marker.description == "Stores orders"
        [marker] = metadata.get_type_markers(MarkerKind.USED_BY_CONTAINER)
        assert marker.name == "Sales.Web"

    def test_non_literal_name_is_ignored(self) -> None:
        content = '''
NAME = "Payments"

@uses_software_system(NAME)
class Client:
    pass
'''
        [metadata] = extract_type_metadata("shop.client", content)
        assert metadata.type_markers == []

    def test_bare_component_decorator(self) -> None:
        content = '''
import archscan_core.annotations as arch
from archscan_core.annotations import component, uses_software_system

@component
class OrderService:
    pass

@arch.component
class OrderRepository:
    pass

@component
@uses_software_system
class Client:
    pass
'''
        service, repository, client = extract_type_metadata("shop.orders", content)

        for metadata in (service, repository, client):
            assert metadata.component_marker == Marker(MarkerKind.COMPONENT)
        assert client.type_markers == [Marker(MarkerKind.COMPONENT)]

    def test_field_markers_are_qualified_through_imports(self) -> None:
        content = '''
from typing import Annotated, Optional

from shop.payments import PaymentGateway
from . import billing
import shop.audit as audit

class OrderService:
    gateway: Annotated[PaymentGateway, uses_component("Charges cards")]
    invoices: Annotated["billing.InvoiceService", uses_component(description="Issues invoices")]
    audit_log: Optional[audit.AuditLog]
    repository: "OrderRepository | None"
    count: int

class OrderRepository:
    pass
'''
        types = {m.name: m for m in extract_type_metadata("shop.orders", content)}
        metadata = types["shop.orders.OrderService"]

        fields = {f.name: f for f in metadata.fields}
        assert fields["gateway"].type_name == "shop.payments.PaymentGateway"
        assert fields["invoices"].type_name == "shop.billing.InvoiceService"
        assert fields["audit_log"].type_name == "shop.audit.AuditLog"
        assert fields["repository"].type_name == "shop.orders.OrderRepository"
        assert fields["count"].type_name == "int"

        assert metadata.field_markers == [
            ("shop.payments.PaymentGateway", fields["gateway"].markers[0]),
            ("shop.billing.InvoiceService", fields["invoices"].markers[0]),
        ]
        assert fields["gateway"].markers[0].kind == MarkerKind.USES_COMPONENT
        assert fields["gateway"].markers[0].description == "Charges cards"
        assert fields["invoices"].markers[0].description == "Issues invoices"

    def test_relative_imports_from_package_init(self) -> None:
        content = '''
from .payments import PaymentGateway
from ..common import Clock

class Facade:
    gateway: PaymentGateway
    clock: Clock
'''
        [metadata] = extract_type_metadata("shop.checkout", content, is_package=True)
        fields = {f.name: f.type_name for f in metadata.fields}
        assert fields == {
            "gateway": "shop.checkout.payments.PaymentGateway",
            "clock": "shop.common.Clock",
        }

    def test_nested_classes_and_function_locals(self) -> None:
        content = '''
class Outer:
    class Inner:
        pass

def factory():
    class Local:
        pass
    return Local
'''
        names = [m.name for m in extract_type_metadata("pkg.mod", content)]
        assert names == ["pkg.mod.Outer", "pkg.mod.Outer.Inner"]

    def test_syntax_error_returns_nothing(self) -> None:
        assert extract_type_metadata("pkg.broken", "class Broken(:\n") == []


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("shop/orders.py", ("shop.orders", False)),
        ("shop/__init__.py", ("shop", True)),
        ("shop/my-module.py", None),
        ("__init__.py", None),
        ("README.md", None),
    ],
)
def test_module_name_for(path: str, expected: tuple[str, bool] | None) -> None:
    assert module_name_for(PurePosixPath(path)) == expected


class TestPythonSourceMetadataSource:
    """Tests for the directory-backed metadata source."""

    @pytest.fixture
    def source_root(self, tmp_path: Path) -> Path:
        package = tmp_path / "shop"
        package.mkdir()
        (package / "__init__.py").write_text("", encoding="utf-8")
        (package / "orders.py").write_text(
            '''
from archscan_core.annotations import component

@component("Handles orders")
class OrderService:
    pass

class Helper:
    pass
''',
            encoding="utf-8",
        )
        (package / "broken.py").write_text("class Broken(:\n", encoding="utf-8")
        tests = tmp_path / "tests"
        tests.mkdir()
        (tests / "test_orders.py").write_text(
            "@component('Fake')\nclass FakeService:\n    pass\n", encoding="utf-8"
        )
        return tmp_path

    def test_find_types_with_marker(self, source_root: Path) -> None:
        source = PythonSourceMetadataSource([source_root], exclude=["tests/*"])

        assert source.find_types_with_marker(MarkerKind.COMPONENT) == ["shop.orders.OrderService"]
        assert source.get_markers("shop.orders.Helper").type_markers == []
        assert source.get_markers("shop.orders.OrderService").source_file is not None

    def test_exclude_patterns_are_optional(self, source_root: Path) -> None:
        source = PythonSourceMetadataSource([source_root])
        assert "tests.test_orders.FakeService" in source.find_types_with_marker(
            MarkerKind.COMPONENT
        )

    def test_unknown_type_raises_not_found(self, source_root: Path) -> None:
        source = PythonSourceMetadataSource([source_root])
        with pytest.raises(TypeNotFoundError) as excinfo:
            source.get_markers("shop.orders.Missing")
        assert excinfo.value.type_name == "shop.orders.Missing"

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        source = PythonSourceMetadataSource([tmp_path / "nowhere"])
        with pytest.raises(MetadataSourceUnavailableError):
            source.find_types_with_marker(MarkerKind.COMPONENT)

    def test_no_roots_is_fatal(self) -> None:
        with pytest.raises(MetadataSourceUnavailableError):
            PythonSourceMetadataSource([]).get_markers("shop.orders.OrderService")

    def test_refresh_rescans(self, source_root: Path) -> None:
        source = PythonSourceMetadataSource([source_root])
        assert source.find_types_with_marker(MarkerKind.USED_BY_PERSON) == []

        (source_root / "shop" / "admin.py").write_text(
            "@used_by_person('Admin')\nclass Console:\n    pass\n", encoding="utf-8"
        )
        assert source.find_types_with_marker(MarkerKind.USED_BY_PERSON) == []

        source.refresh()
        assert source.find_types_with_marker(MarkerKind.USED_BY_PERSON) == [
            "shop.admin.Console"
        ]
