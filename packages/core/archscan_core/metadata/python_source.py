"""Python source metadata extractor.

Parses Python AST (the scanned modules are never imported) to detect:
- @component(...) and the type-level dependency decorators on classes
- Annotated[T, uses_component(...)] markers on annotated class attributes
- the fully-qualified type of every annotated class attribute

Field types are qualified through the module's imports, so
``from shop.payments import PaymentGateway`` turns ``PaymentGateway`` into
``shop.payments.PaymentGateway``.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath

from archscan_core.exceptions import MetadataSourceUnavailableError, TypeNotFoundError
from archscan_core.metadata.markers import FieldMetadata, Marker, MarkerKind, TypeMetadata
from archscan_core.metadata.source import TypeMetadataSource

logger = logging.getLogger(__name__)

TYPE_MARKER_DECORATORS: dict[str, MarkerKind] = {
    "component": MarkerKind.COMPONENT,
    "uses_software_system": MarkerKind.USES_SOFTWARE_SYSTEM,
    "uses_container": MarkerKind.USES_CONTAINER,
    "used_by_person": MarkerKind.USED_BY_PERSON,
    "used_by_software_system": MarkerKind.USED_BY_SOFTWARE_SYSTEM,
    "used_by_container": MarkerKind.USED_BY_CONTAINER,
}
FIELD_MARKER_CALLS: dict[str, MarkerKind] = {
    "uses_component": MarkerKind.USES_COMPONENT,
}
OPTIONAL_WRAPPERS = {"Optional", "ClassVar", "Final"}


def _call_name(node: ast.expr) -> str | None:
    """Return the called name for Name(...) and pkg.Name(...) calls."""
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _get_string_value(node: ast.expr | None) -> str | None:
    """Extract string value from an AST node."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _argument(node: ast.Call, position: int, keyword: str) -> ast.expr | None:
    for kw in node.keywords:
        if kw.arg == keyword:
            return kw.value
    if len(node.args) > position:
        return node.args[position]
    return None


def _dotted_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        head = _dotted_name(node.value)
        return f"{head}.{node.attr}" if head else None
    return None


class MarkerVisitor(ast.NodeVisitor):
    """AST visitor collecting marker metadata for the classes of one module."""

    def __init__(self, module_name: str, is_package: bool = False) -> None:
        self.module_name = module_name
        self.is_package = is_package
        self.imports: dict[str, str] = {}  # local alias -> qualified name
        self.local_classes: set[str] = set()
        self.types: list[TypeMetadata] = []
        self._class_stack: list[str] = []

    def scan(self, tree: ast.Module) -> list[TypeMetadata]:
        # Imports and top-level classes may appear after the classes using them
        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                self.local_classes.add(node.name)
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                self._record_import(node)
            elif isinstance(node, ast.ImportFrom):
                self._record_import_from(node)
        self.visit(tree)
        return self.types

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        """Visit class definitions to collect type and field markers."""
        qualname = ".".join([*self._class_stack, node.name])
        metadata = TypeMetadata(name=f"{self.module_name}.{qualname}")

        for decorator in node.decorator_list:
            marker = self._parse_type_marker(decorator, metadata.name)
            if marker is not None:
                metadata.type_markers.append(marker)

        for statement in node.body:
            if isinstance(statement, ast.AnnAssign) and isinstance(statement.target, ast.Name):
                field_metadata = self._parse_field(statement.target.id, statement.annotation)
                if field_metadata is not None:
                    metadata.fields.append(field_metadata)

        self.types.append(metadata)

        self._class_stack.append(node.name)
        self.generic_visit(node)
        self._class_stack.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        """Classes local to functions are not addressable by name."""
        return

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        return

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _record_import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self.imports[alias.asname] = alias.name
            else:
                head = alias.name.split(".", 1)[0]
                self.imports[head] = head

    def _record_import_from(self, node: ast.ImportFrom) -> None:
        base = self._resolve_import_base(node.module, node.level)
        if base is None:
            return
        for alias in node.names:
            if alias.name == "*":
                continue
            qualified = f"{base}.{alias.name}" if base else alias.name
            self.imports[alias.asname or alias.name] = qualified

    def _resolve_import_base(self, module: str | None, level: int) -> str | None:
        if level == 0:
            return module or ""
        package_parts = self.module_name.split(".")
        if not self.is_package:
            package_parts = package_parts[:-1]
        if level - 1 >= len(package_parts):
            logger.debug("Relative import beyond top-level package in %s", self.module_name)
            return None
        if level > 1:
            package_parts = package_parts[: len(package_parts) - (level - 1)]
        parts = [*package_parts, *(module.split(".") if module else [])]
        return ".".join(parts)

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------

    def _parse_type_marker(self, decorator: ast.expr, type_name: str) -> Marker | None:
        """Parse one class decorator into a marker, if it is one."""
        kind = TYPE_MARKER_DECORATORS.get(_call_name(decorator) or "")
        if kind is None:
            return None

        if not isinstance(decorator, ast.Call):
            # Bare @component; the other markers need a name
            if kind is MarkerKind.COMPONENT:
                return Marker(kind=kind)
            logger.warning("Ignoring @%s on %s: the marker must be called", kind.value, type_name)
            return None

        if kind is MarkerKind.COMPONENT:
            return Marker(
                kind=kind,
                description=_get_string_value(_argument(decorator, 0, "description")) or "",
                technology=_get_string_value(_argument(decorator, 1, "technology")) or "",
            )

        name = _get_string_value(_argument(decorator, 0, "name"))
        if not name:
            logger.warning(
                "Ignoring @%s on %s: the name must be a string literal", kind.value, type_name
            )
            return None
        return Marker(
            kind=kind,
            name=name,
            description=_get_string_value(_argument(decorator, 1, "description")) or "",
            technology=_get_string_value(_argument(decorator, 2, "technology")) or "",
        )

    def _parse_field(self, field_name: str, annotation: ast.expr) -> FieldMetadata | None:
        """Parse an annotated class attribute into field metadata."""
        annotation = self._unquote(annotation)
        markers: list[Marker] = []

        if isinstance(annotation, ast.Subscript) and _call_name(annotation.value) == "Annotated":
            elements = (
                annotation.slice.elts if isinstance(annotation.slice, ast.Tuple) else [annotation.slice]
            )
            if not elements:
                return None
            annotation = self._unquote(elements[0])
            for extra in elements[1:]:
                if not isinstance(extra, ast.Call):
                    continue
                kind = FIELD_MARKER_CALLS.get(_call_name(extra) or "")
                if kind is not None:
                    markers.append(
                        Marker(
                            kind=kind,
                            description=_get_string_value(_argument(extra, 0, "description")) or "",
                            technology=_get_string_value(_argument(extra, 1, "technology")) or "",
                        )
                    )

        type_name = self._qualify(self._strip_optional(annotation))
        if type_name is None:
            return None
        return FieldMetadata(name=field_name, type_name=type_name, markers=tuple(markers))

    # ------------------------------------------------------------------
    # Type names
    # ------------------------------------------------------------------

    def _unquote(self, node: ast.expr) -> ast.expr:
        """Parse string (forward reference) annotations."""
        text = _get_string_value(node)
        if text is None:
            return node
        try:
            return ast.parse(text, mode="eval").body
        except SyntaxError:
            return node

    def _strip_optional(self, node: ast.expr) -> ast.expr:
        node = self._unquote(node)
        if isinstance(node, ast.Subscript) and _call_name(node.value) in OPTIONAL_WRAPPERS:
            return self._strip_optional(node.slice)
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            if isinstance(node.right, ast.Constant) and node.right.value is None:
                return self._strip_optional(node.left)
            if isinstance(node.left, ast.Constant) and node.left.value is None:
                return self._strip_optional(node.right)
        return node

    def _qualify(self, node: ast.expr) -> str | None:
        if isinstance(node, ast.Subscript):
            node = node.value
        dotted = _dotted_name(node)
        if dotted is None:
            return None

        head, _, rest = dotted.partition(".")
        if head in self.imports:
            qualified = self.imports[head]
        elif head in self.local_classes:
            qualified = f"{self.module_name}.{head}"
        else:
            return dotted
        return f"{qualified}.{rest}" if rest else qualified


def module_name_for(relative_path: PurePosixPath) -> tuple[str, bool] | None:
    """Map a root-relative .py path to (module name, is package)."""
    parts = list(relative_path.parts)
    if not parts or not parts[-1].endswith(".py"):
        return None
    is_package = parts[-1] == "__init__.py"
    if is_package:
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1][: -len(".py")]
    if not parts or not all(part.isidentifier() for part in parts):
        return None
    return ".".join(parts), is_package


def extract_type_metadata(
    module_name: str,
    content: str,
    is_package: bool = False,
    file_path: str | None = None,
) -> list[TypeMetadata]:
    """Extract marker metadata for every class of one Python module.

    Args:
        module_name: Dotted module name used to qualify class names
        content: Module source
        is_package: Whether the module is a package __init__
        file_path: Path recorded on each TypeMetadata

    Returns:
        TypeMetadata per class, empty if the module does not parse
    """
    try:
        tree = ast.parse(content)
    except SyntaxError as e:
        logger.warning("Failed to parse %s: %s", file_path or module_name, e)
        return []

    visitor = MarkerVisitor(module_name, is_package=is_package)
    types = visitor.scan(tree)
    for metadata in types:
        metadata.source_file = file_path
    return types


class PythonSourceMetadataSource(TypeMetadataSource):
    """Metadata source reading .py files below one or more source roots.

    Roots are scanned lazily on first use and cached; call refresh() after the
    sources change.
    """

    def __init__(self, roots: Iterable[str | Path], exclude: Iterable[str] = ()) -> None:
        self._roots = [Path(root) for root in roots]
        self._exclude = tuple(exclude)
        self._types: dict[str, TypeMetadata] | None = None

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    def refresh(self) -> None:
        self._types = None

    def get_markers(self, type_name: str) -> TypeMetadata:
        try:
            return self._load()[type_name]
        except KeyError:
            raise TypeNotFoundError(type_name) from None

    def find_types_with_marker(self, kind: MarkerKind) -> list[str]:
        return sorted(
            name for name, metadata in self._load().items() if metadata.has_marker(kind)
        )

    def _is_excluded(self, relative: str) -> bool:
        return any(fnmatch(relative, pattern) for pattern in self._exclude)

    def _load(self) -> dict[str, TypeMetadata]:
        if self._types is not None:
            return self._types

        if not self._roots:
            raise MetadataSourceUnavailableError("No source roots are configured.")

        types: dict[str, TypeMetadata] = {}
        for root in self._roots:
            if not root.is_dir():
                raise MetadataSourceUnavailableError(
                    f'The source root "{root}" does not exist or is not a directory.'
                )
            for path in sorted(root.rglob("*.py")):
                relative = PurePosixPath(path.relative_to(root).as_posix())
                if self._is_excluded(str(relative)):
                    continue
                module = module_name_for(relative)
                if module is None:
                    logger.debug("Skipping %s: not an importable module path", path)
                    continue
                try:
                    content = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning("Failed to read %s: %s", path, e)
                    continue

                module_name, is_package = module
                for metadata in extract_type_metadata(
                    module_name, content, is_package=is_package, file_path=str(path)
                ):
                    if metadata.name in types:
                        logger.debug("Type %s is defined more than once", metadata.name)
                    types.setdefault(metadata.name, metadata)

        logger.debug("Loaded metadata for %d types from %d roots", len(types), len(self._roots))
        self._types = types
        return types
