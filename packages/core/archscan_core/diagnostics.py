"""Resolution outcomes and the warnings collected while scanning."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from archscan_core.model import Element

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Element)

# Warning categories
UNRESOLVED_REFERENCE = "unresolved_reference"
TYPE_NOT_FOUND = "type_not_found"
INVALID_RELATIONSHIP = "invalid_relationship"
DUPLICATE_COMPONENT = "duplicate_component"


@dataclass(frozen=True)
class Found(Generic[E]):
    """A marker reference resolved to a model element."""

    element: E

    @property
    def found(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """A marker reference that matched nothing."""

    name: str
    kind: str
    """Element kind that was looked up, e.g. "software system"."""

    @property
    def found(self) -> bool:
        return False

    def message(self) -> str:
        return f'A {self.kind} named "{self.name}" could not be found.'


Resolution = Found[E] | NotFound


@dataclass(frozen=True)
class ScanWarning:
    """One non-fatal problem reported during a scan."""

    category: str
    subject: str
    message: str


@dataclass
class Diagnostics:
    """Side channel collecting warnings; each one is also logged."""

    warnings: list[ScanWarning] = field(default_factory=list)

    def warn(self, category: str, subject: str, message: str) -> ScanWarning:
        warning = ScanWarning(category=category, subject=subject, message=message)
        self.warnings.append(warning)
        logger.warning("%s (%s)", message, subject)
        return warning

    def extend(self, other: Diagnostics) -> None:
        self.warnings.extend(other.warnings)

    def by_category(self, category: str) -> list[ScanWarning]:
        return [warning for warning in self.warnings if warning.category == category]

    @property
    def messages(self) -> list[str]:
        return [warning.message for warning in self.warnings]

    def __len__(self) -> int:
        return len(self.warnings)
