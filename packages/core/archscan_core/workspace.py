"""Workspace: a named architecture model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from archscan_core.model import ArchitectureModel


@dataclass
class Workspace:
    """A named architecture model, the unit that is loaded and saved."""

    name: str
    description: str = ""
    model: ArchitectureModel = field(default_factory=ArchitectureModel)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "model": self.model.to_dict(),
        }
