"""Structured conflict and diagnostics models for schema compilation."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class ObjectKind(StrEnum):
    MARKER = "Marker"
    MARKER_TYPE = "Marker type"


class MergeConflict(BaseModel):
    """Two descriptions of the same marker or marker type that cannot both hold."""

    kind: ObjectKind
    name: str
    property_name: str
    existing_value: Any = None
    conflicting_value: Any = None
    definition: str

    def describe(self) -> list[str]:
        """The conflict as log lines, first line is the headline."""
        return [
            f'{self.kind.value} named "{self.name}" has conflicting {self.property_name}:',
            f'  Existing {self.property_name}: "{_display(self.existing_value)}"',
            f'  Conflicting {self.property_name}: "{_display(self.conflicting_value)}"',
            f'  In definition: "{self.definition}"',
        ]


class MarkerMergeConflictError(Exception):
    """Raised when a merge hits a property that must be identical on both sides."""

    def __init__(self, conflict: MergeConflict) -> None:
        self.conflict = conflict
        super().__init__(" ".join(line.strip() for line in conflict.describe()))


def _display(value: Any) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
