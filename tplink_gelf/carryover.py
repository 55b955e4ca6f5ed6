"""Per-datagram carryover linking an AP message's first line to its continuations."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def merge_fields(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge mappings left to right into a new dict; later layers win."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


@dataclass(frozen=True)
class CanonicalFields:
    """Normalized fields of one line, ready for GELF assembly."""

    fields: Mapping[str, Any]
    facility: int | None = None
    severity: int | None = None

    def __post_init__(self):
        # Snapshot so that later merges can never reach back into this one.
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def category(self) -> str | None:
        return self.fields.get("category")

    @property
    def short_message(self) -> str | None:
        return self.fields.get("short_message")

    def with_fields(self, extra: Mapping[str, Any]) -> "CanonicalFields":
        return CanonicalFields(merge_fields(self.fields, extra), self.facility, self.severity)


@dataclass(frozen=True)
class Carryover:
    """Fields of the most recent first line in the current datagram.

    Starts empty for every datagram and is only ever replaced wholesale.
    """

    snapshot: CanonicalFields = field(default_factory=lambda: CanonicalFields({}))

    @property
    def is_empty(self) -> bool:
        return not self.snapshot.fields

    @property
    def fields(self) -> Mapping[str, Any]:
        return self.snapshot.fields

    def replaced_by(self, snapshot: CanonicalFields) -> "Carryover":
        return Carryover(snapshot)
