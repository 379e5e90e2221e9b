"""
Result types produced by reconciliation.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ..descriptor import RecordDescriptor


class ChangeType(str, Enum):
    """
    Summary classification of a reconciliation result.

    Inherits from str for JSON serialization and comparison with plain values.
    """

    NONE = "none"
    ADDED = "added"
    DELETED = "deleted"
    EDITED = "edited"
    ADDED_WITH_EDITED = "added_with_edited"
    EDITED_WITH_DELETED = "edited_with_deleted"
    ADDED_WITH_DELETED = "added_with_deleted"
    ALL = "all"


@dataclass(frozen=True)
class EditedRecord:
    """A source record whose key matched but whose content differs."""

    record: Any
    changed_fields: tuple[tuple[str, Any], ...]

    @property
    def changed_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.changed_fields)

    def as_dict(self) -> dict[str, Any]:
        return dict(self.changed_fields)


@dataclass(frozen=True)
class DiffResult:
    """
    Outcome of one reconciliation call.

    Created fresh per call and never mutated afterwards.
    """

    descriptor: RecordDescriptor
    added: tuple[Any, ...] = ()
    deleted: tuple[Any, ...] = ()
    edited: tuple[EditedRecord, ...] = ()
    source_count: int = 0
    destination_count: int = 0
    change_type: ChangeType = ChangeType.NONE
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC), compare=False)

    @property
    def table_name(self) -> str:
        return self.descriptor.table_name

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.deleted or self.edited)

    @property
    def unchanged_count(self) -> int:
        return self.source_count - len(self.added) - len(self.edited)

    def summary(self) -> str:
        return (
            f"{self.table_name}: {len(self.added)} added, "
            f"{len(self.deleted)} deleted, {len(self.edited)} edited "
            f"({self.source_count} source / {self.destination_count} destination rows, "
            f"change type {self.change_type.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert counts and edited field names to a dictionary for reporting."""
        key_fields = self.descriptor.key_fields
        return {
            "table": self.table_name,
            "change_type": self.change_type.value,
            "source_count": self.source_count,
            "destination_count": self.destination_count,
            "added": len(self.added),
            "deleted": len(self.deleted),
            "edited": [
                {
                    "key": {ref.name: ref.value(e.record) for ref in key_fields},
                    "changed_fields": list(e.changed_names),
                }
                for e in self.edited
            ],
            "timestamp": self.timestamp.isoformat(),
        }
