"""
Field descriptors for record types.

A RecordDescriptor is the registration-time table that tells the engine how
to read a record type: which table it maps to, which fields identify a row,
which fields are compared for content equality, and which are ignored.
Field access goes through FieldRef getters, so no runtime metadata lookup is
needed while diffing.
"""

import dataclasses
import logging
import operator
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError, MissingTableNameError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRef:
    """A named field with its getter."""

    name: str
    getter: Callable[[Any], Any] = field(compare=False, repr=False)

    @classmethod
    def attribute(cls, name: str) -> "FieldRef":
        """Field read with attribute access (dataclasses, plain objects)."""
        return cls(name, operator.attrgetter(name))

    @classmethod
    def item(cls, name: str) -> "FieldRef":
        """Field read with item access (dict-shaped rows)."""
        return cls(name, operator.itemgetter(name))

    def value(self, record: Any) -> Any:
        return self.getter(record)


@dataclass(frozen=True)
class RecordDescriptor:
    """
    Immutable description of one record type.

    Attributes:
        table_name: Target table, optionally schema qualified
        fields: Every field of the record, in declared order
        key_fields: Fields whose combination identifies a row
        excluded_fields: Fields ignored for comparison and payloads
        comparable_fields: Fields compared for content equality; defaults
            to all fields minus excluded fields, in declared order
    """

    table_name: str
    fields: tuple[FieldRef, ...]
    key_fields: tuple[FieldRef, ...]
    excluded_fields: frozenset[FieldRef] = frozenset()
    comparable_fields: tuple[FieldRef, ...] | None = None

    def __post_init__(self):
        if not self.table_name:
            raise MissingTableNameError()

        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "key_fields", tuple(self.key_fields))
        object.__setattr__(self, "excluded_fields", frozenset(self.excluded_fields))

        if not self.key_fields:
            raise ConfigurationError(f"No key fields declared for table {self.table_name}")

        excluded_names = self.excluded_names
        if self.comparable_fields is None:
            comparable = tuple(f for f in self.fields if f.name not in excluded_names)
        else:
            comparable = tuple(self.comparable_fields)
        object.__setattr__(self, "comparable_fields", comparable)

        names = {f.name for f in self.fields}
        for ref in (*self.key_fields, *self.excluded_fields, *self.comparable_fields):
            if ref.name not in names:
                raise ConfigurationError(
                    f"Field {ref.name!r} is not declared on table {self.table_name}"
                )

        for ref in self.key_fields:
            if ref.name in excluded_names:
                raise ConfigurationError(
                    f"Key field {ref.name!r} of table {self.table_name} cannot be excluded"
                )
        for ref in self.comparable_fields:
            if ref.name in excluded_names:
                raise ConfigurationError(
                    f"Comparable field {ref.name!r} of table {self.table_name} is excluded"
                )

    @property
    def excluded_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.excluded_fields)

    @property
    def key_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.key_fields)

    @property
    def comparable_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.comparable_fields)

    @property
    def insert_fields(self) -> tuple[FieldRef, ...]:
        """All fields minus excluded fields, in declared order."""
        excluded = self.excluded_names
        return tuple(f for f in self.fields if f.name not in excluded)

    def get_field(self, name: str) -> FieldRef:
        for ref in self.fields:
            if ref.name == name:
                return ref
        raise ConfigurationError(f"Field {name!r} is not declared on table {self.table_name}")

    @classmethod
    def from_names(
        cls,
        table_name: str,
        columns: Sequence[str],
        key: Sequence[str],
        excluded: Iterable[str] = (),
        accessor: Callable[[str], FieldRef] = FieldRef.attribute,
        comparable: Sequence[str] | None = None,
    ) -> "RecordDescriptor":
        """
        Build a descriptor from column names.

        Args:
            table_name: Target table name
            columns: All column names in declared order
            key: Key column names in declared order
            excluded: Column names ignored entirely
            accessor: FieldRef constructor used for every column
            comparable: Column names compared for content equality
                (default: every column that is not excluded)

        Returns:
            RecordDescriptor instance
        """
        if not table_name:
            raise MissingTableNameError()

        refs = {name: accessor(name) for name in columns}
        excluded = tuple(excluded)

        missing = [name for name in (*key, *excluded, *(comparable or ())) if name not in refs]
        if missing:
            raise ConfigurationError(
                f"Unknown column(s) {', '.join(missing)} for table {table_name}"
            )

        return cls(
            table_name=table_name,
            fields=tuple(refs.values()),
            key_fields=tuple(refs[name] for name in key),
            excluded_fields=frozenset(refs[name] for name in excluded),
            comparable_fields=None if comparable is None else tuple(refs[name] for name in comparable),
        )

    @classmethod
    def for_dataclass(
        cls,
        record_type: type,
        table_name: str,
        key: Sequence[str],
        excluded: Iterable[str] = (),
        comparable: Sequence[str] | None = None,
    ) -> "RecordDescriptor":
        """Build a descriptor from the fields of a dataclass."""
        if not dataclasses.is_dataclass(record_type):
            raise ConfigurationError(f"{record_type!r} is not a dataclass")
        if not table_name:
            raise MissingTableNameError(record_type)

        columns = [f.name for f in dataclasses.fields(record_type)]
        return cls.from_names(
            table_name, columns, key, excluded, FieldRef.attribute, comparable=comparable
        )

    @classmethod
    def for_mapping(
        cls,
        table_name: str,
        columns: Sequence[str],
        key: Sequence[str],
        excluded: Iterable[str] = (),
        comparable: Sequence[str] | None = None,
    ) -> "RecordDescriptor":
        """Build a descriptor for dict-shaped rows."""
        return cls.from_names(
            table_name, columns, key, excluded, FieldRef.item, comparable=comparable
        )


class DescriptorRegistry:
    """Maps record types to their descriptors."""

    def __init__(self):
        self._descriptors: dict[type, RecordDescriptor] = {}

    def register(self, record_type: type, descriptor: RecordDescriptor) -> None:
        if record_type in self._descriptors:
            logger.warning(f"Replacing descriptor for {record_type.__name__}")
        self._descriptors[record_type] = descriptor
        logger.debug(
            f"Registered {record_type.__name__} -> {descriptor.table_name} "
            f"(key={', '.join(descriptor.key_names)})"
        )

    def get(self, record_type: type) -> RecordDescriptor:
        try:
            return self._descriptors[record_type]
        except KeyError:
            raise ConfigurationError(
                f"No descriptor registered for {record_type.__name__}"
            ) from None

    def table(
        self,
        table_name: str,
        key: Sequence[str],
        excluded: Iterable[str] = (),
        comparable: Sequence[str] | None = None,
    ):
        """
        Class decorator registering a dataclass.

        Example:
            >>> @registry.table("users", key=["id"], excluded=["updated_at"])
            ... @dataclass
            ... class User:
            ...     id: int
            ...     name: str
            ...     updated_at: datetime
        """
        excluded = tuple(excluded)

        def decorator(record_type):
            self.register(
                record_type,
                RecordDescriptor.for_dataclass(
                    record_type, table_name, key, excluded, comparable=comparable
                ),
            )
            return record_type

        return decorator

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


default_registry = DescriptorRegistry()


def register_descriptor(record_type: type, descriptor: RecordDescriptor) -> None:
    default_registry.register(record_type, descriptor)


def get_descriptor(record_type: type) -> RecordDescriptor:
    return default_registry.get(record_type)
