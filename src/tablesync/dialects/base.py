"""
Dialect generator contract and shared statement building.

A dialect turns abstract insert/delete/update intents into statement text
for one database family. Generators are stateless: one instance can be
shared by concurrent renders.
"""

import math
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from ..descriptor import FieldRef, RecordDescriptor
from .identifiers import split_schema_table, validate_identifier


class DialectGenerator(ABC):
    """Produces literal statement text for one database family."""

    name: str = "generic"
    quote_open: str = '"'
    quote_close: str = '"'
    true_literal: str = "TRUE"
    false_literal: str = "FALSE"

    # Statements

    def generate_insert(self, descriptor: RecordDescriptor, record: Any) -> str:
        fields = descriptor.insert_fields
        columns = ", ".join(self.quote_identifier(ref.name) for ref in fields)
        values = ", ".join(self.format_value(ref.value(record)) for ref in fields)
        return f"INSERT INTO {self.quote_table(descriptor.table_name)} ({columns}) VALUES ({values});"

    def generate_delete(self, descriptor: RecordDescriptor, record: Any) -> str:
        return (
            f"DELETE FROM {self.quote_table(descriptor.table_name)} "
            f"WHERE {self._key_predicate(descriptor.key_fields, record)};"
        )

    def generate_update(
        self,
        descriptor: RecordDescriptor,
        record: Any,
        changed_fields: Sequence[tuple[str, Any]],
    ) -> str:
        """
        Build an UPDATE assigning every changed field.

        Raises:
            ValueError: If no assignable field remains once excluded and key
                fields are dropped
        """
        skip = descriptor.excluded_names | set(descriptor.key_names)
        assignments = [
            f"{self.quote_identifier(name)} = {self.format_value(value)}"
            for name, value in changed_fields
            if name not in skip
        ]
        if not assignments:
            raise ValueError(
                f"No assignable fields in update for {descriptor.table_name}: "
                f"{[name for name, _ in changed_fields]}"
            )

        return (
            f"UPDATE {self.quote_table(descriptor.table_name)} "
            f"SET {', '.join(assignments)} "
            f"WHERE {self._key_predicate(descriptor.key_fields, record)};"
        )

    def generate_select(self, descriptor: RecordDescriptor, condition: str = "") -> str:
        columns = ", ".join(self.quote_identifier(ref.name) for ref in descriptor.insert_fields)
        query = f"SELECT {columns} FROM {self.quote_table(descriptor.table_name)}"
        if condition:
            query += f" WHERE {condition}"
        return query + ";"

    def generate_comment(self, text: str) -> str:
        return "-- " + " ".join(str(text).splitlines())

    @abstractmethod
    def generate_batch_separator(self) -> str:
        """Line emitted between statement batches."""

    # Identifiers

    def quote_identifier(self, identifier: str) -> str:
        validate_identifier(identifier)
        return f"{self.quote_open}{identifier}{self.quote_close}"

    def quote_table(self, table_name: str) -> str:
        return ".".join(
            f"{self.quote_open}{part}{self.quote_close}"
            for part in split_schema_table(table_name)
        )

    def _key_predicate(self, key_fields: Sequence[FieldRef], record: Any) -> str:
        conditions = []
        for ref in key_fields:
            value = ref.value(record)
            column = self.quote_identifier(ref.name)
            if value is None:
                conditions.append(f"{column} IS NULL")
            else:
                conditions.append(f"{column} = {self.format_value(value)}")
        return " AND ".join(conditions)

    # Literals

    def format_value(self, value: Any) -> str:
        """Format a Python value as a SQL literal."""
        if value is None:
            return "NULL"

        if isinstance(value, bool):
            return self.true_literal if value else self.false_literal

        if isinstance(value, Enum):
            value = value.value
            if isinstance(value, (int, float)):
                return self.format_value(value)

        if isinstance(value, int):
            return str(value)

        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return self.format_special_float(value)
            return repr(value)

        if isinstance(value, Decimal):
            if not value.is_finite():
                raise ValueError(f"Cannot render non-finite decimal {value} as a {self.name} literal")
            return str(value)

        if isinstance(value, datetime):
            return self.format_datetime(value)

        if isinstance(value, date):
            return f"'{value.isoformat()}'"

        if isinstance(value, time):
            return f"'{value.isoformat()}'"

        if isinstance(value, uuid.UUID):
            return f"'{value}'"

        if isinstance(value, (bytes, bytearray, memoryview)):
            return self.format_bytes(bytes(value))

        return self.format_string(str(value))

    def format_string(self, value: str) -> str:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def format_datetime(self, value: datetime) -> str:
        return f"'{value.isoformat(sep=' ')}'"

    def format_special_float(self, value: float) -> str:
        raise ValueError(f"Cannot render {value} as a {self.name} literal")

    @abstractmethod
    def format_bytes(self, value: bytes) -> str:
        """Binary literal."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
