"""
Identity and content comparers built from a RecordDescriptor.

KeyComparer defines record identity (key fields only). ValueComparer defines
content equality (comparable fields) and is only meaningful for records
already known to share a key.
"""

import math
from decimal import Decimal
from typing import Any

from .descriptor import RecordDescriptor


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def values_equal(a: Any, b: Any) -> bool:
    """
    Field value equality used by both comparers.

    Plain ``==`` except that NaN equals NaN, so a record always compares
    equal to itself.
    """
    if a is b:
        return True
    if _is_nan(a) or _is_nan(b):
        return _is_nan(a) and _is_nan(b)
    return a == b


class KeyComparer:
    """Equality and hashing over key fields."""

    def __init__(self, descriptor: RecordDescriptor):
        self.descriptor = descriptor
        self.fields = descriptor.key_fields

    def key_of(self, record: Any) -> tuple:
        """
        Structural composite key in declared key order.

        A tuple of the raw values is used instead of a joined string, so two
        distinct key tuples can never collide.
        """
        return tuple(ref.value(record) for ref in self.fields)

    def equal_key(self, a: Any, b: Any) -> bool:
        return all(values_equal(ref.value(a), ref.value(b)) for ref in self.fields)

    def hash_key(self, record: Any) -> int:
        return hash(self.key_of(record))

    def key_dict(self, record: Any) -> dict[str, Any]:
        return {ref.name: ref.value(record) for ref in self.fields}


class ValueComparer:
    """Equality over comparable fields."""

    def __init__(self, descriptor: RecordDescriptor):
        self.descriptor = descriptor
        self.fields = descriptor.comparable_fields

    def equal_value(self, a: Any, b: Any) -> bool:
        return all(values_equal(ref.value(a), ref.value(b)) for ref in self.fields)

    def changed_fields(self, source: Any, destination: Any) -> tuple[tuple[str, Any], ...]:
        """
        Fields whose values differ, valued from the source record.

        Returns:
            Tuple of (field_name, source_value) in declared field order,
            empty when the records are content-equal
        """
        changed = []
        for ref in self.fields:
            source_value = ref.value(source)
            if not values_equal(source_value, ref.value(destination)):
                changed.append((ref.name, source_value))
        return tuple(changed)
