"""
Unit tests for change classification.
"""

import pytest

from tablesync.engine import ChangeType, DiffResult, classify, classify_result


@pytest.mark.parametrize(
    "has_added, has_edited, has_deleted, expected",
    [
        (True, True, True, ChangeType.ALL),
        (True, False, False, ChangeType.ADDED),
        (True, True, False, ChangeType.ADDED_WITH_EDITED),
        (False, True, False, ChangeType.EDITED),
        (False, True, True, ChangeType.EDITED_WITH_DELETED),
        (False, False, True, ChangeType.DELETED),
        (False, False, False, ChangeType.NONE),
    ],
)
def test_classify_table(has_added, has_edited, has_deleted, expected):
    assert classify(has_added, has_edited, has_deleted) == expected


def test_added_with_deleted_has_its_own_category():
    assert classify(True, False, True) == ChangeType.ADDED_WITH_DELETED


def test_classify_accepts_truthy_values():
    assert classify(3, 0, [1]) == ChangeType.ADDED_WITH_DELETED


def test_classify_result(rows_descriptor):
    result = DiffResult(descriptor=rows_descriptor, added=({"id": 1, "name": "a"},))

    assert classify_result(result) == ChangeType.ADDED


def test_change_type_is_str_enum():
    assert ChangeType.ALL == "all"
    assert ChangeType("edited_with_deleted") is ChangeType.EDITED_WITH_DELETED
