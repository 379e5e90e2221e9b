"""
Maps which partitions of a diff are non-empty to a single ChangeType.
"""

from .models import ChangeType, DiffResult

# (has_added, has_edited, has_deleted) -> ChangeType
_CHANGE_TYPES = {
    (True, True, True): ChangeType.ALL,
    (True, False, False): ChangeType.ADDED,
    (True, True, False): ChangeType.ADDED_WITH_EDITED,
    (False, True, False): ChangeType.EDITED,
    (False, True, True): ChangeType.EDITED_WITH_DELETED,
    (False, False, True): ChangeType.DELETED,
    (True, False, True): ChangeType.ADDED_WITH_DELETED,
    (False, False, False): ChangeType.NONE,
}


def classify(has_added: bool, has_edited: bool, has_deleted: bool) -> ChangeType:
    return _CHANGE_TYPES[(bool(has_added), bool(has_edited), bool(has_deleted))]


def classify_result(result: DiffResult) -> ChangeType:
    return classify(bool(result.added), bool(result.edited), bool(result.deleted))
