"""
Reconciliation engine.

Identifies:
- Added records (in source, key absent from destination)
- Deleted records (in destination, key absent from source)
- Edited records (same key, at least one comparable field differs)
- The summary ChangeType of the whole result
"""

from .classifier import classify, classify_result
from .models import ChangeType, DiffResult, EditedRecord
from .reconciler import RecordReconciler, reconcile, reconcile_records

__all__ = [
    "ChangeType",
    "DiffResult",
    "EditedRecord",
    "RecordReconciler",
    "classify",
    "classify_result",
    "reconcile",
    "reconcile_records",
]
