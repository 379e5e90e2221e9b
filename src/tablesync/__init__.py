"""
tablesync: reconcile two snapshots of a table and render the statements
that turn the destination into the source.

Components:
- descriptor: per record type table, key, comparable and excluded fields
- comparers: key identity and content equality
- engine: added/deleted/edited partitions and ChangeType classification
- render: batched, comment-annotated statement text
- dialects: PostgreSQL, SQL Server and MySQL statement generators
- sync: fetch, reconcile and render orchestration

Usage:
    from tablesync import RecordDescriptor, reconcile_records, render, get_dialect

    result = reconcile_records(source_rows, target_rows, descriptor)
    script = render(result, get_dialect("postgresql"), batch_size=50)
"""

from .comparers import KeyComparer, ValueComparer
from .config import SyncSettings
from .descriptor import (
    DescriptorRegistry,
    FieldRef,
    RecordDescriptor,
    get_descriptor,
    register_descriptor,
)
from .dialects import DatabaseType, DialectFactory, DialectGenerator, get_dialect
from .engine import (
    ChangeType,
    DiffResult,
    EditedRecord,
    RecordReconciler,
    classify,
    classify_result,
    reconcile,
    reconcile_records,
)
from .errors import (
    ConfigurationError,
    DuplicateKeyError,
    MissingTableNameError,
    ReconciliationError,
    RendererNotConfiguredError,
    TableSyncError,
    UnsupportedDirectionError,
    UnsupportedProviderError,
)
from .render import StatementRenderer, render
from .sync import CursorSource, Direction, InMemorySource, RecordSource, Synchronizer

__version__ = "1.0.0"
__all__ = [
    "ChangeType",
    "ConfigurationError",
    "CursorSource",
    "DatabaseType",
    "DescriptorRegistry",
    "DialectFactory",
    "DialectGenerator",
    "DiffResult",
    "Direction",
    "DuplicateKeyError",
    "EditedRecord",
    "FieldRef",
    "InMemorySource",
    "KeyComparer",
    "MissingTableNameError",
    "RecordDescriptor",
    "RecordReconciler",
    "RecordSource",
    "ReconciliationError",
    "RendererNotConfiguredError",
    "StatementRenderer",
    "SyncSettings",
    "Synchronizer",
    "TableSyncError",
    "UnsupportedDirectionError",
    "UnsupportedProviderError",
    "ValueComparer",
    "classify",
    "classify_result",
    "get_descriptor",
    "get_dialect",
    "reconcile",
    "reconcile_records",
    "register_descriptor",
    "render",
]
