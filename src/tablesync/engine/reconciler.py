"""
Record-level reconciliation engine.

Compares a source and a destination collection of records of one type and
partitions them into added, deleted and edited records, with the exact
fields that changed for every edited record.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from opentelemetry import trace

from ..comparers import KeyComparer, ValueComparer
from ..descriptor import RecordDescriptor
from ..errors import DuplicateKeyError, ReconciliationError
from ..metrics import RECONCILE_TIME, RECORDS_DIFFED
from ..utils.tracing import add_span_attributes, trace_operation
from .classifier import classify
from .models import DiffResult, EditedRecord

logger = logging.getLogger(__name__)

# (source position, source record, destination record)
MatchedPair = tuple[int, Any, Any]


class RecordReconciler:
    """
    Reconciles two materialized record collections.

    Matched pairs are compared on a thread pool once their number reaches
    ``parallel_threshold``. Each worker diffs its own chunk into a local
    list; the lists are merged and sorted by source position afterwards, so
    ``edited`` always follows source order.
    """

    def __init__(
        self,
        max_workers: int = 4,
        parallel_threshold: int = 1000,
        chunk_size: int = 500,
    ):
        """
        Initialize reconciler.

        Args:
            max_workers: Maximum worker threads for the field-level diff
            parallel_threshold: Minimum matched pairs before using threads
            chunk_size: Matched pairs handed to a worker at a time
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold
        self.chunk_size = chunk_size

    def reconcile(
        self,
        source: Iterable[Any],
        destination: Iterable[Any],
        key_comparer: KeyComparer,
        value_comparer: ValueComparer | None = None,
    ) -> DiffResult:
        """
        Compute the diff that turns ``destination`` into ``source``.

        Args:
            source: Records that should exist after synchronization
            destination: Records currently present in the target store
            key_comparer: Defines record identity
            value_comparer: Defines content equality (defaults to the
                comparable fields of the key comparer's descriptor)

        Returns:
            DiffResult owned by the caller

        Raises:
            DuplicateKeyError: If one side holds two records with the same key
        """
        descriptor = key_comparer.descriptor
        if value_comparer is None:
            value_comparer = ValueComparer(descriptor)

        table = descriptor.table_name

        with trace_operation(
            "reconcile_records",
            kind=trace.SpanKind.INTERNAL,
            table=table,
        ):
            with RECONCILE_TIME.labels(table=table).time():
                source_rows = list(source)
                destination_rows = list(destination)

                source_index = _index_by_key(source_rows, key_comparer, "source")
                destination_index = _index_by_key(destination_rows, key_comparer, "destination")

                added = tuple(
                    source_rows[pos]
                    for key, pos in source_index.items()
                    if key not in destination_index
                )
                deleted = tuple(
                    destination_rows[pos]
                    for key, pos in destination_index.items()
                    if key not in source_index
                )
                pairs = [
                    (pos, source_rows[pos], destination_rows[destination_index[key]])
                    for key, pos in source_index.items()
                    if key in destination_index
                ]

                edited = self._diff_pairs(pairs, value_comparer)

                result = DiffResult(
                    descriptor=descriptor,
                    added=added,
                    deleted=deleted,
                    edited=edited,
                    source_count=len(source_rows),
                    destination_count=len(destination_rows),
                    change_type=classify(bool(added), bool(edited), bool(deleted)),
                )

                RECORDS_DIFFED.labels(table=table, kind="added").inc(len(added))
                RECORDS_DIFFED.labels(table=table, kind="deleted").inc(len(deleted))
                RECORDS_DIFFED.labels(table=table, kind="edited").inc(len(edited))
                RECORDS_DIFFED.labels(table=table, kind="unchanged").inc(len(pairs) - len(edited))

                add_span_attributes(
                    added=len(added),
                    deleted=len(deleted),
                    edited=len(edited),
                    change_type=result.change_type.value,
                )

                logger.info(f"Reconciliation complete: {result.summary()}")

                return result

    def _diff_pairs(
        self, pairs: Sequence[MatchedPair], value_comparer: ValueComparer
    ) -> tuple[EditedRecord, ...]:
        if not pairs:
            return ()

        if len(pairs) < self.parallel_threshold or self.max_workers == 1:
            partials = [_diff_chunk(pairs, value_comparer)]
        else:
            chunks = [
                pairs[i : i + self.chunk_size]
                for i in range(0, len(pairs), self.chunk_size)
            ]
            workers = min(self.max_workers, len(chunks))

            logger.debug(
                f"Comparing {len(pairs)} matched records in {len(chunks)} chunks "
                f"on {workers} workers"
            )

            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tablesync-diff") as executor:
                futures = [
                    executor.submit(_diff_chunk, chunk, value_comparer)
                    for chunk in chunks
                ]
                partials = [future.result() for future in futures]

        merged = [item for partial in partials for item in partial]
        merged.sort(key=lambda item: item[0])
        return tuple(edited for _, edited in merged)


def _index_by_key(
    rows: Sequence[Any], key_comparer: KeyComparer, side: str
) -> dict[tuple, int]:
    """Map each record's key tuple to its position, rejecting duplicates."""
    index: dict[tuple, int] = {}
    for pos, row in enumerate(rows):
        key = key_comparer.key_of(row)
        try:
            if key in index:
                raise DuplicateKeyError(side, key)
        except TypeError as e:
            raise ReconciliationError(
                f"Key {key!r} in {side} collection is not hashable: {e}"
            ) from e
        index[key] = pos
    return index


def _diff_chunk(
    chunk: Sequence[MatchedPair], value_comparer: ValueComparer
) -> list[tuple[int, EditedRecord]]:
    edited = []
    for pos, source_record, destination_record in chunk:
        if value_comparer.equal_value(source_record, destination_record):
            continue
        changed = value_comparer.changed_fields(source_record, destination_record)
        if changed:
            edited.append((pos, EditedRecord(source_record, changed)))
    return edited


_default_reconciler = RecordReconciler()


def reconcile(
    source: Iterable[Any],
    destination: Iterable[Any],
    key_comparer: KeyComparer,
    value_comparer: ValueComparer | None = None,
) -> DiffResult:
    """Reconcile with the default reconciler settings."""
    return _default_reconciler.reconcile(source, destination, key_comparer, value_comparer)


def reconcile_records(
    source: Iterable[Any],
    destination: Iterable[Any],
    descriptor: RecordDescriptor,
    **options,
) -> DiffResult:
    """
    Reconcile two collections described by ``descriptor``.

    Args:
        source: Source records
        destination: Destination records
        descriptor: Field descriptor of the record type
        **options: RecordReconciler settings (max_workers, parallel_threshold,
            chunk_size)

    Example:
        >>> result = reconcile_records(source_rows, target_rows, users_descriptor)
        >>> print(result.change_type)
    """
    reconciler = RecordReconciler(**options) if options else _default_reconciler
    return reconciler.reconcile(
        source, destination, KeyComparer(descriptor), ValueComparer(descriptor)
    )
