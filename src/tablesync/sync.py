"""
Synchronization orchestration.

Fetches both sides through RecordSource collaborators, reconciles them and
renders the statements that bring the destination in line with the source.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from opentelemetry import trace

from .comparers import KeyComparer, ValueComparer
from .config import SyncSettings
from .descriptor import RecordDescriptor
from .dialects.factory import DatabaseType, DialectFactory, default_factory
from .engine.models import DiffResult
from .engine.reconciler import RecordReconciler
from .errors import MissingTableNameError, UnsupportedDirectionError
from .render import StatementRenderer
from .utils.logging import ContextLogger
from .utils.tracing import add_span_event, trace_function, trace_operation

logger = logging.getLogger(__name__)

FilterCallback = Callable[[list[Any]], Iterable[Any]]


class Direction(str, Enum):
    """Which side is treated as the source of truth."""

    SOURCE_TO_DESTINATION = "source_to_destination"
    DESTINATION_TO_SOURCE = "destination_to_source"


@runtime_checkable
class RecordSource(Protocol):
    """A store that can hand over the materialized rows of one table."""

    provider: DatabaseType | str

    def fetch(self, descriptor: RecordDescriptor) -> Iterable[Any]:
        ...


class InMemorySource:
    """RecordSource over an already materialized collection."""

    def __init__(self, records: Iterable[Any], provider: DatabaseType | str = DatabaseType.POSTGRESQL):
        self.records = list(records)
        self.provider = provider

    def fetch(self, descriptor: RecordDescriptor) -> list[Any]:
        return list(self.records)

    def __repr__(self) -> str:
        return f"InMemorySource({len(self.records)} records, provider={self.provider!r})"


class CursorSource:
    """
    RecordSource reading one table through a DB-API cursor.

    The SELECT is generated by the provider's dialect from the descriptor,
    so only non-excluded columns are read. Each row is handed to
    ``row_factory`` as a column-name dict.

    Example:
        >>> source = CursorSource(pg_conn.cursor(), "postgresql", row_factory=lambda row: User(**row))
        >>> users = source.fetch(users_descriptor)
    """

    def __init__(
        self,
        cursor: Any,
        provider: DatabaseType | str,
        condition: str = "",
        row_factory: Callable[[dict[str, Any]], Any] | None = None,
        factory: DialectFactory | None = None,
    ):
        self.cursor = cursor
        self.provider = provider
        self.condition = condition
        self.row_factory = row_factory
        self.factory = factory or default_factory

    @trace_function("fetch_records", component="cursor_source")
    def fetch(self, descriptor: RecordDescriptor) -> list[Any]:
        query = self.factory.get(self.provider).generate_select(descriptor, self.condition)
        self.cursor.execute(query)

        columns = [desc[0] for desc in self.cursor.description]
        rows = [dict(zip(columns, row)) for row in self.cursor.fetchall()]

        logger.debug(f"Fetched {len(rows)} rows from {descriptor.table_name} ({self.provider})")

        if self.row_factory is None:
            return rows
        return [self.row_factory(row) for row in rows]


def resolve_direction(
    source: RecordSource,
    destination: RecordSource,
    direction: Direction | str,
) -> tuple[RecordSource, RecordSource]:
    """
    Order the two stores according to ``direction``.

    Raises:
        UnsupportedDirectionError: For any value other than the two
            Direction members
    """
    try:
        direction = Direction(direction)
    except ValueError:
        raise UnsupportedDirectionError(direction) from None

    if direction is Direction.SOURCE_TO_DESTINATION:
        return source, destination
    elif direction is Direction.DESTINATION_TO_SOURCE:
        return destination, source
    else:
        raise UnsupportedDirectionError(direction)


class Synchronizer:
    """
    Reconciles two stores and renders the resulting statements.

    Example:
        >>> synchronizer = Synchronizer()
        >>> result, script = synchronizer.sync_and_render(
        ...     InMemorySource(source_rows),
        ...     InMemorySource(target_rows, provider="sqlserver"),
        ...     users_descriptor,
        ... )
    """

    def __init__(
        self,
        settings: SyncSettings | None = None,
        reconciler: RecordReconciler | None = None,
        factory: DialectFactory | None = None,
    ):
        self.settings = settings or SyncSettings()
        self.reconciler = reconciler or RecordReconciler(
            max_workers=self.settings.max_workers,
            parallel_threshold=self.settings.parallel_threshold,
            chunk_size=self.settings.chunk_size,
        )
        self.factory = factory or default_factory

    def sync_data(
        self,
        source: RecordSource,
        destination: RecordSource,
        descriptor: RecordDescriptor,
        filter_callback: FilterCallback | None = None,
        direction: Direction | str = Direction.SOURCE_TO_DESTINATION,
    ) -> DiffResult:
        """
        Fetch both sides and reconcile them.

        Args:
            source: Store holding the records to propagate
            destination: Store to bring in line with ``source``
            descriptor: Field descriptor of the record type
            filter_callback: Optional callable applied to each fetched
                collection before diffing
            direction: Swap the roles of the two stores when
                DESTINATION_TO_SOURCE

        Returns:
            DiffResult describing how to transform the destination
        """
        if not descriptor.table_name:
            raise MissingTableNameError()

        source, destination = resolve_direction(source, destination, direction)
        log = ContextLogger(__name__, table_name=descriptor.table_name)

        with trace_operation(
            "sync_data",
            kind=trace.SpanKind.INTERNAL,
            table=descriptor.table_name,
            direction=Direction(direction).value,
        ):
            source_records = list(source.fetch(descriptor))
            destination_records = list(destination.fetch(descriptor))
            add_span_event(
                "records_fetched",
                source=len(source_records),
                destination=len(destination_records),
            )

            if filter_callback is not None:
                source_records = list(filter_callback(source_records))
                destination_records = list(filter_callback(destination_records))
                add_span_event(
                    "records_filtered",
                    source=len(source_records),
                    destination=len(destination_records),
                )

            log.info(
                f"Fetched {len(source_records)} source and "
                f"{len(destination_records)} destination records",
                source_count=len(source_records),
                destination_count=len(destination_records),
            )

            return self.reconciler.reconcile(
                source_records,
                destination_records,
                KeyComparer(descriptor),
                ValueComparer(descriptor),
            )

    def generate_sync_script(
        self,
        result: DiffResult,
        provider: DatabaseType | str | None = None,
        batch_size: int | None = None,
    ) -> str:
        """Render ``result`` for ``provider`` (default: the configured dialect)."""
        if provider is None:
            provider = self.settings.dialect
        if batch_size is None:
            batch_size = self.settings.batch_size

        dialect = self.factory.get(provider)
        renderer = StatementRenderer(dialect, batch_size)
        return renderer.render(result)

    def sync_and_render(
        self,
        source: RecordSource,
        destination: RecordSource,
        descriptor: RecordDescriptor,
        filter_callback: FilterCallback | None = None,
        direction: Direction | str = Direction.SOURCE_TO_DESTINATION,
    ) -> tuple[DiffResult, str]:
        """Reconcile, then render for whichever store ends up as destination."""
        _, target = resolve_direction(source, destination, direction)
        result = self.sync_data(source, destination, descriptor, filter_callback, direction)
        provider = getattr(target, "provider", None)
        return result, self.generate_sync_script(result, provider)
