"""
Statement rendering from reconciliation results.

Turns a DiffResult into batched insert, delete and update statements using
a dialect generator. Rendering is a single pure pass; nothing is executed.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from opentelemetry import trace

from .dialects.base import DialectGenerator
from .dialects.identifiers import validate_integer_param
from .engine.models import DiffResult
from .errors import ConfigurationError, RendererNotConfiguredError
from .metrics import RENDER_TIME, STATEMENTS_RENDERED
from .utils.tracing import trace_operation

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


class StatementRenderer:
    """
    Renders DiffResults for one dialect.

    Output layout, for each non-empty section in the order Insert, Delete,
    Update:

        -- ==============<table>==============
        -- ==============Insert===============
        <statement 1>
        ...
        <statement batch_size>
        <batch separator>
        ...
        <trailing batch separator, unless the count is a multiple of batch_size>
    """

    def __init__(self, dialect: DialectGenerator | None, batch_size: int = DEFAULT_BATCH_SIZE):
        if dialect is None:
            raise RendererNotConfiguredError()
        try:
            validate_integer_param(batch_size, "batch_size", min_value=1)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self.dialect = dialect
        self.batch_size = batch_size

    def render(self, result: DiffResult) -> str:
        """
        Render a DiffResult into statement text.

        Args:
            result: Reconciliation result to render

        Returns:
            Newline separated statements, empty when nothing changed
        """
        descriptor = result.descriptor
        table = descriptor.table_name
        dialect = self.dialect

        sections: list[tuple[str, Sequence[Any], Callable[[Any], str]]] = [
            ("Insert", result.added, lambda record: dialect.generate_insert(descriptor, record)),
            ("Delete", result.deleted, lambda record: dialect.generate_delete(descriptor, record)),
            (
                "Update",
                result.edited,
                lambda edit: dialect.generate_update(descriptor, edit.record, edit.changed_fields),
            ),
        ]

        with trace_operation(
            "render_statements",
            kind=trace.SpanKind.INTERNAL,
            table=table,
            dialect=dialect.name,
            batch_size=self.batch_size,
        ):
            with RENDER_TIME.labels(table=table, dialect=dialect.name).time():
                lines: list[str] = []
                for kind, items, generate in sections:
                    if not items:
                        continue
                    lines.extend(self._render_section(table, kind, items, generate))
                    STATEMENTS_RENDERED.labels(
                        table=table, dialect=dialect.name, statement=kind.lower()
                    ).inc(len(items))

                logger.debug(
                    f"Rendered {len(result.added)} insert, {len(result.deleted)} delete, "
                    f"{len(result.edited)} update statements for {table} ({dialect.name})"
                )

                if not lines:
                    return ""
                return "\n".join(lines) + "\n"

    def _render_section(
        self,
        table: str,
        kind: str,
        items: Sequence[Any],
        generate: Callable[[Any], str],
    ) -> list[str]:
        separator = self.dialect.generate_batch_separator()
        lines = [
            self.dialect.generate_comment(f"=============={table}=============="),
            self.dialect.generate_comment(f"=============={kind}==============="),
        ]

        for count, item in enumerate(items, start=1):
            lines.append(generate(item))
            if count % self.batch_size == 0:
                lines.append(separator)

        if len(items) % self.batch_size != 0:
            lines.append(separator)

        return lines


def render(
    result: DiffResult,
    dialect: DialectGenerator | None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> str:
    """
    Render a DiffResult with ``dialect``.

    Raises:
        RendererNotConfiguredError: If ``dialect`` is None
        ConfigurationError: If ``batch_size`` is not a positive integer
    """
    return StatementRenderer(dialect, batch_size).render(result)
