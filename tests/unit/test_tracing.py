"""
Unit tests for tablesync.utils.tracing
"""

from unittest.mock import Mock

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from tablesync.engine import reconcile_records
from tablesync.sync import CursorSource, InMemorySource, Synchronizer
from tablesync.utils import tracing
from tablesync.utils.tracing import tracer as tracer_module


@pytest.fixture
def exporter():
    """Fresh tracer whose spans land in memory."""
    tracing.shutdown_tracing()
    tracing.initialize_tracing(service_name="tablesync-test")
    memory = InMemorySpanExporter()
    tracer_module._provider.add_span_processor(SimpleSpanProcessor(memory))
    yield memory
    tracing.shutdown_tracing()


class TestTracer:
    """Test tracer lifecycle."""

    def test_get_tracer_initializes_once(self):
        tracing.shutdown_tracing()

        first = tracing.get_tracer()
        second = tracing.get_tracer()

        assert first is second
        tracing.shutdown_tracing()

    def test_shutdown_is_idempotent(self):
        tracing.shutdown_tracing()
        tracing.shutdown_tracing()


class TestTraceOperation:
    """Test span creation and error recording."""

    def test_attributes_are_strings(self, exporter):
        with tracing.trace_operation("unit_op", table="users", rows=3):
            tracing.add_span_attributes(extra=True)
            tracing.add_span_event("halfway", step=1)

        (span,) = exporter.get_finished_spans()
        assert span.name == "unit_op"
        assert span.attributes["table"] == "users"
        assert span.attributes["rows"] == "3"
        assert span.attributes["extra"] == "True"
        assert span.events[0].name == "halfway"

    def test_errors_are_recorded_and_reraised(self, exporter):
        with pytest.raises(KeyError):
            with tracing.trace_operation("failing_op"):
                raise KeyError("missing")

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert span.attributes["error.type"] == "KeyError"
        assert span.events[0].name == "exception"

    def test_trace_function_decorator(self, exporter):
        @tracing.trace_function(component="renderer")
        def render_nothing():
            return "ok"

        assert render_nothing() == "ok"

        (span,) = exporter.get_finished_spans()
        assert span.name.endswith("render_nothing")
        assert span.attributes["component"] == "renderer"

    def test_reconcile_emits_span(self, exporter, rows_descriptor):
        reconcile_records([{"id": 1, "name": "a"}], [], rows_descriptor)

        spans = {span.name: span for span in exporter.get_finished_spans()}
        assert spans["reconcile_records"].attributes["table"] == "items"
        assert spans["reconcile_records"].attributes["added"] == "1"
        assert spans["reconcile_records"].attributes["change_type"] == "added"

    def test_sync_records_fetch_events(self, exporter, rows_descriptor):
        cursor = Mock()
        cursor.description = [("id", None), ("name", None)]
        cursor.fetchall.return_value = [(1, "a"), (2, "b")]

        Synchronizer().sync_data(
            CursorSource(cursor, "postgresql"),
            InMemorySource([]),
            rows_descriptor,
            filter_callback=lambda rows: rows[:1],
        )

        spans = {span.name: span for span in exporter.get_finished_spans()}
        assert spans["fetch_records"].attributes["component"] == "cursor_source"
        events = {event.name: event for event in spans["sync_data"].events}
        assert events["records_fetched"].attributes["source"] == "2"
        assert events["records_filtered"].attributes["source"] == "1"
