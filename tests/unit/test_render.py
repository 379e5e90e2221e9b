"""
Unit tests for statement rendering.

Tests section layout, batch separators and renderer configuration errors.
"""

import pytest

from tablesync.dialects import PostgreSQLDialect, SQLServerDialect
from tablesync.engine import DiffResult, EditedRecord, reconcile_records
from tablesync.errors import ConfigurationError, RendererNotConfiguredError
from tablesync.render import DEFAULT_BATCH_SIZE, StatementRenderer, render


def _rows(ids):
    return tuple({"id": i, "name": f"n{i}"} for i in ids)


class TestRendererConfiguration:
    """Test fail-fast configuration checks."""

    def test_missing_dialect(self, rows_descriptor):
        with pytest.raises(RendererNotConfiguredError, match="not configured"):
            render(DiffResult(descriptor=rows_descriptor), None)

    def test_missing_dialect_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            StatementRenderer(None)

    @pytest.mark.parametrize("batch_size", [0, -1, 2.5, True])
    def test_invalid_batch_size(self, batch_size):
        with pytest.raises(ConfigurationError, match="batch_size"):
            StatementRenderer(SQLServerDialect(), batch_size=batch_size)

    def test_default_batch_size(self):
        assert StatementRenderer(SQLServerDialect()).batch_size == DEFAULT_BATCH_SIZE == 20


class TestRenderLayout:
    """Test section order, comments and statement order."""

    def test_unchanged_result_renders_nothing(self, rows_descriptor):
        assert render(DiffResult(descriptor=rows_descriptor), SQLServerDialect()) == ""

    def test_sections_in_fixed_order(self, rows_descriptor):
        result = reconcile_records(
            [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}],
            [{"id": 2, "name": "x"}, {"id": 3, "name": "c"}],
            rows_descriptor,
        )

        lines = render(result, SQLServerDialect()).splitlines()

        assert lines == [
            "-- ==============items==============",
            "-- ==============Insert===============",
            "INSERT INTO [items] ([id], [name]) VALUES (1, N'a');",
            "GO",
            "-- ==============items==============",
            "-- ==============Delete===============",
            "DELETE FROM [items] WHERE [id] = 3;",
            "GO",
            "-- ==============items==============",
            "-- ==============Update===============",
            "UPDATE [items] SET [name] = N'b' WHERE [id] = 2;",
            "GO",
        ]

    def test_empty_sections_are_skipped(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, deleted=_rows([1]))

        output = render(result, SQLServerDialect())

        assert "Insert" not in output
        assert "Update" not in output
        assert "-- ==============Delete===============" in output

    def test_output_ends_with_newline(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, added=_rows([1]))

        assert render(result, SQLServerDialect()).endswith("GO\n")

    def test_update_receives_changed_fields(self, users_descriptor, user_cls):
        edit = EditedRecord(user_cls(5, "new", "e@x"), (("name", "new"), ("email", "e@x")))
        result = DiffResult(descriptor=users_descriptor, edited=(edit,))

        output = render(result, PostgreSQLDialect())

        assert 'UPDATE "users" SET "name" = \'new\', "email" = \'e@x\' WHERE "id" = 5;' in output


class TestBatching:
    """Test separator placement."""

    @staticmethod
    def _statement_stream(output):
        # Drop the two section comments
        return output.splitlines()[2:]

    def test_five_statements_batch_of_two(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, added=_rows(range(1, 6)))

        stream = self._statement_stream(render(result, SQLServerDialect(), batch_size=2))

        assert [line if line == "GO" else line.split("VALUES")[1] for line in stream] == [
            " (1, N'n1');",
            " (2, N'n2');",
            "GO",
            " (3, N'n3');",
            " (4, N'n4');",
            "GO",
            " (5, N'n5');",
            "GO",
        ]

    def test_exact_multiple_has_no_extra_trailing_separator(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, added=_rows(range(1, 5)))

        stream = self._statement_stream(render(result, SQLServerDialect(), batch_size=2))

        assert stream.count("GO") == 2
        assert stream[-1] == "GO"
        assert stream[-2].startswith("INSERT")

    def test_batch_size_one_separates_every_statement(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, deleted=_rows(range(3)))

        stream = self._statement_stream(render(result, SQLServerDialect(), batch_size=1))

        assert stream == [
            "DELETE FROM [items] WHERE [id] = 0;",
            "GO",
            "DELETE FROM [items] WHERE [id] = 1;",
            "GO",
            "DELETE FROM [items] WHERE [id] = 2;",
            "GO",
        ]

    @pytest.mark.parametrize("count, batch_size", [(1, 20), (20, 20), (21, 20), (45, 7), (3, 50)])
    def test_separator_count_is_ceiling(self, rows_descriptor, count, batch_size):
        result = DiffResult(descriptor=rows_descriptor, added=_rows(range(count)))

        stream = self._statement_stream(render(result, SQLServerDialect(), batch_size=batch_size))

        assert stream.count("GO") == -(-count // batch_size)

    def test_batches_restart_per_section(self, rows_descriptor):
        result = DiffResult(
            descriptor=rows_descriptor, added=_rows(range(3)), deleted=_rows(range(10, 13))
        )

        lines = render(result, SQLServerDialect(), batch_size=2).splitlines()

        assert lines.count("GO") == 4

    def test_postgresql_separator_is_blank_line(self, rows_descriptor):
        result = DiffResult(descriptor=rows_descriptor, added=_rows(range(3)))

        lines = render(result, PostgreSQLDialect(), batch_size=2).splitlines()

        assert lines[4] == ""
        assert lines[-1] == ""
