"""
SQL Server dialect.
"""

from .base import DialectGenerator


class SQLServerDialect(DialectGenerator):
    """Bracket identifiers, 1/0 booleans, N'' strings and GO batches."""

    name = "sqlserver"
    quote_open = "["
    quote_close = "]"
    true_literal = "1"
    false_literal = "0"

    def generate_batch_separator(self) -> str:
        return "GO"

    def format_string(self, value: str) -> str:
        escaped = value.replace("'", "''")
        return f"N'{escaped}'"

    def format_bytes(self, value: bytes) -> str:
        return f"0x{value.hex().upper()}" if value else "0x"
