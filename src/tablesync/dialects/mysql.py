"""
MySQL dialect.
"""

from .base import DialectGenerator


class MySQLDialect(DialectGenerator):
    """Backtick identifiers and backslash-aware string escaping."""

    name = "mysql"
    quote_open = "`"
    quote_close = "`"

    def generate_batch_separator(self) -> str:
        return ""

    def format_string(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace("'", "''")
        return f"'{escaped}'"

    def format_bytes(self, value: bytes) -> str:
        return f"X'{value.hex()}'"
