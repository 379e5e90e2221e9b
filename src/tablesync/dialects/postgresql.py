"""
PostgreSQL dialect.
"""

from .base import DialectGenerator


class PostgreSQLDialect(DialectGenerator):
    """Double-quoted identifiers, TRUE/FALSE, bytea hex literals."""

    name = "postgresql"

    def generate_batch_separator(self) -> str:
        # psql runs statements one by one; a blank line marks the batch
        return ""

    def format_bytes(self, value: bytes) -> str:
        return f"'\\x{value.hex()}'::bytea"

    def format_special_float(self, value: float) -> str:
        if value != value:
            return "'NaN'::double precision"
        return "'Infinity'::double precision" if value > 0 else "'-Infinity'::double precision"
