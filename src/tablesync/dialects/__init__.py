"""
Dialect generators: provider-specific statement text.

Supported families:
- PostgreSQL
- SQL Server
- MySQL

Select a generator by provider identifier through the factory:

    from tablesync.dialects import get_dialect

    dialect = get_dialect("postgresql")
"""

from .base import DialectGenerator
from .factory import DatabaseType, DialectFactory, default_factory, get_dialect
from .mysql import MySQLDialect
from .postgresql import PostgreSQLDialect
from .sqlserver import SQLServerDialect

__all__ = [
    "DatabaseType",
    "DialectFactory",
    "DialectGenerator",
    "MySQLDialect",
    "PostgreSQLDialect",
    "SQLServerDialect",
    "default_factory",
    "get_dialect",
]
