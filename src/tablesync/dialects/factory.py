"""
Provider identifiers and the dialect registry.
"""

import logging
import threading
from enum import Enum

from ..errors import UnsupportedProviderError
from .base import DialectGenerator
from .mysql import MySQLDialect
from .postgresql import PostgreSQLDialect
from .sqlserver import SQLServerDialect

logger = logging.getLogger(__name__)


class DatabaseType(str, Enum):
    """
    Supported database families.

    Inherits from str for JSON serialization compatibility and
    easy comparison with string values.
    """

    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    MYSQL = "mysql"

    @classmethod
    def parse(cls, value: "DatabaseType | str") -> "DatabaseType":
        """
        Resolve a provider identifier, accepting common aliases.

        Raises:
            UnsupportedProviderError: If the identifier is unknown
        """
        if isinstance(value, cls):
            return value

        normalized = str(value).strip().lower()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedProviderError(value) from None


_ALIASES = {
    "postgres": "postgresql",
    "pg": "postgresql",
    "mssql": "sqlserver",
    "sql_server": "sqlserver",
    "tsql": "sqlserver",
    "mariadb": "mysql",
}


class DialectFactory:
    """
    Maps provider identifiers to dialect generators.

    Generators are stateless, so one instance per provider is cached and
    shared.
    """

    def __init__(self):
        self._registry: dict[str, type[DialectGenerator]] = {
            DatabaseType.POSTGRESQL.value: PostgreSQLDialect,
            DatabaseType.SQLSERVER.value: SQLServerDialect,
            DatabaseType.MYSQL.value: MySQLDialect,
        }
        self._instances: dict[str, DialectGenerator] = {}
        self._lock = threading.Lock()

    def register(self, provider: DatabaseType | str, dialect_cls: type[DialectGenerator]) -> None:
        """Register (or replace) the generator class for a provider."""
        key = _provider_key(provider)
        with self._lock:
            self._registry[key] = dialect_cls
            self._instances.pop(key, None)
        logger.debug(f"Registered dialect {dialect_cls.__name__} for provider {key}")

    def get(self, provider: DatabaseType | str) -> DialectGenerator:
        """
        Get the generator for a provider.

        Raises:
            UnsupportedProviderError: If nothing is registered for the provider
        """
        key = _provider_key(provider)
        with self._lock:
            if key not in self._registry:
                raise UnsupportedProviderError(provider)
            if key not in self._instances:
                self._instances[key] = self._registry[key]()
            return self._instances[key]

    @property
    def providers(self) -> list[str]:
        return sorted(self._registry)


def _provider_key(provider: DatabaseType | str) -> str:
    if isinstance(provider, DatabaseType):
        return provider.value
    try:
        return DatabaseType.parse(provider).value
    except UnsupportedProviderError:
        # Custom providers registered by name
        return str(provider).strip().lower()


default_factory = DialectFactory()


def get_dialect(provider: DatabaseType | str) -> DialectGenerator:
    return default_factory.get(provider)
