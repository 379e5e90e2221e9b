"""
Runtime settings for synchronization runs.
"""

import logging
import os
from dataclasses import dataclass

from .dialects.factory import DatabaseType
from .dialects.identifiers import validate_integer_param
from .errors import ConfigurationError
from .render import DEFAULT_BATCH_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSettings:
    """
    Settings shared by the reconciler and the renderer.

    Attributes:
        batch_size: Statements per batch in rendered scripts
        max_workers: Worker threads for the field-level diff
        parallel_threshold: Matched records needed before using threads
        chunk_size: Matched records per worker task
        dialect: Default provider when the destination does not name one
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = 4
    parallel_threshold: int = 1000
    chunk_size: int = 500
    dialect: DatabaseType = DatabaseType.POSTGRESQL

    def __post_init__(self):
        try:
            validate_integer_param(self.batch_size, "batch_size", min_value=1)
            validate_integer_param(self.max_workers, "max_workers", min_value=1)
            validate_integer_param(self.parallel_threshold, "parallel_threshold", min_value=0)
            validate_integer_param(self.chunk_size, "chunk_size", min_value=1)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        object.__setattr__(self, "dialect", DatabaseType.parse(self.dialect))

    @classmethod
    def from_env(cls) -> "SyncSettings":
        """
        Load settings from environment variables

        Environment variables:
            TABLESYNC_BATCH_SIZE: Statements per batch (default: 20)
            TABLESYNC_MAX_WORKERS: Diff worker threads (default: 4)
            TABLESYNC_PARALLEL_THRESHOLD: Matched records before threading (default: 1000)
            TABLESYNC_CHUNK_SIZE: Matched records per task (default: 500)
            TABLESYNC_DIALECT: Default provider (default: postgresql)
        """
        settings = cls(
            batch_size=_env_int("TABLESYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            max_workers=_env_int("TABLESYNC_MAX_WORKERS", 4),
            parallel_threshold=_env_int("TABLESYNC_PARALLEL_THRESHOLD", 1000),
            chunk_size=_env_int("TABLESYNC_CHUNK_SIZE", 500),
            dialect=os.getenv("TABLESYNC_DIALECT", DatabaseType.POSTGRESQL.value),
        )
        logger.debug(f"Loaded settings from environment: {settings}")
        return settings


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
