"""
Pytest configuration and shared fixtures for tablesync tests.
"""

from dataclasses import dataclass
from datetime import datetime

import pytest

from tablesync.descriptor import RecordDescriptor


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Membership:
    user_id: int
    org_id: str
    role: str


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "property: mark test as property-based test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def no_trace_exporters(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep spans in-process during tests."""
    monkeypatch.delenv("OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("TRACE_CONSOLE", raising=False)


@pytest.fixture
def user_cls() -> type:
    return User


@pytest.fixture
def membership_cls() -> type:
    return Membership


@pytest.fixture
def users_descriptor() -> RecordDescriptor:
    return RecordDescriptor.for_dataclass(
        User, "users", key=["id"], excluded=["updated_at"]
    )


@pytest.fixture
def memberships_descriptor() -> RecordDescriptor:
    return RecordDescriptor.for_dataclass(
        Membership, "app.memberships", key=["user_id", "org_id"]
    )


@pytest.fixture
def rows_descriptor() -> RecordDescriptor:
    """Descriptor for dict-shaped rows."""
    return RecordDescriptor.for_mapping(
        "items", columns=["id", "name"], key=["id"]
    )
