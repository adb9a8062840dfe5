"""Shared fixtures: isolate process-wide state and provide sample records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from hypothesis import HealthCheck, settings

from structomap.config import reset_config
from structomap.fields import reset_accessors
from structomap.observability.logging import shutdown_logging

# _isolate is autouse and function-scoped; it resets state once per test, not
# per example, which is what the property tests want.
settings.register_profile(
    "structomap", suppress_health_check=[HealthCheck.function_scoped_fixture]
)
settings.load_profile("structomap")


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    """Keep the user's config file and env out of every test."""
    monkeypatch.delenv("STRUCTOMAP_KEY_CASE", raising=False)
    monkeypatch.setenv("STRUCTOMAP_CONFIG", str(tmp_path / "missing.yaml"))
    reset_config()
    reset_accessors()
    yield
    reset_config()
    reset_accessors()
    shutdown_logging()


CREATED_AT = datetime(2015, 5, 13, 15, 30, tzinfo=timezone.utc)


@dataclass
class User:
    ID: int
    Email: str = ""
    Birthday: datetime | None = None
    Age: int = 0
    HideEmail: bool = False
    FirstName: str = ""
    LastName: str = ""
    HideName: bool = False
    CreatedAt: datetime = CREATED_AT
    UpdatedAt: datetime = CREATED_AT


def make_user(**overrides) -> User:
    values = dict(
        ID=1,
        Email="x@example.com",
        Birthday=datetime(1989, 11, 24, tzinfo=timezone.utc),
        Age=25,
        FirstName="Foo",
        LastName="Bar",
        HideEmail=True,
        HideName=True,
    )
    values.update(overrides)
    return User(**values)


@pytest.fixture
def user() -> User:
    return make_user()
