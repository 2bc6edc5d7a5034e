"""Pytest configuration and shared fixtures for Teamload tests.

Provides an isolated SQLite row store per test, a single-worker background
writer, snapshot factories and a store fake that fails on demand.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from teamload import models  # noqa: F401
from teamload.domain.entities import (
    Allocation,
    AppData,
    Member,
    Project,
    ProjectStatus,
    ProjectVisibility,
)
from teamload.errors import StoreError
from teamload.infra.database import create_session_factory
from teamload.infra.repositories import SQLModelAllocationStore
from teamload.services.allocation_sync import AllocationSynchronizer, BackgroundWriter

# Mondays used across the suite
W1 = date(2025, 1, 6)
W2 = W1 + timedelta(weeks=1)
W3 = W1 + timedelta(weeks=2)
W4 = W1 + timedelta(weeks=3)
WEEKS = (W1, W2, W3, W4)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    A file (not ``:memory:``) so background writer threads see the same data.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application wires up."""
    return create_session_factory(db_engine)


@pytest.fixture
def store(session_factory) -> SQLModelAllocationStore:
    return SQLModelAllocationStore(session_factory)


@pytest.fixture
def writer():
    """Single-worker background writer, drained after the test."""
    bg = BackgroundWriter(max_workers=1)
    yield bg
    bg.shutdown(wait=True)


@pytest.fixture
def synchronizer(store, writer) -> AllocationSynchronizer:
    return AllocationSynchronizer(store, writer)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def team() -> AppData:
    """Two members, one active and one archived project, a few allocations."""
    return AppData.build(
        members=[
            Member(id="m1", name="Alice Chen", role="DBA"),
            Member(id="m2", name="Bob Smith", role="Data Engineer"),
        ],
        projects=[
            Project(id="p1", name="Migration"),
            Project(
                id="p2",
                name="Ledger",
                status=ProjectVisibility.ARCHIVED,
                project_status=ProjectStatus.COMPLETED,
            ),
        ],
        allocations=[
            Allocation(id="a1", member_id="m1", project_id="p1", week_date=W1, value=0.5),
            Allocation(id="a2", member_id="m1", project_id="p2", week_date=W1, value=0.3),
            Allocation(id="a3", member_id="m1", project_id="p1", week_date=W2, value=1.0),
            Allocation(id="a4", member_id="m2", project_id="p1", week_date=W3, value=0.8),
        ],
    )


@pytest.fixture
def seeded_store(store, team) -> SQLModelAllocationStore:
    """The SQLite store holding exactly the ``team`` snapshot."""
    for member in team.members:
        store.upsert_member(member)
    for project in team.projects:
        store.upsert_project(project)
    for allocation in team.allocations:
        store.upsert_allocation(allocation)
    return store


class FailingStore:
    """Delegates to a real store but raises StoreError for chosen operations."""

    def __init__(self, inner, fail_on: set[str] | None = None, fail_ids: set[str] | None = None):
        self._inner = inner
        self.fail_on = set(fail_on or ())
        self.fail_ids = set(fail_ids or ())
        self.calls: list[str] = []

    def __getattr__(self, name):
        target = getattr(self._inner, name)
        if not callable(target):
            return target

        def wrapper(*args, **kwargs):
            self.calls.append(name)
            if name in self.fail_on and self._targets_failing_id(args):
                raise StoreError(name, RuntimeError("simulated outage"))
            return target(*args, **kwargs)

        return wrapper

    def _targets_failing_id(self, args) -> bool:
        if not self.fail_ids:
            return True
        for arg in args:
            ids = {getattr(arg, "id", None)} if not isinstance(arg, (list, tuple, set)) else set(arg)
            if ids & self.fail_ids:
                return True
        return False


@pytest.fixture
def failing_store_factory(store):
    def _make(fail_on, fail_ids=None) -> FailingStore:
        return FailingStore(store, fail_on=fail_on, fail_ids=fail_ids)

    return _make


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 1e-9):
    """Assert that two FTE sums are equal within a tolerance.

    Load values are float sums of tenths, which do not add up exactly in
    binary floating point.
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
