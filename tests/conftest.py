"""
Shared pytest fixtures for TrendScope tests.

This module provides:
- In-memory and SQLite-backed storage
- Stub collector adapters, reasoner and email dispatcher
- Sample signal fixtures
"""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from trendscope.collectors.aggregator import Aggregator
from trendscope.database import init_db
from trendscope.storage.memory import MemoryStorage
from trendscope.storage.sql import SQLStorage
from tests.fixtures import StubAdapter, StubDispatcher, StubReasoner, make_signals


# =============================================================================
# Storage
# =============================================================================


@pytest.fixture
def storage() -> MemoryStorage:
    """Fresh, unseeded in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def sql_engine():
    """In-memory SQLite engine shared across sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_storage(sql_engine) -> SQLStorage:
    return SQLStorage(sql_engine)


# =============================================================================
# Test doubles
# =============================================================================


@pytest.fixture
def adapters() -> list[StubAdapter]:
    """Three healthy adapters."""
    return [
        StubAdapter("reddit", "Reddit"),
        StubAdapter("google-trends", "Google Trends"),
        StubAdapter("twitter", "Twitter/X", aliases=("x",)),
    ]


@pytest.fixture
def aggregator(adapters) -> Aggregator:
    return Aggregator(adapters, timeout=5)


@pytest.fixture
def reasoner() -> StubReasoner:
    return StubReasoner()


@pytest.fixture
def dispatcher() -> StubDispatcher:
    return StubDispatcher()


@pytest.fixture
def reddit_signals():
    return make_signals("reddit", count=3)
