"""
Shared fixtures: an in-memory slot store, loaded app state, and a fake catalog.
"""

from datetime import date

import pytest
import pytest_asyncio

from moodyflicks.services.state import AppState
from moodyflicks.services.store import MemoryStore

from tests.factories import FakeCatalog, quiz_movies


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest_asyncio.fixture
async def state(store) -> AppState:
    return await AppState.load(store)


@pytest.fixture
def today() -> date:
    return date(2026, 10, 18)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(quiz_movies())
