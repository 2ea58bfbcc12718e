"""
Shared fixtures.

- db_session: AsyncSession on a fresh in-memory SQLite database
- memory_store: in-memory RunnerStore for matching tests
- make_runner: builds transient Runner objects
"""

import asyncio
import itertools

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from racehub.models import Base, load_models
from racehub.features.runners.models import Runner, RunnerMatch

load_models()


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def db_session():
    """Async session bound to a throwaway in-memory database."""
    load_models()
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


# =============================================================================
# In-memory runner store
# =============================================================================

class InMemoryRunnerStore:
    """RunnerStore backed by lists. Reads and creates yield to the event loop."""

    def __init__(self, runners=None):
        self.runners: list[Runner] = list(runners or [])
        self.matches: list[RunnerMatch] = []
        self.commits = 0
        self._ids = itertools.count(1000)

    async def get_all_runners(self):
        await asyncio.sleep(0)
        return list(self.runners)

    async def create_runner(self, data):
        await asyncio.sleep(0)
        runner = Runner(id=next(self._ids), **data)
        self.runners.append(runner)
        return runner

    async def create_runner_match(self, data):
        match = RunnerMatch(id=len(self.matches) + 1, **data)
        self.matches.append(match)
        return match

    async def add_alternate_name(self, runner, name):
        known = list(runner.alternate_names or [])
        if name not in known:
            runner.alternate_names = known + [name]
        return runner

    async def commit(self):
        self.commits += 1


@pytest.fixture
def make_runner():
    """Factory for transient Runner rows with sensible defaults."""
    ids = itertools.count(1)

    def _make(name="Marcus Johnson", age=32, gender="M", city="San Francisco", state="CA", **kwargs):
        return Runner(
            id=kwargs.pop("id", next(ids)),
            name=name,
            age=age,
            gender=gender,
            city=city,
            state=state,
            alternate_names=kwargs.pop("alternate_names", [name]),
            verified=kwargs.pop("verified", False),
            matching_confidence=kwargs.pop("matching_confidence", 100),
            **kwargs,
        )

    return _make


@pytest.fixture
def memory_store():
    return InMemoryRunnerStore()
