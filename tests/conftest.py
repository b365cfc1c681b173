"""Shared test fixtures for times_drill.

This module provides pytest fixtures used across all tests.
"""

import random
from types import SimpleNamespace

import pytest
import pytest_asyncio

from times_drill.config import DrillSettings, RedisSettings
from times_drill.infra.memory.state_store import InMemoryStateStore
from times_drill.infra.redis.client import RedisClient
from times_drill.models.fact import make_fact
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO
from times_drill.models.state import Phase, SchedulerStateDTO
from times_drill.services.curriculum import build_checklist
from times_drill.services.question_selector import QuestionSelector

from mocks.mock_clock import FakeClock
from mocks.mock_redis import MockRedis


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    """Create a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def selector(rng: random.Random) -> QuestionSelector:
    """Create a deterministic question selector."""
    return QuestionSelector(rng)


@pytest.fixture
def settings() -> DrillSettings:
    """Create drill settings with the default cool-downs."""
    return DrillSettings(
        miss_ack_cooldown_seconds=0.35,
        level_up_cooldown_seconds=1.0,
        completed_cooldown_seconds=1.0,
    )


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryStateStore:
    """Create an in-memory store driven by the fake clock."""
    return InMemoryStateStore(ttl_seconds=86400, clock=clock)


@pytest.fixture
def mock_redis() -> MockRedis:
    """Create a mock async Redis connection."""
    return MockRedis()


@pytest_asyncio.fixture
async def redis_client(mock_redis: MockRedis, monkeypatch: pytest.MonkeyPatch) -> RedisClient:
    """Create a connected RedisClient backed by MockRedis."""
    monkeypatch.setattr(
        "times_drill.infra.redis.client.get_async_redis",
        lambda: SimpleNamespace(from_url=lambda url, **kwargs: mock_redis),
    )
    client = RedisClient(RedisSettings(url="redis://localhost:6379/0"))
    await client.connect()
    return client


@pytest.fixture
def level3_state() -> SchedulerStateDTO:
    """Create a practicing state at level 3 asking 2x3."""
    question = make_fact(2, 3)
    return SchedulerStateDTO(
        phase=Phase.PRACTICING,
        level=3,
        checklist=build_checklist(3),
        question=question,
        last_question_key=question.key,
    )


@pytest.fixture
def sample_correction() -> CorrectionEntryDTO:
    """Create sample CorrectionEntryDTO."""
    return CorrectionEntryDTO(key="2x3", a=2, b=3, got=1, required=3)


@pytest.fixture
def sample_miss_records() -> list[MissRecordDTO]:
    """Create sample lifetime miss records."""
    return [
        MissRecordDTO(key="2x3", a=2, b=3, wrong_count=2, right_count=1),
        MissRecordDTO(key="3x7", a=3, b=7, wrong_count=5, right_count=0),
        MissRecordDTO(key="1x4", a=1, b=4, wrong_count=2, right_count=4),
    ]
