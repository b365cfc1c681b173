"""Unit tests for the TimesDrill facade."""

import json
import random

import pytest
import pytest_asyncio

from times_drill import TimesDrill
from times_drill.config import RedisSettings, TimesDrillConfig
from times_drill.exceptions import InvalidInputError
from times_drill.infra.memory.state_store import InMemoryStateStore
from times_drill.infra.redis.client import RedisClient
from times_drill.infra.redis.state_store import RedisStateStore
from times_drill.models.fact import make_fact
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO
from times_drill.models.state import PersistedStateDTO, Phase

from mocks.mock_clock import FakeClock
from mocks.mock_redis import MockRedis


@pytest.fixture
def config() -> TimesDrillConfig:
    """Create a config that never touches a real Redis."""
    return TimesDrillConfig(redis=RedisSettings(url=None))


@pytest_asyncio.fixture
async def drill(
    memory_store: InMemoryStateStore,
    config: TimesDrillConfig,
    clock: FakeClock,
) -> TimesDrill:
    """Create an entered drill session with nothing saved."""
    session = TimesDrill(memory_store, config=config, rng=random.Random(42), clock=clock)
    await session.restore()
    return session


def _wrong(drill: TimesDrill) -> str:
    assert drill.state.question is not None
    return str(drill.state.question.answer + 1)


class TestLifecycle:
    """Tests for starting, restoring and resetting sessions."""

    @pytest.mark.asyncio
    async def test_fresh_session_chooses_level(self, drill: TimesDrill) -> None:
        assert drill.phase == Phase.CHOOSING_LEVEL
        assert drill.snapshot().level is None
        assert drill.snapshot().checklist == []

    @pytest.mark.asyncio
    async def test_start_level_saves(
        self, drill: TimesDrill, memory_store: InMemoryStateStore
    ) -> None:
        result = await drill.start_level(4)

        assert result.phase == Phase.PRACTICING
        assert drill.state.level == 4
        assert memory_store.payload is not None
        assert json.loads(memory_store.payload)["level"] == 4

    @pytest.mark.asyncio
    async def test_restore_saved_session(
        self,
        memory_store: InMemoryStateStore,
        config: TimesDrillConfig,
        clock: FakeClock,
    ) -> None:
        memory_store.payload = PersistedStateDTO(
            level=2,
            checklist={"0x2": True, "1x2": True, "stale": True},
            corrections=[CorrectionEntryDTO(key="2x2", a=2, b=2, got=1)],
            turn_parity=5,
            expires_at=clock() + 60,
        ).model_dump_json()

        async with TimesDrill(memory_store, config=config, clock=clock) as drill:
            assert drill.phase == Phase.PRACTICING
            assert drill.state.checklist == {"0x2": True, "1x2": True, "2x2": False}
            assert drill.state.question == make_fact(2, 2)
            assert drill.state.turn_parity == 5
            assert [c.key for c in drill.state.corrections] == ["2x2"]

    @pytest.mark.asyncio
    async def test_expired_session_not_restored(
        self,
        memory_store: InMemoryStateStore,
        config: TimesDrillConfig,
        clock: FakeClock,
    ) -> None:
        memory_store.payload = PersistedStateDTO(level=2, expires_at=clock() - 1).model_dump_json()

        drill = TimesDrill(memory_store, config=config, clock=clock)
        assert await drill.restore() is False
        assert drill.phase == Phase.CHOOSING_LEVEL
        assert memory_store.payload is None

    @pytest.mark.asyncio
    async def test_reset_all_clears_store(
        self, drill: TimesDrill, memory_store: InMemoryStateStore
    ) -> None:
        await drill.start_level(3)
        await drill.submit_answer(_wrong(drill))

        result = await drill.reset_all()

        assert result is not None
        assert result.phase == Phase.CHOOSING_LEVEL
        assert drill.state.miss_records == []
        assert memory_store.payload is None
        assert await memory_store.load() is None

    @pytest.mark.asyncio
    async def test_context_manager_closes_store(
        self,
        redis_client: RedisClient,
        mock_redis: MockRedis,
        config: TimesDrillConfig,
        clock: FakeClock,
    ) -> None:
        store = RedisStateStore(redis_client, clock=clock)
        async with TimesDrill(store, config=config, clock=clock) as drill:
            await drill.start_level(1)
            assert "mult_game_v11" in mock_redis.data
        assert mock_redis.closed is True

    @pytest.mark.asyncio
    async def test_memory_session_resumes_after_close(
        self,
        memory_store: InMemoryStateStore,
        config: TimesDrillConfig,
        clock: FakeClock,
    ) -> None:
        async with TimesDrill(memory_store, config=config, clock=clock) as drill:
            await drill.start_level(6)

        async with TimesDrill(memory_store, config=config, clock=clock) as resumed:
            assert resumed.phase == Phase.PRACTICING
            assert resumed.state.level == 6


class TestTurns:
    """Tests for answering and acknowledging through the facade."""

    @pytest.mark.asyncio
    async def test_invalid_input_leaves_state(self, drill: TimesDrill) -> None:
        await drill.start_level(3)
        before = drill.state

        with pytest.raises(InvalidInputError):
            await drill.submit_answer("twelve")

        assert drill.state == before

    @pytest.mark.asyncio
    async def test_answer_without_question_ignored(self, drill: TimesDrill) -> None:
        assert await drill.submit_answer("4") is None
        assert drill.phase == Phase.CHOOSING_LEVEL

    @pytest.mark.asyncio
    async def test_miss_ack_waits_for_cooldown(self, drill: TimesDrill, clock: FakeClock) -> None:
        await drill.start_level(3)
        missed = drill.state.question
        await drill.submit_answer(_wrong(drill))

        assert drill.phase == Phase.AWAITING_MISS_ACK
        assert drill.is_ack_armed() is False
        assert await drill.acknowledge_miss() is None
        assert drill.phase == Phase.AWAITING_MISS_ACK

        clock.advance(0.35)
        assert drill.is_ack_armed() is True
        result = await drill.acknowledge_miss()

        assert result is not None
        assert result.question == missed
        assert drill.phase == Phase.PRACTICING

    @pytest.mark.asyncio
    async def test_answer_ignored_while_awaiting_ack(self, drill: TimesDrill) -> None:
        await drill.start_level(3)
        await drill.submit_answer(_wrong(drill))
        before = drill.state

        assert await drill.submit_answer("0") is None
        assert drill.state == before

    @pytest.mark.asyncio
    async def test_level_up_ack_ignored_while_practicing(self, drill: TimesDrill) -> None:
        await drill.start_level(3)
        assert await drill.acknowledge_level_up() is None
        assert drill.is_ack_armed() is False

    @pytest.mark.asyncio
    async def test_each_turn_is_saved(
        self, drill: TimesDrill, memory_store: InMemoryStateStore
    ) -> None:
        await drill.start_level(3)
        await drill.submit_answer(_wrong(drill))

        saved = await memory_store.load()
        assert saved is not None
        assert len(saved.corrections) == 1
        assert len(saved.review_queue) == 6
        assert saved.miss_records[0].wrong_count == 1


class TestSnapshot:
    """Tests for the read-only projection."""

    @pytest.mark.asyncio
    async def test_projection_ordering(
        self,
        memory_store: InMemoryStateStore,
        config: TimesDrillConfig,
        clock: FakeClock,
    ) -> None:
        memory_store.payload = PersistedStateDTO(
            level=3,
            checklist={"3x3": True},
            corrections=[
                CorrectionEntryDTO(key="3x3", a=3, b=3, got=2),
                CorrectionEntryDTO(key="1x3", a=1, b=3),
            ],
            miss_records=[
                MissRecordDTO(key="1x3", a=1, b=3, wrong_count=1, right_count=0),
                MissRecordDTO(key="3x3", a=3, b=3, wrong_count=4, right_count=2),
            ],
            expires_at=clock() + 60,
        ).model_dump_json()

        async with TimesDrill(memory_store, config=config, clock=clock) as drill:
            snapshot = drill.snapshot()

        assert snapshot.phase == Phase.PRACTICING
        assert [(row.other, row.done) for row in snapshot.checklist] == [
            (0, False),
            (1, False),
            (2, False),
            (3, True),
        ]
        assert [c.key for c in snapshot.corrections] == ["1x3", "3x3"]
        assert [m.key for m in snapshot.miss_records] == ["3x3", "1x3"]
        assert snapshot.ack_armed is False

    @pytest.mark.asyncio
    async def test_pending_miss_projection(self, drill: TimesDrill, clock: FakeClock) -> None:
        await drill.start_level(5)
        missed = drill.state.question
        await drill.submit_answer(_wrong(drill))
        clock.advance(1)

        snapshot = drill.snapshot()

        assert snapshot.phase == Phase.AWAITING_MISS_ACK
        assert snapshot.pending_fact == missed
        assert snapshot.ack_armed is True
