"""TimesDrill orchestrator: the invocation surface for a drill session.

This module wires the pure progression transitions to a session
store and exposes the operations and read-only projections a
presentation layer needs.
"""

import asyncio
import random
import time
from collections.abc import Callable
from typing import Any

from times_drill.config import TimesDrillConfig
from times_drill.exceptions import InvalidInputError, InvariantViolationError
from times_drill.infra.memory.state_store import InMemoryStateStore
from times_drill.interfaces.storage import StateStoreInterface
from times_drill.logging import get_logger
from times_drill.models.state import DrillSnapshotDTO, Phase, SchedulerStateDTO, TurnResult
from times_drill.services import progression
from times_drill.services.corrections import sorted_corrections, top_miss_records
from times_drill.services.curriculum import checklist_rows
from times_drill.services.question_selector import QuestionSelector

__all__ = ["TimesDrill"]

logger = get_logger(__name__)

_ACK_PHASES = frozenset({Phase.AWAITING_MISS_ACK, Phase.AWAITING_LEVEL_UP, Phase.COMPLETED})


class TimesDrill:
    """Adaptive multiplication drill session.

    Owns the current SchedulerStateDTO, applies one transition at a time
    and saves the result after every mutation.

    Example:
        async with TimesDrill() as drill:
            await drill.start_level(3)
            result = await drill.submit_answer("6")
            print(drill.snapshot().question)
    """

    def __init__(
        self,
        store: StateStoreInterface | None = None,
        *,
        config: TimesDrillConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize a drill session.

        Args:
            store: Session store (default: in-memory store)
            config: Configuration (default: loaded from environment/.env)
            rng: Random source for question selection
            clock: Time source returning epoch seconds
        """
        self._config = config or TimesDrillConfig()
        self._clock = clock
        self._store: StateStoreInterface = store or InMemoryStateStore(
            ttl_seconds=self._config.drill.state_ttl_seconds,
            clock=clock,
        )
        self._selector = QuestionSelector(rng)
        self._state = SchedulerStateDTO()
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "TimesDrill":
        """Async context manager entry - restores any saved session."""
        await self.restore()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - closes the store."""
        await self._store.close()

    @property
    def state(self) -> SchedulerStateDTO:
        """Current scheduler state (immutable)."""
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    # === OPERATIONS ===

    async def restore(self) -> bool:
        """Resume the saved session, if a valid one exists.

        Returns:
            True if a session was restored
        """
        async with self._lock:
            saved = await self._store.load()
            if saved is None:
                self._state = SchedulerStateDTO()
                return False
            self._state, _ = progression.resume(saved, self._selector)
            await self._persist()
            return True

    async def start_level(self, level: int) -> TurnResult:
        """Start a fresh session at a level (clamped to the valid range)."""
        async with self._lock:
            self._state, result = progression.start_level(level, self._selector)
            await self._persist()
            return result

    async def submit_answer(self, raw_input: str) -> TurnResult | None:
        """Submit an answer to the current question.

        Returns:
            Turn result, or None if no question is being asked

        Raises:
            InvalidInputError: If the input is empty or not a number
        """
        async with self._lock:
            try:
                self._state, result = progression.submit_answer(
                    self._state,
                    raw_input,
                    self._selector,
                    self._clock(),
                    self._config.drill,
                )
            except InvalidInputError:
                logger.debug("invalid_answer", raw_input=raw_input)
                raise
            except InvariantViolationError as e:
                logger.warning("action_ignored", action="submit_answer", reason=str(e))
                return None
            await self._persist()
            return result

    async def acknowledge_miss(self) -> TurnResult | None:
        """Dismiss miss feedback and re-ask the missed fact.

        Returns:
            Turn result, or None if ignored (wrong phase or cooling down)
        """
        async with self._lock:
            try:
                self._state, result = progression.acknowledge_miss(self._state, self._clock())
            except InvariantViolationError as e:
                logger.debug("action_ignored", action="acknowledge_miss", reason=str(e))
                return None
            await self._persist()
            return result

    async def acknowledge_level_up(self) -> TurnResult | None:
        """Move on to the next level after a level-up.

        Returns:
            Turn result, or None if ignored (wrong phase or cooling down)
        """
        async with self._lock:
            try:
                self._state, result = progression.acknowledge_level_up(
                    self._state,
                    self._selector,
                    self._clock(),
                )
            except InvariantViolationError as e:
                logger.debug("action_ignored", action="acknowledge_level_up", reason=str(e))
                return None
            await self._persist()
            return result

    async def reset_all(self) -> TurnResult | None:
        """Clear the saved session and return to level selection.

        Returns:
            Turn result, or None if ignored (completion cool-down running)
        """
        async with self._lock:
            try:
                self._state, result = progression.reset(self._state, self._clock())
            except InvariantViolationError as e:
                logger.debug("action_ignored", action="reset_all", reason=str(e))
                return None
            await self._store.clear()
            return result

    # === PROJECTIONS ===

    def is_ack_armed(self) -> bool:
        """Check whether the pending acknowledgment would be accepted now."""
        if self._state.phase not in _ACK_PHASES:
            return False
        return progression.is_armed(self._state, self._clock())

    def snapshot(self) -> DrillSnapshotDTO:
        """Read-only projection of the session for rendering."""
        state = self._state
        rows = checklist_rows(state.checklist, state.level) if state.level is not None else []
        return DrillSnapshotDTO(
            phase=state.phase,
            level=state.level,
            question=state.question,
            checklist=rows,
            corrections=sorted_corrections(state.corrections),
            miss_records=top_miss_records(state.miss_records),
            pending_fact=state.pending_fact,
            next_level=state.next_level,
            ack_armed=self.is_ack_armed(),
            notice=state.notice,
        )

    async def _persist(self) -> None:
        if self._state.level is None:
            await self._store.clear()
        else:
            await self._store.save(self._state)
