"""times_drill - Adaptive multiplication fact drilling.

This package provides:
- A level curriculum of multiplication facts (levels 0-12)
- Correction tracking that requires consecutive correct answers after a miss
- A delayed-reinforcement review queue with visible and hidden repeats
- Question selection that never asks the same fact twice in a row
- A level progression state machine with persisted, expiring sessions

Example usage:
    from times_drill import Phase, TimesDrill

    async with TimesDrill() as drill:
        await drill.start_level(3)
        result = await drill.submit_answer("6")
        if drill.phase is Phase.AWAITING_MISS_ACK:
            await drill.acknowledge_miss()
"""

__version__ = "0.1.0"

from times_drill.config import TimesDrillConfig
from times_drill.exceptions import (
    CorruptedPersistedStateError,
    InvalidInputError,
    InvariantViolationError,
    TimesDrillError,
)
from times_drill.infra.memory.state_store import InMemoryStateStore
from times_drill.infra.redis.state_store import RedisStateStore
from times_drill.interfaces.storage import StateStoreInterface
from times_drill.models.fact import FactDTO, make_fact
from times_drill.models.state import DrillSnapshotDTO, FeedbackCue, Phase, TurnResult
from times_drill.orchestrator import TimesDrill

__all__ = [  # noqa: RUF022
    # Orchestrator
    "TimesDrill",
    "TimesDrillConfig",
    # Stores
    "InMemoryStateStore",
    "RedisStateStore",
    "StateStoreInterface",
    # Models
    "DrillSnapshotDTO",
    "FactDTO",
    "FeedbackCue",
    "Phase",
    "TurnResult",
    "make_fact",
    # Errors
    "TimesDrillError",
    "InvalidInputError",
    "CorruptedPersistedStateError",
    "InvariantViolationError",
]
