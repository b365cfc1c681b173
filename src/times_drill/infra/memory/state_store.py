"""In-memory session store for times_drill.

Keeps the serialized record in process memory. Used as the default
store and in tests; applies the same expiry rules as RedisStateStore.
"""

import time
from collections.abc import Callable

from times_drill.exceptions import CorruptedPersistedStateError
from times_drill.infra.serialization import decode_state, encode_state
from times_drill.logging import get_logger
from times_drill.models.state import PersistedStateDTO, SchedulerStateDTO

__all__ = [
    "InMemoryStateStore",
]

logger = get_logger(__name__)


class InMemoryStateStore:
    """Session store backed by a single in-memory JSON payload."""

    def __init__(
        self,
        ttl_seconds: int = 86400,  # 24 hours
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize store.

        Args:
            ttl_seconds: Record lifetime in seconds (default: 24 hours)
            clock: Time source returning epoch seconds
        """
        self._ttl = ttl_seconds
        self._clock = clock
        self._payload: str | None = None

    @property
    def payload(self) -> str | None:
        """Raw stored JSON, if any."""
        return self._payload

    @payload.setter
    def payload(self, value: str | None) -> None:
        self._payload = value

    async def load(self) -> PersistedStateDTO | None:
        if self._payload is None:
            return None
        try:
            return decode_state(self._payload, self._clock())
        except CorruptedPersistedStateError as e:
            logger.warning("state_discarded", store="memory", reason=str(e))
            self._payload = None
            return None

    async def save(self, state: SchedulerStateDTO) -> PersistedStateDTO:
        record, self._payload = encode_state(state, self._clock(), self._ttl)
        return record

    async def clear(self) -> None:
        self._payload = None

    async def close(self) -> None:
        """Nothing to release; the payload survives for the next session."""
