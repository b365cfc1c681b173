"""Redis-backed session store for times_drill.

The record is stored as JSON under a single key with a Redis expiry
matching the session TTL. The expiry timestamp is also embedded in the
payload so that a record outliving its key TTL is still rejected.
"""

import time
from collections.abc import Callable

from times_drill.config import TimesDrillConfig
from times_drill.exceptions import CorruptedPersistedStateError
from times_drill.infra.redis.client import RedisClient
from times_drill.infra.serialization import decode_state, encode_state
from times_drill.logging import get_logger
from times_drill.models.state import PersistedStateDTO, SchedulerStateDTO

__all__ = [
    "RedisStateStore",
]

logger = get_logger(__name__)


class RedisStateStore:
    """Session store backed by Redis.

    Falls back to "nothing saved" when Redis is unavailable.

    Example:
        store = await RedisStateStore.from_config(TimesDrillConfig())
        async with TimesDrill(store=store) as drill:
            await drill.start_level(3)
    """

    def __init__(
        self,
        redis_client: RedisClient,
        key: str = "mult_game_v11",
        ttl_seconds: int = 86400,  # 24 hours
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize store.

        Args:
            redis_client: Redis client instance
            key: Redis key holding the session record
            ttl_seconds: Record lifetime in seconds (default: 24 hours)
            clock: Time source returning epoch seconds
        """
        self._redis = redis_client
        self._key = key
        self._ttl = ttl_seconds
        self._clock = clock

    @classmethod
    async def from_config(cls, config: TimesDrillConfig) -> "RedisStateStore":
        """Create a store and connect its Redis client."""
        client = RedisClient(config.redis)
        await client.connect()
        return cls(
            client,
            key=config.drill.storage_key,
            ttl_seconds=config.drill.state_ttl_seconds,
        )

    async def close(self) -> None:
        """Disconnect the underlying Redis client."""
        await self._redis.disconnect()

    async def load(self) -> PersistedStateDTO | None:
        if not self._redis.is_connected:
            return None

        payload = await self._redis.get(self._key)
        if not payload:
            return None

        try:
            return decode_state(payload, self._clock())
        except CorruptedPersistedStateError as e:
            logger.warning("state_discarded", store="redis", key=self._key, reason=str(e))
            await self._redis.delete(self._key)
            return None

    async def save(self, state: SchedulerStateDTO) -> PersistedStateDTO:
        record, payload = encode_state(state, self._clock(), self._ttl)
        if not await self._redis.set(self._key, payload, ex=self._ttl):
            logger.debug("state_not_saved", key=self._key, reason="redis unavailable")
        return record

    async def clear(self) -> None:
        await self._redis.delete(self._key)
