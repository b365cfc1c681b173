"""Redis infrastructure for times_drill (optional)."""

from times_drill.infra.redis.client import RedisClient
from times_drill.infra.redis.state_store import RedisStateStore

__all__ = ["RedisClient", "RedisStateStore"]
