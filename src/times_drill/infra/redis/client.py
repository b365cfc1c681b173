"""Redis client for times_drill.

Redis is optional. Without a configured URL, or when the server cannot
be reached, every command degrades to a miss and sessions simply do not
survive a restart.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from times_drill.config import RedisSettings
from times_drill.logging import get_logger
from times_drill.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from redis.asyncio import Redis

__all__ = [
    "RedisClient",
]

logger = get_logger(__name__)

get_async_redis = lazy_import("redis.asyncio", "Redis", install_hint="pip install redis")

T = TypeVar("T")


class RedisClient:
    """Fail-soft async Redis connection.

    Reads return None and writes return False whenever Redis is disabled,
    disconnected, or a command raises.

    Example:
        async with RedisClient(settings) as client:
            await client.set("mult_game_v11", payload, ex=86400)
            payload = await client.get("mult_game_v11")
    """

    def __init__(self, settings: RedisSettings) -> None:
        self._settings = settings
        self._redis: "Redis | None" = None

    @property
    def is_enabled(self) -> bool:
        """Redis is switched on and has a URL."""
        return self._settings.enabled and self._settings.url is not None

    @property
    def is_connected(self) -> bool:
        return self._redis is not None

    async def connect(self) -> bool:
        """Open the connection and verify it with PING.

        Returns:
            True if connected, False if disabled or unreachable
        """
        if self._redis is not None:
            return True
        if not self.is_enabled:
            logger.info("redis_disabled", reason="no url configured")
            return False

        redis_cls: Any = get_async_redis()
        try:
            connection = redis_cls.from_url(self._settings.url, decode_responses=True)
            await connection.ping()
        except Exception as e:
            logger.warning(
                "redis_connection_failed",
                error=str(e),
                reason="saved sessions disabled",
            )
            return False

        self._redis = connection
        logger.info("connected_to_redis", url=self._settings.url)
        return True

    async def disconnect(self) -> None:
        if self._redis is None:
            return
        connection, self._redis = self._redis, None
        await connection.aclose()
        logger.info("disconnected_from_redis")

    async def _run(
        self,
        command: str,
        key: str,
        call: Callable[["Redis"], Awaitable[T]],
        default: T,
    ) -> T:
        if self._redis is None:
            return default
        try:
            return await call(self._redis)
        except Exception as e:
            logger.debug("redis_command_failed", command=command, key=key, error=str(e))
            return default

    async def get(self, key: str) -> str | None:
        """Read a string value, None if missing or unavailable."""
        return await self._run("get", key, lambda r: r.get(key), None)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        """Write a string value with an optional expiry in seconds."""

        async def _set(r: "Redis") -> bool:
            await r.set(key, value, ex=ex)
            return True

        return await self._run("set", key, _set, False)

    async def delete(self, key: str) -> bool:
        """Remove a key; True if the command was sent."""

        async def _delete(r: "Redis") -> bool:
            await r.delete(key)
            return True

        return await self._run("delete", key, _delete, False)

    async def __aenter__(self) -> "RedisClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
