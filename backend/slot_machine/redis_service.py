"""Redis storage for per-player games and per-player locks."""
import json
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis

from slot_machine.config import settings
from slot_machine.errors import ErrorCode, GameError


@dataclass
class LockMetrics:
    """Timing of lock acquisition, for logs and telemetry."""

    acquire_ms: float


class RedisService:
    """Redis client holding each player's game and guarding it with a lock."""

    # Key prefixes
    LOCK_PREFIX = "lock:player:"
    GAME_PREFIX = "game:player:"

    # TTLs in seconds
    LOCK_TTL = settings.lock_ttl_seconds
    GAME_TTL = settings.session_ttl_seconds

    # Compare-and-delete so one holder never releases another holder's lock
    RELEASE_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(self, redis_url: str | None = None):
        self._url = redis_url or settings.redis_url
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.from_url(self._url, decode_responses=True)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client, raise if not connected."""
        if self._client is None:
            raise RuntimeError("Redis not connected")
        return self._client

    async def acquire_player_lock(self, player_id: str) -> str | None:
        """
        Try to take the player's lock.

        Returns the lock token on success, None if someone else holds it.
        """
        key = f"{self.LOCK_PREFIX}{player_id}"
        token = str(uuid.uuid4())
        acquired = await self.client.set(key, token, nx=True, ex=self.LOCK_TTL)
        return token if acquired is True else None

    async def release_player_lock(self, player_id: str, token: str) -> bool:
        """Release the lock if token still owns it. Returns True if released."""
        key = f"{self.LOCK_PREFIX}{player_id}"
        result = await self.client.eval(self.RELEASE_LOCK_SCRIPT, 1, key, token)
        return result == 1

    @asynccontextmanager
    async def player_lock(self, player_id: str):
        """
        Hold the player's lock for the duration of the block.

        Raises ROUND_IN_PROGRESS if the lock is taken.
        """
        t0 = time.monotonic()
        token = await self.acquire_player_lock(player_id)
        if token is None:
            raise GameError(
                ErrorCode.ROUND_IN_PROGRESS,
                "Another request is in progress for this player.",
            )
        metrics = LockMetrics(acquire_ms=(time.monotonic() - t0) * 1000)
        try:
            yield metrics
        finally:
            await self.release_player_lock(player_id, token)

    async def load_game(self, player_id: str) -> dict[str, Any] | None:
        """Load the player's game in portable form, or None if there is none."""
        key = f"{self.GAME_PREFIX}{player_id}"
        cached = await self.client.get(key)
        if cached is None:
            return None
        return json.loads(cached)

    async def save_game(self, player_id: str, game: dict[str, Any]) -> None:
        """Store the player's game in portable form, refreshing its TTL."""
        key = f"{self.GAME_PREFIX}{player_id}"
        await self.client.setex(key, self.GAME_TTL, json.dumps(game))

    async def delete_game(self, player_id: str) -> None:
        """Forget the player's stored game."""
        key = f"{self.GAME_PREFIX}{player_id}"
        await self.client.delete(key)


# Global instance
redis_service = RedisService()
