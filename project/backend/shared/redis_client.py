"""
Redis client.

Namespaced string and JSON values for the JWT cache and scene batch
snapshots.
"""

import json
from typing import Any, Optional

import redis.asyncio as aioredis

from shared.config import settings
from shared.errors import ConfigError, PipelineError

KEY_NAMESPACE = "smartreel"


class RedisClient:
    """Async Redis client. The pool connects on first command."""

    def __init__(self, url: Optional[str] = None, namespace: str = KEY_NAMESPACE):
        try:
            self.client: aioredis.Redis = aioredis.from_url(
                url or settings.redis_url,
                decode_responses=True
            )
        except Exception as e:
            raise ConfigError(f"Invalid REDIS_URL: {str(e)}") from e
        self.namespace = namespace

    def key(self, name: str) -> str:
        return f"{self.namespace}:{name}"

    async def set(self, name: str, value: str, ex: Optional[int] = None) -> None:
        """Store a string, optionally expiring after `ex` seconds."""
        try:
            await self.client.set(self.key(name), value, ex=ex)
        except aioredis.RedisError as e:
            raise PipelineError(f"Redis write failed for {name}: {str(e)}") from e

    async def get(self, name: str) -> Optional[str]:
        try:
            return await self.client.get(self.key(name))
        except aioredis.RedisError as e:
            raise PipelineError(f"Redis read failed for {name}: {str(e)}") from e

    async def set_json(self, name: str, data: Any, ttl: Optional[int] = None) -> None:
        await self.set(name, json.dumps(data, default=str), ex=ttl)

    async def get_json(self, name: str) -> Optional[Any]:
        """
        Read a JSON value.

        Returns:
            Decoded value, or None if the key is absent or expired

        Raises:
            PipelineError: If Redis fails or the stored value is not JSON
        """
        raw = await self.get(name)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise PipelineError(f"Stored value for {name} is not valid JSON") from e

    async def health_check(self) -> bool:
        try:
            return bool(await self.client.ping())
        except aioredis.RedisError:
            return False

    async def close(self) -> None:
        await self.client.aclose()


redis_client = RedisClient()
