"""键值存储 - 响应缓存与动态配置共用的存储抽象."""

import time
from collections import OrderedDict
from typing import Callable, Optional, Protocol, Tuple
import redis.asyncio as aioredis
from config.logging_config import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """支持TTL的键值存储."""

    async def get(self, key: str) -> Optional[str]: ...

    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None: ...


class InMemoryKeyValueStore:
    """进程内键值存储，过期条目在读取时惰性清除."""

    def __init__(
        self,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self._clock = clock
        self._data: "OrderedDict[str, Tuple[str, Optional[float]]]" = OrderedDict()

    async def get(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._data[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (value, expires_at)
        self._data.move_to_end(key)
        # 超出容量时淘汰最早写入的条目
        while len(self._data) > self.max_entries:
            self._data.popitem(last=False)

    def __len__(self) -> int:
        return len(self._data)


class RedisKeyValueStore:
    """Redis键值存储，过期由Redis自身处理."""

    def __init__(self, client: aioredis.Redis, prefix: str = ""):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = "") -> "RedisKeyValueStore":
        client = aioredis.from_url(redis_url, decode_responses=True)
        logger.info("Redis key-value store configured")
        return cls(client, prefix=prefix)

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(f"{self.prefix}{key}")

    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        if ttl:
            await self.client.set(f"{self.prefix}{key}", value, ex=ttl)
        else:
            await self.client.set(f"{self.prefix}{key}", value)

    async def close(self):
        await self.client.aclose()
