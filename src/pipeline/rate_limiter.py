"""限流器 - 按客户端IP的滑动窗口请求计数."""

import time
import uuid
from collections import defaultdict, deque
from typing import Callable, Mapping, Optional, Protocol
import redis.asyncio as aioredis
from config.settings import settings
from config.logging_config import get_logger
from pipeline.errors import RateLimitError

logger = get_logger(__name__)

CLIENT_IP_HEADER = "CF-Connecting-IP"
FORWARDED_FOR_HEADER = "X-Forwarded-For"
DEFAULT_CLIENT_IP = "127.0.0.1"


class RateLimitStore(Protocol):
    """窗口内请求时间戳的存储."""

    async def hit(self, client_id: str, now: float, window: float, limit: int) -> bool:
        """清理窗口外的记录；未达上限时记录本次请求并返回 True."""
        ...


class InMemoryRateLimitStore:
    """进程内存储，进程重启后清零."""

    def __init__(self):
        self.calls = defaultdict(deque)  # client -> deque[timestamps]
        self._last_sweep = 0.0

    async def hit(self, client_id: str, now: float, window: float, limit: int) -> bool:
        if now - self._last_sweep >= window:
            self._sweep(now, window)
        dq = self.calls[client_id]
        while dq and dq[0] <= now - window:
            dq.popleft()
        if len(dq) >= limit:
            return False
        dq.append(now)
        return True

    def _sweep(self, now: float, window: float) -> None:
        # 最近一次请求已在窗口外的客户端整体移除
        stale = [
            client
            for client, dq in self.calls.items()
            if not dq or dq[-1] <= now - window
        ]
        for client in stale:
            del self.calls[client]
        self._last_sweep = now

    def count(self, client_id: str) -> int:
        return len(self.calls.get(client_id, ()))


# 清理窗口外记录、计数与写入在同一个脚本中原子执行
_SLIDING_WINDOW_SCRIPT = """
redis.call('ZREMRANGEBYSCORE', KEYS[1], 0, ARGV[1])
if redis.call('ZCARD', KEYS[1]) >= tonumber(ARGV[3]) then
    return 0
end
redis.call('ZADD', KEYS[1], ARGV[2], ARGV[4])
redis.call('EXPIRE', KEYS[1], ARGV[5])
return 1
"""


class RedisRateLimitStore:
    """Redis有序集合存储，多实例部署共享同一窗口."""

    def __init__(self, client: aioredis.Redis, prefix: str = "ratelimit:"):
        self.client = client
        self.prefix = prefix
        self._script = client.register_script(_SLIDING_WINDOW_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisRateLimitStore":
        return cls(aioredis.from_url(redis_url, decode_responses=True))

    async def hit(self, client_id: str, now: float, window: float, limit: int) -> bool:
        allowed = await self._script(
            keys=[f"{self.prefix}{client_id}"],
            args=[
                now - window,
                now,
                limit,
                f"{now}:{uuid.uuid4().hex[:8]}",
                int(window) + 1,
            ],
        )
        return bool(int(allowed))

    async def close(self):
        await self.client.aclose()


class RateLimiter:
    """滑动窗口限流器."""

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        limit: Optional[int] = None,
        window_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store or InMemoryRateLimitStore()
        self.limit = limit or settings.rate_limit_per_ip
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._clock = clock

    async def check_rate_limit(self, client_id: str) -> None:
        """
        检查并记录一次请求.

        Raises:
            RateLimitError: 窗口内请求数已达上限
        """
        allowed = await self.store.hit(
            client_id, self._clock(), self.window_seconds, self.limit
        )
        if not allowed:
            logger.warning(f"Rate limit exceeded for client {client_id}")
            raise RateLimitError(
                "Rate limit exceeded. Please try again later.",
                retry_after=int(self.window_seconds),
            )


def get_client_ip(headers: Mapping[str, str]) -> str:
    """从边缘节点注入的请求头取客户端IP，缺失时使用回环地址."""
    client_ip = headers.get(CLIENT_IP_HEADER)
    if client_ip:
        return client_ip.strip()
    forwarded = headers.get(FORWARDED_FOR_HEADER)
    if forwarded and forwarded.split(",")[0].strip():
        return forwarded.split(",")[0].strip()
    return DEFAULT_CLIENT_IP
