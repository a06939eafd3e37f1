"""响应缓存 - 以缓存键读写最终结果."""

from typing import Optional
from pydantic import ValidationError as PydanticValidationError
from config.settings import settings
from config.logging_config import get_logger
from models.models import SummaryResult
from pipeline.kv_store import KeyValueStore

logger = get_logger(__name__)


class ResponseCache:
    """响应缓存，store 为 None 时视为未启用（始终未命中）."""

    def __init__(self, store: Optional[KeyValueStore], ttl: Optional[int] = None):
        self.store = store
        self.ttl = ttl or settings.cache_ttl

    @property
    def enabled(self) -> bool:
        return self.store is not None

    async def get(self, key: str) -> Optional[SummaryResult]:
        """读取缓存结果，读取失败或内容损坏都按未命中处理."""
        if self.store is None:
            return None
        try:
            cached = await self.store.get(key)
        except Exception as e:
            logger.warning(f"Cache lookup failed for {key}: {e}")
            return None
        if not cached:
            return None
        try:
            return SummaryResult.model_validate_json(cached)
        except PydanticValidationError as e:
            logger.warning(f"Discarding corrupt cache entry {key}: {e}")
            return None

    async def put(self, key: str, result: SummaryResult) -> None:
        """写入缓存，失败只记录日志."""
        if self.store is None:
            return
        try:
            await self.store.put(key, result.model_dump_json(), ttl=self.ttl)
            logger.debug(f"Cached result under {key}")
        except Exception as e:
            logger.error(f"Cache write failed for {key}: {e}")
