"""服务容器 - 在应用启动时组装管道的各个组件."""

from dataclasses import dataclass, field
from typing import Optional
from fastapi import Request
from config.settings import settings
from config.logging_config import get_logger
from config.protected_words import get_all_protected_words
from pipeline.dynamic_config import DynamicConfig, DynamicConfigLoader
from pipeline.kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from pipeline.llm_client import ModelBackend, OpenAIBackend
from pipeline.protected_terms import ProtectedTermGuard
from pipeline.rate_limiter import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)
from pipeline.request_pipeline import RequestPipeline
from pipeline.response_cache import ResponseCache
from pipeline.summarization import SummarizationAdapter
from pipeline.translation import TranslationAdapter

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """应用运行期间共享的组件."""

    pipeline: RequestPipeline
    guard: ProtectedTermGuard
    backend: Optional[ModelBackend]
    cache_store: Optional[KeyValueStore] = None
    config_store: Optional[KeyValueStore] = None
    rate_limit_store: Optional[RateLimitStore] = None
    dynamic_config: DynamicConfig = field(default_factory=DynamicConfig)

    async def close(self):
        for store in (self.cache_store, self.config_store, self.rate_limit_store):
            close = getattr(store, "close", None)
            if close is not None:
                try:
                    await close()
                except Exception as e:
                    logger.warning(f"Failed to close store: {e}")


def build_cache_store() -> Optional[KeyValueStore]:
    """根据配置创建响应缓存存储，'none' 表示不启用缓存."""
    backend = settings.cache_backend.lower()
    if backend == "none":
        return None
    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("CACHE_BACKEND=redis requires REDIS_URL")
        return RedisKeyValueStore.from_url(settings.redis_url, prefix="edgescribe:")
    if backend != "memory":
        raise ValueError(f"Unknown cache backend: {settings.cache_backend}")
    return InMemoryKeyValueStore(max_entries=settings.cache_max_entries)


def build_rate_limit_store() -> RateLimitStore:
    backend = settings.rate_limit_backend.lower()
    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("RATE_LIMIT_BACKEND=redis requires REDIS_URL")
        return RedisRateLimitStore.from_url(settings.redis_url)
    if backend != "memory":
        raise ValueError(f"Unknown rate limit backend: {settings.rate_limit_backend}")
    return InMemoryRateLimitStore()


def build_config_store() -> Optional[KeyValueStore]:
    if not settings.config_redis_url:
        return None
    return RedisKeyValueStore.from_url(settings.config_redis_url)


async def build_container(
    backend: Optional[ModelBackend] = None,
    cache_store: Optional[KeyValueStore] = None,
    config_store: Optional[KeyValueStore] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
    use_default_stores: bool = True,
) -> ServiceContainer:
    """
    组装服务容器.

    Args:
        backend: 模型后端，默认使用 OpenAIBackend
        cache_store: 响应缓存存储
        config_store: 动态配置存储
        rate_limit_store: 限流存储
        use_default_stores: 未传入的存储是否按配置创建

    Returns:
        组装好的服务容器
    """
    if use_default_stores:
        cache_store = cache_store if cache_store is not None else build_cache_store()
        config_store = config_store if config_store is not None else build_config_store()
        rate_limit_store = rate_limit_store or build_rate_limit_store()

    dynamic_config = await DynamicConfigLoader(config_store).load()
    overrides = dynamic_config.overrides

    guard = ProtectedTermGuard(get_all_protected_words())
    guard.add_terms(dynamic_config.protected_words)

    backend = backend or OpenAIBackend()
    pipeline = RequestPipeline(
        summarizer=SummarizationAdapter(backend),
        translator=TranslationAdapter(backend, guard),
        cache=ResponseCache(cache_store, ttl=overrides.get("cache_ttl")),
        rate_limiter=RateLimiter(
            rate_limit_store, limit=overrides.get("rate_limit_per_ip")
        ),
        max_text_length=overrides.get("max_text_length"),
    )
    logger.info(
        f"Service container ready: cache={'on' if cache_store is not None else 'off'}, "
        f"protected_words={len(guard)}"
    )
    return ServiceContainer(
        pipeline=pipeline,
        guard=guard,
        backend=backend,
        cache_store=cache_store,
        config_store=config_store,
        rate_limit_store=pipeline.rate_limiter.store,
        dynamic_config=dynamic_config,
    )


def get_container(request: Request) -> ServiceContainer:
    """FastAPI 依赖：取得启动时创建的服务容器."""
    return request.app.state.container
