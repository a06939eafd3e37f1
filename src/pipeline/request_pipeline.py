"""请求管道 - 校验 → 限流 → 查缓存 → 英文中转或直接互译 → 摘要 → 写缓存."""

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple
from config.languages import supports_direct_translation
from config.settings import settings
from config.logging_config import get_logger
from models.models import (
    CacheStatus,
    CacheWritePolicy,
    SummarizeRequest,
    SummaryResult,
    TranslationMethod,
)
from pipeline.cache_key import build_cache_key
from pipeline.errors import AIServiceError, PipelineError
from pipeline.input_validator import repair_surrogates, validate_input
from pipeline.rate_limiter import RateLimiter
from pipeline.response_cache import ResponseCache
from pipeline.summarization import SummarizationAdapter
from pipeline.translation import ENGLISH, TranslationAdapter

logger = get_logger(__name__)


class PipelineState(str, Enum):
    """管道状态."""

    RECEIVED = "received"
    VALIDATED = "validated"
    RATE_CHECKED = "rate_checked"
    CACHE_CHECKED = "cache_checked"
    NORMALIZED = "normalized"
    SUMMARIZED = "summarized"
    TRANSLATED = "translated"
    CACHED = "cached"
    RESPONDED = "responded"
    FAILED = "failed"


@dataclass
class PipelineResponse:
    """管道输出."""

    result: SummaryResult
    cache_status: str
    translation_method: Optional[str] = None
    # 异步写缓存策略下由调用方在响应发出后执行
    background_write: Optional[Callable[[], Awaitable[None]]] = None
    states: List[PipelineState] = field(default_factory=list)


class RequestPipeline:
    """请求管道."""

    def __init__(
        self,
        summarizer: SummarizationAdapter,
        translator: TranslationAdapter,
        cache: ResponseCache,
        rate_limiter: RateLimiter,
        cache_write_policy: Optional[str] = None,
        max_text_length: Optional[int] = None,
        supported_languages: Optional[Iterable[str]] = None,
        direct_translation: Optional[bool] = None,
    ):
        self.summarizer = summarizer
        self.translator = translator
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.cache_write_policy = cache_write_policy or settings.cache_write_policy
        if self.cache_write_policy not in (CacheWritePolicy.SYNC, CacheWritePolicy.ASYNC):
            raise ValueError(f"Unknown cache write policy: {self.cache_write_policy}")
        self.max_text_length = max_text_length
        self.supported_languages = supported_languages
        self.direct_translation = (
            settings.direct_translation if direct_translation is None else direct_translation
        )

    async def run(self, request: SummarizeRequest, client_id: str) -> PipelineResponse:
        """
        执行完整的请求管道.

        Args:
            request: 请求数据
            client_id: 限流使用的客户端标识

        Returns:
            管道输出，包含结果与缓存状态

        Raises:
            ValidationError: 请求参数不合法
            RateLimitError: 请求频率超限
            AIServiceError: 模型调用失败
        """
        states = [PipelineState.RECEIVED]
        try:
            return await self._run(request, client_id, states)
        except PipelineError as e:
            states.append(PipelineState.FAILED)
            logger.info(f"Pipeline failed at {states[-2].value}: {e.kind.value}")
            raise

    async def _run(
        self, request: SummarizeRequest, client_id: str, states: List[PipelineState]
    ) -> PipelineResponse:
        validate_input(
            request.text,
            request.sourceLang,
            request.targetLang,
            max_text_length=self.max_text_length,
            supported_languages=self.supported_languages,
        )
        text, source_lang, target_lang = (
            repair_surrogates(request.text),
            request.sourceLang,
            request.targetLang,
        )
        states.append(PipelineState.VALIDATED)

        await self.rate_limiter.check_rate_limit(client_id)
        states.append(PipelineState.RATE_CHECKED)

        cache_key = build_cache_key(source_lang, target_lang, text)
        cached = await self.cache.get(cache_key)
        states.append(PipelineState.CACHE_CHECKED)
        if cached is not None:
            logger.info(f"Cache hit for {cache_key}")
            states.append(PipelineState.RESPONDED)
            return PipelineResponse(
                result=cached, cache_status=CacheStatus.HIT, states=states
            )

        result, method = None, None
        if self.direct_translation and supports_direct_translation(source_lang, target_lang):
            result = await self._direct_route(text, source_lang, target_lang, states)
            method = TranslationMethod.DIRECT
        if result is None:
            result, method = await self._english_route(
                text, source_lang, target_lang, states
            )

        background_write = None
        if self.cache.enabled:
            if self.cache_write_policy == CacheWritePolicy.SYNC:
                await self.cache.put(cache_key, result)
            else:
                background_write = functools.partial(self.cache.put, cache_key, result)
        states.append(PipelineState.CACHED)
        states.append(PipelineState.RESPONDED)

        return PipelineResponse(
            result=result,
            cache_status=CacheStatus.MISS,
            translation_method=method,
            background_write=background_write,
            states=states,
        )

    async def _english_route(
        self, text: str, source_lang: str, target_lang: str, states: List[PipelineState]
    ) -> Tuple[SummaryResult, str]:
        """译为英文 → 英文摘要 → 译为目标语言."""
        translated_any = False
        english_text = text
        if source_lang != ENGLISH:
            english_text = await self.translator.translate(text, source_lang, ENGLISH)
            translated_any = True
        states.append(PipelineState.NORMALIZED)

        summary = await self.summarizer.summarize(english_text)
        if not summary or not summary.strip():
            raise AIServiceError("Summarization failed to produce a valid response")
        states.append(PipelineState.SUMMARIZED)

        translated = summary
        if target_lang != ENGLISH:
            translated = await self.translator.translate(summary, ENGLISH, target_lang)
            translated_any = True
        states.append(PipelineState.TRANSLATED)

        result = SummaryResult(
            summary=summary, translated=translated, target_language=target_lang
        )
        method = (
            TranslationMethod.ENGLISH_INTERMEDIATE
            if translated_any
            else TranslationMethod.PASSTHROUGH
        )
        return result, method

    async def _direct_route(
        self, text: str, source_lang: str, target_lang: str, states: List[PipelineState]
    ) -> Optional[SummaryResult]:
        """
        直接互译后在目标语言中摘要.

        Returns:
            结果；直接翻译失败时返回 None，由调用方改走英文中转
        """
        try:
            translated = await self.translator.translate(text, source_lang, target_lang)
        except AIServiceError as e:
            logger.warning(
                f"Direct translation {source_lang} -> {target_lang} failed, "
                f"falling back to English intermediate: {e.message}"
            )
            return None
        states.append(PipelineState.TRANSLATED)

        summary = await self.summarizer.summarize(translated)
        states.append(PipelineState.SUMMARIZED)
        return SummaryResult(
            summary=summary if summary and summary.strip() else translated,
            translated=translated,
            target_language=target_lang,
        )
