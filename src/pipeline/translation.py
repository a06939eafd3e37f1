"""翻译适配器 - 带受保护词占位的模型翻译."""

from typing import Dict, Optional
from config.languages import LANGUAGE_FALLBACKS, get_effective_language
from config.logging_config import get_logger
from pipeline.errors import AIServiceError
from pipeline.llm_client import ModelBackend
from pipeline.protected_terms import ProtectedTermGuard

logger = get_logger(__name__)

ENGLISH = "en"


class TranslationAdapter:
    """翻译适配器."""

    def __init__(
        self,
        backend: ModelBackend,
        guard: Optional[ProtectedTermGuard] = None,
        language_fallbacks: Optional[Dict[str, str]] = None,
    ):
        self.backend = backend
        self.guard = guard or ProtectedTermGuard()
        self.language_fallbacks = (
            LANGUAGE_FALLBACKS if language_fallbacks is None else language_fallbacks
        )

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        翻译文本，受保护词原样保留.

        Args:
            text: 待翻译文本
            source_lang: 源语言代码
            target_lang: 目标语言代码

        Returns:
            翻译后的文本；源语言与目标语言相同时原样返回

        Raises:
            AIServiceError: 模型调用失败或没有返回可用结果
        """
        if source_lang == target_lang or not text:
            return text

        protected = self.guard.protect(text)
        effective_source = get_effective_language(source_lang, self.language_fallbacks)
        effective_target = get_effective_language(target_lang, self.language_fallbacks)
        logger.info(
            f"Translating {len(text)} characters {effective_source} -> {effective_target} "
            f"({len(protected.mapping)} protected terms)"
        )

        try:
            translated = await self.backend.translate(
                protected.text, effective_source, effective_target
            )
        except AIServiceError:
            raise
        except Exception as e:
            logger.error(f"Translation {source_lang} -> {target_lang} failed: {e}")
            raise AIServiceError(
                "Translation failed to produce a valid response"
            ) from e

        if not translated or not translated.strip():
            raise AIServiceError("Translation failed to produce a valid response")
        return self.guard.restore(translated.strip(), protected.mapping)
