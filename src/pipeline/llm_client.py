"""模型后端 - 基于 AsyncOpenAI 的对话补全调用."""

import asyncio
from typing import List, Optional, Protocol
from openai import AsyncOpenAI
from config.settings import settings
from config.logging_config import get_logger
from config.languages import get_language_name
from pipeline.errors import AIServiceError
from pipeline.prompts import DEFAULT_PROMPTS, PromptLibrary

logger = get_logger(__name__)

AI_SERVICE_FAILURE_MESSAGE = "The AI service failed to produce a response"


class ModelBackend(Protocol):
    """管道使用的文本生成与翻译能力."""

    async def generate(
        self, prompt: str, max_tokens: int, system: Optional[str] = None
    ) -> str: ...

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str: ...


class OpenAIBackend:
    """兼容 OpenAI 接口的对话补全后端，主模型失败时依次尝试备用模型."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        summary_model: Optional[str] = None,
        translation_model: Optional[str] = None,
        fallback_models: Optional[List[str]] = None,
        request_timeout: Optional[float] = None,
        translation_max_tokens: Optional[int] = None,
        prompts: PromptLibrary = DEFAULT_PROMPTS,
    ):
        self.request_timeout = request_timeout or settings.request_timeout
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=self.request_timeout,
        )
        self.summary_model = summary_model or settings.summary_model
        self.translation_model = translation_model or settings.translation_model
        self.fallback_models = list(
            settings.fallback_models if fallback_models is None else fallback_models
        )
        self.translation_max_tokens = (
            translation_max_tokens or settings.translation_max_tokens
        )
        self.prompts = prompts

    async def generate(
        self, prompt: str, max_tokens: int, system: Optional[str] = None
    ) -> str:
        """根据渲染好的提示词生成文本."""
        messages = [
            {"role": "system", "content": system or self.prompts.summary_system},
            {"role": "user", "content": prompt},
        ]
        return await self._complete(self.summary_model, messages, max_tokens)

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """在两种语言代码之间翻译文本."""
        prompt = self.prompts.translation.render(
            text=text,
            source_language=get_language_name(source_lang),
            target_language=get_language_name(target_lang),
        )
        messages = [
            {"role": "system", "content": self.prompts.translation_system},
            {"role": "user", "content": prompt},
        ]
        return await self._complete(
            self.translation_model, messages, self.translation_max_tokens
        )

    async def _complete(self, primary: str, messages: List[dict], max_tokens: int) -> str:
        """
        先调用主模型，再按顺序尝试备用模型.

        Raises:
            AIServiceError: 所有模型都失败；上游错误详情只写入日志
        """
        models = [primary] + [m for m in self.fallback_models if m != primary]
        last_error: Optional[BaseException] = None
        for model in models:
            try:
                response = await asyncio.wait_for(
                    self.client.chat.completions.create(
                        model=model, messages=messages, max_tokens=max_tokens
                    ),
                    timeout=self.request_timeout,
                )
                content = (response.choices[0].message.content or "").strip()
                if content:
                    return content
                logger.warning(f"Model {model} returned an empty response")
            except asyncio.TimeoutError as e:
                logger.warning(f"Model {model} timed out after {self.request_timeout}s")
                last_error = e
            except Exception as e:
                logger.warning(f"Model {model} failed: {e}")
                last_error = e
        logger.error(f"All models failed for {primary}, last error: {last_error!r}")
        raise AIServiceError(AI_SERVICE_FAILURE_MESSAGE, model=primary)

    @property
    def is_configured(self) -> bool:
        return bool(getattr(self.client, "api_key", None))
