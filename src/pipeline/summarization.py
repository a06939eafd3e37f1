"""摘要适配器 - 分块并发摘要，再合并为最终摘要."""

import asyncio
import re
from typing import List, Optional
from config.settings import settings
from config.logging_config import get_logger
from pipeline.llm_client import ModelBackend
from pipeline.prompts import DEFAULT_PROMPTS, PromptLibrary, PromptTemplate
from pipeline.text_chunker import chunk_text, split_sentences

logger = get_logger(__name__)

_PREAMBLE = re.compile(
    r"^\s*(?:here(?:\s+is|'s|\s+are)\b|sure\b|certainly\b|below\s+is\b|"
    r"the\s+following\s+is\b|summary\s*:)",
    re.IGNORECASE,
)
_INLINE_PREAMBLE = re.compile(
    r"^\s*(?:here(?:\s+is|'s|\s+are)|below\s+is)\b[^:\n]{0,80}:\s*", re.IGNORECASE
)
_SUMMARY_LABEL = re.compile(r"^\s*summary\s*:\s*", re.IGNORECASE)


def _is_preamble(block: str) -> bool:
    block = block.strip()
    if not block:
        return False
    return bool(_PREAMBLE.match(block)) or (block.endswith(":") and len(block) < 120)


def clean_summary_preamble(response_text: str) -> str:
    """去掉模型回复开头的引导语（如 "Here is a summary:"）."""
    cleaned = (response_text or "").strip()
    if not cleaned:
        return ""
    paragraphs = re.split(r"\n\s*\n", cleaned, maxsplit=1)
    if len(paragraphs) > 1 and _is_preamble(paragraphs[0]):
        cleaned = paragraphs[1].strip()
    else:
        lines = cleaned.split("\n", 1)
        if len(lines) > 1 and _is_preamble(lines[0]):
            cleaned = lines[1].strip()
    cleaned = _INLINE_PREAMBLE.sub("", cleaned, count=1)
    return _SUMMARY_LABEL.sub("", cleaned, count=1).strip()


def deduplicate_summary(summary_text: str) -> str:
    """按句去重（忽略大小写与句末标点），保留首次出现的句子原文与顺序."""
    unique: List[str] = []
    seen = set()
    for sentence in split_sentences(summary_text or ""):
        normalized = sentence.rstrip(".!?").strip().lower()
        if normalized not in seen:
            seen.add(normalized)
            unique.append(sentence)
    return " ".join(unique)


def naive_summary(text: str, sentence_count: int = 3) -> str:
    """取原文前几句作为兜底摘要."""
    sentences = split_sentences(text)[:sentence_count]
    return " ".join(sentences)


class SummarizationAdapter:
    """摘要适配器."""

    def __init__(
        self,
        backend: ModelBackend,
        prompts: PromptLibrary = DEFAULT_PROMPTS,
        short_input_threshold: Optional[int] = None,
        max_chunk_size: Optional[int] = None,
        recombine_threshold: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        max_output_tokens: Optional[int] = None,
        fallback_sentences: Optional[int] = None,
    ):
        """
        初始化摘要适配器.

        Args:
            backend: 模型后端
            prompts: 提示词模板
            short_input_threshold: 低于该长度的文本直接原样返回
            max_chunk_size: 单次摘要调用的最大字符数
            recombine_threshold: 分块摘要拼接后超过该长度则再做一次合并摘要
            max_concurrency: 同时进行的分块摘要调用上限
            max_output_tokens: 每次调用的最大输出token数
            fallback_sentences: 全部分块失败时兜底摘要取的句子数
        """

        def _pick(value, default):
            return default if value is None else value

        self.backend = backend
        self.prompts = prompts
        self.short_input_threshold = _pick(
            short_input_threshold, settings.summary_short_input_threshold
        )
        self.max_chunk_size = _pick(max_chunk_size, settings.summary_max_chunk_size)
        self.recombine_threshold = _pick(
            recombine_threshold, settings.summary_recombine_threshold
        )
        self.max_concurrency = max(
            1, _pick(max_concurrency, settings.summary_max_concurrency)
        )
        self.max_output_tokens = _pick(max_output_tokens, settings.summary_max_tokens)
        self.fallback_sentences = _pick(
            fallback_sentences, settings.summary_fallback_sentences
        )

    async def summarize(self, text: str) -> str:
        """
        生成摘要.

        Args:
            text: 英文原文

        Returns:
            摘要文本；短文本原样返回；所有分块都失败时返回原文前几句
        """
        if len(text.strip()) < self.short_input_threshold:
            logger.debug("Input below summary threshold, passing through")
            return text

        chunks = chunk_text(text, self.max_chunk_size)
        logger.info(f"Summarizing {len(text)} characters in {len(chunks)} chunks")

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(
            *[
                self._summarize_chunk(chunk, index, semaphore)
                for index, chunk in enumerate(chunks)
            ]
        )
        summaries = [summary for summary in results if summary]

        if not summaries:
            logger.warning("All chunk summaries failed, using naive summary")
            return naive_summary(text, self.fallback_sentences)
        if len(summaries) == 1:
            return summaries[0]

        combined = deduplicate_summary(" ".join(summaries))
        if len(combined) > self.recombine_threshold:
            try:
                condensed = await self._generate(self.prompts.recombine, combined)
            except Exception as e:
                logger.warning(f"Recombine summarization failed: {e}")
                condensed = ""
            if condensed:
                return condensed
        return combined

    async def _summarize_chunk(
        self, chunk: str, index: int, semaphore: asyncio.Semaphore
    ) -> str:
        """单个分块失败时返回空字符串，不影响其他分块."""
        async with semaphore:
            try:
                return await self._generate(self.prompts.summary, chunk)
            except Exception as e:
                logger.warning(f"Summarization failed for chunk {index}: {e}")
                return ""

    async def _generate(self, template: PromptTemplate, text: str) -> str:
        raw = await self.backend.generate(
            template.render(text=text),
            max_tokens=self.max_output_tokens,
            system=self.prompts.summary_system,
        )
        return deduplicate_summary(clean_summary_preamble(raw))
