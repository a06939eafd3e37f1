"""受保护词管理 - 翻译前用占位符替换专有名词，翻译后还原."""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Tuple
from config.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER_TEMPLATE = "__PROTECTED_{index}_{occurrence}__"
_PLACEHOLDER_PATTERN = re.compile(r"__PROTECTED_\d+_\d+__")


@dataclass
class ProtectedText:
    """占位符替换后的文本以及 占位符 → 原文 的映射."""

    text: str
    mapping: Dict[str, str] = field(default_factory=dict)


class ProtectedTermGuard:
    """受保护词守卫."""

    def __init__(self, terms: Optional[Iterable[str]] = None):
        """
        初始化受保护词守卫.

        Args:
            terms: 受保护词列表，大小写不敏感去重，保留首次出现的顺序
        """
        self._terms: List[str] = []
        self._seen = set()
        self._patterns: List[Tuple[int, Pattern]] = []
        self.add_terms(terms or [])

    @property
    def terms(self) -> List[str]:
        return list(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def add_terms(self, terms: Iterable[str]):
        """
        添加受保护词.

        Args:
            terms: 新的受保护词，空白词与重复词会被忽略
        """
        added = 0
        for term in terms:
            if not isinstance(term, str) or not term.strip():
                continue
            term = term.strip()
            if term.lower() in self._seen:
                continue
            self._seen.add(term.lower())
            self._terms.append(term)
            added += 1
        if added:
            self._compile()
            logger.debug(f"Added {added} protected terms, total {len(self._terms)}")

    def _compile(self):
        # 长词优先匹配，"Louis Vuitton" 不会被 "Louis" 截断
        indexed = sorted(enumerate(self._terms), key=lambda item: -len(item[1]))
        self._patterns = [
            (index, re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE))
            for index, term in indexed
        ]

    def protect(self, text: str) -> ProtectedText:
        """
        将文本中出现的受保护词（整词、大小写不敏感）替换为占位符.

        Args:
            text: 原始文本

        Returns:
            替换后的文本与占位符映射，映射中保留原文的大小写
        """
        mapping: Dict[str, str] = {}
        if not text or not self._patterns:
            return ProtectedText(text=text, mapping=mapping)

        modified = text
        for index, pattern in self._patterns:
            occurrence = 0

            def _substitute(match):
                nonlocal occurrence
                placeholder = PLACEHOLDER_TEMPLATE.format(
                    index=index, occurrence=occurrence
                )
                occurrence += 1
                mapping[placeholder] = match.group(0)
                return placeholder

            modified = pattern.sub(_substitute, modified)
        return ProtectedText(text=modified, mapping=mapping)

    @staticmethod
    def restore(text: str, mapping: Dict[str, str]) -> str:
        """
        将占位符还原为原文.

        Args:
            text: 含占位符的文本（通常是翻译结果）
            mapping: protect 返回的占位符映射

        Returns:
            还原后的文本，映射中不存在的占位符保持原样
        """
        if not text or not mapping:
            return text
        restored = _PLACEHOLDER_PATTERN.sub(
            lambda match: mapping.get(match.group(0), match.group(0)), text
        )
        missing = [p for p in mapping if p not in text]
        if missing:
            logger.warning(f"{len(missing)} placeholders were lost during translation")
        return restored
