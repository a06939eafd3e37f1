"""文本分块器 - 按句子边界把长文本切成不超过预算的块."""

import re
from typing import List

# 句末标点（可连续出现）后跟空白即为句子边界
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> List[str]:
    """把文本拆成句子，保留句末标点，丢弃空句."""
    if not text or not text.strip():
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text.strip()) if s.strip()]


def chunk_text(text: str, max_chunk_size: int) -> List[str]:
    """
    将整句拼接成块，每块长度不超过 max_chunk_size.

    单句本身超过预算时独占一块，绝不在句中切断.

    Args:
        text: 原始文本
        max_chunk_size: 每块的最大字符数

    Returns:
        按原顺序排列的块列表，空文本返回空列表
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")

    chunks: List[str] = []
    current = ""
    for sentence in split_sentences(text):
        if not current:
            current = sentence
        elif len(current) + 1 + len(sentence) <= max_chunk_size:
            current = f"{current} {sentence}"
        else:
            chunks.append(current)
            current = sentence
    if current:
        chunks.append(current)
    return chunks
