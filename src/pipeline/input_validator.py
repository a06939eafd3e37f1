"""输入校验器 - 请求进入管道前的门禁检查."""

from typing import Any, Iterable, Optional

from config.languages import SUPPORTED_LANGUAGES
from config.settings import settings
from pipeline.errors import ValidationError


def validate_input(
    text: Any,
    source_lang: Any,
    target_lang: Any,
    max_text_length: Optional[int] = None,
    supported_languages: Optional[Iterable[str]] = None,
) -> None:
    """
    校验请求参数，按 文本 → 长度 → 源语言 → 目标语言 的固定顺序检查.

    Args:
        text: 待摘要的文本
        source_lang: 源语言代码
        target_lang: 目标语言代码
        max_text_length: 文本最大长度，默认从配置中读取
        supported_languages: 支持的语言代码集合

    Raises:
        ValidationError: 第一条未通过的规则
    """
    limit = max_text_length if max_text_length is not None else settings.max_text_length
    languages = set(supported_languages or SUPPORTED_LANGUAGES)

    if not text or not isinstance(text, str) or not text.strip():
        raise ValidationError(
            "Text parameter is required and cannot be empty", field="text"
        )
    if len(text) > limit:
        raise ValidationError(
            f"Text exceeds maximum length of {limit} characters", field="text"
        )
    if not _is_supported(source_lang, languages):
        raise ValidationError("Invalid source language provided", field="sourceLang")
    if not _is_supported(target_lang, languages):
        raise ValidationError("Invalid target language provided", field="targetLang")


def validate_content_type(content_type: Optional[str]) -> None:
    """请求体必须是JSON."""
    if not content_type or "application/json" not in content_type.lower():
        raise ValidationError(
            "Content-Type must be application/json", field="content_type"
        )


def _is_supported(lang: Any, languages: set) -> bool:
    return bool(lang) and isinstance(lang, str) and lang in languages


def repair_surrogates(text: str) -> str:
    """把孤立的UTF-16代理项替换为 U+FFFD，成对的代理项合并为一个字符."""
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")
