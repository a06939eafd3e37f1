"""语言配置 - 支持的语言代码、语言名称与回退映射."""

from typing import Dict, FrozenSet, List, Tuple

SUPPORTED_LANGUAGES: List[str] = [
    "en", "es", "fr", "de", "it", "pt", "ru", "ja", "ko", "zh", "ar", "hi",
    "gu", "mr", "nl", "sv", "da", "no", "fi", "pl", "cs", "hu", "ro", "tr",
    "el", "he", "th", "vi", "id", "ms", "tl", "sw", "am", "eu", "be", "bg",
    "bn", "hr", "ca",
]

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "gu": "Gujarati",
    "mr": "Marathi",
    "nl": "Dutch",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
    "pl": "Polish",
    "cs": "Czech",
    "hu": "Hungarian",
    "ro": "Romanian",
    "tr": "Turkish",
    "el": "Greek",
    "he": "Hebrew",
    "th": "Thai",
    "vi": "Vietnamese",
    "id": "Indonesian",
    "ms": "Malay",
    "tl": "Tagalog",
    "sw": "Swahili",
    "am": "Amharic",
    "eu": "Basque",
    "be": "Belarusian",
    "bg": "Bulgarian",
    "bn": "Bengali",
    "hr": "Croatian",
    "ca": "Catalan",
}

# 模型不擅长的语言退回到相近语言
LANGUAGE_FALLBACKS: Dict[str, str] = {
    "ca": "es",
    "gl": "es",
    "eu": "es",
    "cy": "en",
    "ga": "en",
    "mt": "en",
    "is": "da",
    "fo": "da",
    "lb": "de",
    "rm": "de",
}

# 可以跳过英文中转、直接互译的语言对（双向）
DIRECT_TRANSLATION_PAIRS: FrozenSet[Tuple[str, str]] = frozenset(
    [("es", "fr"), ("de", "fr"), ("it", "es"), ("pt", "es"), ("zh", "ja")]
)


def get_language_name(code: str) -> str:
    """返回语言代码对应的英文名称，未知代码原样返回."""
    return LANGUAGE_NAMES.get(code, code)


def get_effective_language(code: str, fallbacks: Dict[str, str] = None) -> str:
    """返回实际用于翻译的语言代码."""
    mapping = LANGUAGE_FALLBACKS if fallbacks is None else fallbacks
    return mapping.get(code, code)


def supports_direct_translation(source: str, target: str) -> bool:
    """两种非英语语言之间是否支持直接翻译."""
    if "en" in (source, target) or source == target:
        return False
    pair = (source, target)
    return pair in DIRECT_TRANSLATION_PAIRS or pair[::-1] in DIRECT_TRANSLATION_PAIRS
