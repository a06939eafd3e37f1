"""缓存键生成 - 由语言对与文本前缀哈希组成的确定性键."""

CACHE_KEY_PREFIX = "translate"
HASHED_PREFIX_LENGTH = 100

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def hash_string(text: str) -> str:
    """
    32位多项式滚动哈希（h * 31 + c），结果取绝对值后以36进制编码.

    按UTF-16码元计算，与浏览器/边缘运行时生成的键保持一致.
    """
    h = 0
    # 孤立代理项（如 JSON 中的 "\ud83d"）按原码元参与计算
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + code_unit)
    return _to_base36(abs(h))


def build_cache_key(source_lang: str, target_lang: str, text: str) -> str:
    """只对文本前100个字符做哈希，前缀相同的文本共享同一个键."""
    text_hash = hash_string(text[:HASHED_PREFIX_LENGTH])
    return f"{CACHE_KEY_PREFIX}:{source_lang}:{target_lang}:{text_hash}"
