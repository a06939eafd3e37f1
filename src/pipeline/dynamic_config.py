"""动态配置加载器 - 从配置存储读取运行时覆盖项与自定义受保护词."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from config.logging_config import get_logger
from pipeline.kv_store import KeyValueStore

logger = get_logger(__name__)

APP_CONFIG_KEY = "app_config"
PROTECTED_WORDS_KEY = "protected_words"

# 允许在运行时覆盖的配置项
OVERRIDABLE_KEYS = ("rate_limit_per_ip", "cache_ttl", "max_text_length")


@dataclass
class DynamicConfig:
    """动态配置."""

    overrides: Dict[str, int] = field(default_factory=dict)
    protected_words: List[str] = field(default_factory=list)


class DynamicConfigLoader:
    """动态配置加载器，读取失败时使用基础配置."""

    def __init__(self, store: Optional[KeyValueStore]):
        self.store = store

    async def load(self) -> DynamicConfig:
        """
        加载动态配置.

        Returns:
            覆盖项与自定义受保护词，配置存储未绑定时为空
        """
        config = DynamicConfig()
        if self.store is None:
            return config
        config.overrides = self._parse_overrides(await self._read_json(APP_CONFIG_KEY))
        config.protected_words = self._parse_words(
            await self._read_json(PROTECTED_WORDS_KEY)
        )
        logger.info(
            f"Loaded dynamic config: {len(config.overrides)} overrides, "
            f"{len(config.protected_words)} custom protected words"
        )
        return config

    async def _read_json(self, key: str) -> Any:
        try:
            raw = await self.store.get(key)
        except Exception as e:
            logger.warning(f"Failed to read dynamic config key {key}: {e}")
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse dynamic config key {key}: {e}")
            return None

    @staticmethod
    def _parse_overrides(data: Any) -> Dict[str, int]:
        if not isinstance(data, dict):
            return {}
        overrides = {}
        for key in OVERRIDABLE_KEYS:
            value = data.get(key)
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                overrides[key] = value
            elif value is not None:
                logger.warning(f"Ignoring invalid dynamic config value {key}={value!r}")
        return overrides

    @staticmethod
    def _parse_words(data: Any) -> List[str]:
        if not isinstance(data, list):
            return []
        return [word for word in data if isinstance(word, str) and word.strip()]
