"""应用配置管理模块."""

import json
from typing import Annotated, List

from pydantic_settings import BaseSettings, NoDecode
from pydantic import Field, field_validator

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """应用配置类."""

    openai_base_url: str = Field(default="https://api.openai.com/v1", env="OPENAI_BASE_URL")
    openai_api_key: str = Field(default="", env="OPENAI_API_KEY")
    summary_model: str = Field(default="gpt-4o-mini", env="SUMMARY_MODEL")
    translation_model: str = Field(default="gpt-4o-mini", env="TRANSLATION_MODEL")
    # 主模型失败后依次尝试，环境变量可写作 "a,b" 或 '["a", "b"]'
    fallback_models: Annotated[List[str], NoDecode] = Field(
        default_factory=list, env="FALLBACK_MODELS"
    )
    request_timeout: int = Field(default=30, env="REQUEST_TIMEOUT", ge=1, le=300)

    # 请求限制
    max_text_length: int = Field(default=5000, env="MAX_TEXT_LENGTH", ge=1, le=100000)
    rate_limit_per_ip: int = Field(default=60, env="RATE_LIMIT_PER_IP", ge=1)
    rate_limit_window: int = Field(default=60, env="RATE_LIMIT_WINDOW", ge=1, le=3600)
    rate_limit_backend: str = Field(default="memory", env="RATE_LIMIT_BACKEND")
    # 直接互译的语言对跳过英文中转
    direct_translation: bool = Field(default=False, env="DIRECT_TRANSLATION")

    # 摘要设置
    summary_short_input_threshold: int = Field(
        default=200, env="SUMMARY_SHORT_INPUT_THRESHOLD", ge=0
    )
    summary_max_chunk_size: int = Field(
        default=2000, env="SUMMARY_MAX_CHUNK_SIZE", ge=100, le=20000
    )
    summary_recombine_threshold: int = Field(
        default=1000, env="SUMMARY_RECOMBINE_THRESHOLD", ge=100
    )
    summary_max_concurrency: int = Field(
        default=4, env="SUMMARY_MAX_CONCURRENCY", ge=1, le=32
    )
    summary_max_tokens: int = Field(default=350, env="SUMMARY_MAX_TOKENS", ge=10, le=4096)
    summary_fallback_sentences: int = Field(
        default=3, env="SUMMARY_FALLBACK_SENTENCES", ge=1, le=20
    )
    translation_max_tokens: int = Field(
        default=1024, env="TRANSLATION_MAX_TOKENS", ge=10, le=8192
    )

    # 缓存设置
    cache_backend: str = Field(default="memory", env="CACHE_BACKEND")
    cache_ttl: int = Field(default=3600, env="CACHE_TTL", ge=1)
    cache_write_policy: str = Field(default="async", env="CACHE_WRITE_POLICY")
    cache_max_entries: int = Field(default=10000, env="CACHE_MAX_ENTRIES", ge=1)
    redis_url: str = Field(default="", env="REDIS_URL")
    config_redis_url: str = Field(default="", env="CONFIG_REDIS_URL")

    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    @field_validator("fallback_models", mode="before")
    @classmethod
    def split_model_list(cls, value):
        """逗号分隔或JSON数组都解析为模型列表."""
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    class Config:
        """Pydantic配置."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
