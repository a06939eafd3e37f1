"""API数据模型定义."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class SummarizeRequest(BaseModel):
    """摘要翻译请求数据模型，字段类型由输入校验器检查."""

    model_config = ConfigDict(frozen=True)

    text: Any = None
    sourceLang: Any = None
    targetLang: Any = None


class SummaryResult(BaseModel):
    """摘要翻译结果数据模型."""

    model_config = ConfigDict(frozen=True)

    summary: str
    translated: str
    target_language: str


class HealthResponse(BaseModel):
    """健康检查响应数据模型."""

    status: str
    timestamp: str
    version: str
    features: Dict[str, int]


class ErrorResponse(BaseModel):
    """错误响应数据模型."""

    error: str
    retry_after: Optional[int] = None


class CacheStatus:
    """缓存状态常量."""

    HIT = "HIT"
    MISS = "MISS"


class TranslationMethod:
    """翻译方式常量."""

    ENGLISH_INTERMEDIATE = "english_intermediate"
    DIRECT = "direct"
    PASSTHROUGH = "passthrough"


class CacheWritePolicy:
    """缓存写入策略常量."""

    SYNC = "sync"
    ASYNC = "async"
