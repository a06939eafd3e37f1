"""管道错误类型 - 每种错误对应一个固定的HTTP状态码."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """错误种类."""

    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    AI_SERVICE = "ai_service"
    INTERNAL = "internal"


ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.AI_SERVICE: 503,
    ErrorKind.INTERNAL: 500,
}


class PipelineError(Exception):
    """管道错误基类."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(PipelineError):
    """客户端输入不合法."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class RateLimitError(PipelineError):
    """请求频率超限."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {"error": self.message, "retry_after": self.retry_after}


class AIServiceError(PipelineError):
    """模型调用失败或返回了不可用的结果."""

    kind = ErrorKind.AI_SERVICE

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model
