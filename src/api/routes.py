"""摘要翻译服务 API 路由."""

import json
from datetime import datetime, timezone
from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .container import ServiceContainer, get_container
from config.languages import LANGUAGE_FALLBACKS, SUPPORTED_LANGUAGES
from config.settings import APP_VERSION, settings
from config.logging_config import get_logger
from models.models import ErrorResponse, HealthResponse, SummarizeRequest, SummaryResult
from pipeline.errors import PipelineError, RateLimitError, ValidationError
from pipeline.input_validator import validate_content_type
from pipeline.rate_limiter import get_client_ip

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 429, 500, 503)
}

# 创建路由实例
router = APIRouter()


@router.post("/", response_model=SummaryResult, responses=ERROR_RESPONSES)
@router.post("/api/summarize", response_model=SummaryResult, responses=ERROR_RESPONSES)
async def summarize(
    request: Request,
    background_tasks: BackgroundTasks,
    container: ServiceContainer = Depends(get_container),
):
    """
    生成英文摘要并翻译为目标语言

    请求体: {"text": "...", "sourceLang": "fr", "targetLang": "es"}

    Returns:
        {"summary": "...", "translated": "...", "target_language": "es"}
        响应头 X-Cache-Status 为 HIT 或 MISS
    """
    validate_content_type(request.headers.get("content-type"))
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body", field="body")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", field="body")

    payload = SummarizeRequest(
        text=body.get("text"),
        sourceLang=body.get("sourceLang"),
        targetLang=body.get("targetLang"),
    )
    outcome = await container.pipeline.run(payload, get_client_ip(request.headers))

    # 缓存写入在响应发出后执行
    if outcome.background_write is not None:
        background_tasks.add_task(outcome.background_write)

    headers = {**CORS_HEADERS, "X-Cache-Status": outcome.cache_status}
    if outcome.translation_method:
        headers["X-Translation-Method"] = outcome.translation_method
    return JSONResponse(content=outcome.result.model_dump(), headers=headers)


@router.get("/health", response_model=HealthResponse)
async def health(response: Response, container: ServiceContainer = Depends(get_container)):
    """健康检查"""
    response.headers.update(CORS_HEADERS)
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=APP_VERSION,
        features={
            "protected_words": len(container.guard),
            "supported_languages": len(SUPPORTED_LANGUAGES),
            "fallback_languages": len(LANGUAGE_FALLBACKS),
        },
    )


@router.get("/debug")
async def debug(container: ServiceContainer = Depends(get_container)):
    """绑定与配置信息，不包含任何密钥或地址"""
    pipeline = container.pipeline
    summarizer = pipeline.summarizer
    return JSONResponse(
        content={
            "kv_bound": container.cache_store is not None,
            "config_bound": container.config_store is not None,
            "ai_bound": bool(getattr(container.backend, "is_configured", False)),
            "config": {
                "max_text_length": pipeline.max_text_length or settings.max_text_length,
                "cache_ttl": pipeline.cache.ttl,
                "rate_limit_per_ip": pipeline.rate_limiter.limit,
                "rate_limit_window": pipeline.rate_limiter.window_seconds,
                "cache_write_policy": pipeline.cache_write_policy,
                "summary_max_chunk_size": summarizer.max_chunk_size,
                "summary_max_concurrency": summarizer.max_concurrency,
                "request_timeout": settings.request_timeout,
                "protected_words_count": len(container.guard),
                "supported_languages_count": len(SUPPORTED_LANGUAGES),
                "dynamic_overrides": sorted(container.dynamic_config.overrides),
            },
            "capabilities": {
                "protected_words": True,
                "language_fallbacks": True,
                "model_fallbacks": bool(settings.fallback_models),
                "chunked_summarization": True,
                "direct_translation": pipeline.direct_translation,
            },
        },
        headers=CORS_HEADERS,
    )


async def options_middleware(request: Request, call_next):
    """CORS 预检：任意路径的 OPTIONS 请求直接返回 204"""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    return await call_next(request)


async def pipeline_error_handler(request: Request, exc: PipelineError):
    if isinstance(exc, ValidationError):
        logger.warning(f"Validation failed: {exc.message}")
    elif isinstance(exc, RateLimitError):
        logger.warning(f"Rate limited: {exc.message}")
    else:
        logger.error(f"AI service error (model={getattr(exc, 'model', None)}): {exc.message}")
    headers = dict(CORS_HEADERS)
    if isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(exc.retry_after)
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        headers={**CORS_HEADERS, **(exc.headers or {})},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Request error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal Server Error").model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


def register_exception_handlers(app: FastAPI):
    """把管道错误映射为 HTTP 状态码与 {"error": message} 响应体."""
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
