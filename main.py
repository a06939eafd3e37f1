"""EdgeScribe 摘要翻译服务主入口."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.container import build_container
from api.routes import options_middleware, register_exception_handlers, router
from config.settings import APP_VERSION
from config.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时组装管道组件，关闭时释放存储连接"""
    setup_logging()
    if getattr(app.state, "container", None) is None:
        app.state.container = await build_container()
    yield
    await app.state.container.close()
    logger.info("Shutting down")


# 创建FastAPI应用实例
app = FastAPI(
    title="EdgeScribe API",
    description="文本摘要与多语言翻译服务API",
    version=APP_VERSION,
    lifespan=lifespan,
)

# 添加CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)
app.middleware("http")(options_middleware)

register_exception_handlers(app)

# 包含路由
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=18000, reload=True)
