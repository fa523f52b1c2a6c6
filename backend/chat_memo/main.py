"""FastAPI 应用入口"""
import logging
import logging.config

from .config import settings

# 日志配置
# 始终输出到控制台；设置了 LOG_FILE 时另外写入文件
_handlers = {
    "console": {
        "class": "logging.StreamHandler",
        "formatter": "standard",
    }
}
if settings.LOG_FILE:
    _handlers["file"] = {
        "class": "logging.FileHandler",
        "formatter": "standard",
        "filename": settings.LOG_FILE,
        "mode": "a",
        "encoding": "utf-8"
    }

logging.config.dictConfig({
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(asctime)s %(levelname)s:%(name)s:%(message)s"}
    },
    "handlers": _handlers,
    "root": {
        "level": "INFO",
        "handlers": list(_handlers),
    },
    "loggers": {
        "chat_memo": {"level": "DEBUG" if settings.DEBUG else "INFO"},
        "httpx": {"level": "WARNING"},
    }
})

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .database import init_db, AsyncSessionLocal
from .api import api_router
from .errors import ApiError, InternalError
from .services.ai_providers import ensure_default_providers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时
    await init_db()

    # 补齐系统默认 AI
    async with AsyncSessionLocal() as session:
        await ensure_default_providers(session)
        await session.commit()

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} 启动成功")
    yield
    # 关闭时
    logger.info("应用关闭完成")


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="AI 对话摘录笔记 API",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """业务错误统一返回 {detail, code}"""
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """未预期的异常记录日志后返回 500"""
    logger.exception(f"[API] 未处理的异常: {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=InternalError().to_dict())


# 注册路由
app.include_router(api_router, prefix="/api")


# 健康检查
@app.get("/health", tags=["系统"], summary="健康检查")
async def health_check():
    """检查服务运行状态"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


# 根路由
@app.get("/", tags=["系统"], summary="欢迎页")
async def root():
    """返回 API 基本信息"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs"
    }
