"""FastAPI 应用入口"""
import logging
import logging.config

from .config import settings

# 日志配置
# 设置 LOG_FILE 时直接写入文件，避免 uvicorn --reload 子进程 stderr 重定向问题
_handler = (
    {
        "class": "logging.FileHandler",
        "formatter": "standard",
        "filename": settings.LOG_FILE,
        "mode": "a",
        "encoding": "utf-8"
    }
    if settings.LOG_FILE
    else {"class": "logging.StreamHandler", "formatter": "standard"}
)

logging.config.dictConfig({
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(levelname)s:%(name)s:%(message)s"}
    },
    "handlers": {
        "default": _handler
    },
    "root": {
        "level": settings.LOG_LEVEL,
        "handlers": ["default"]
    },
    "loggers": {
        "stackmarks": {"level": settings.LOG_LEVEL},
        "sqlalchemy.engine": {"level": "WARNING"},
    }
})

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .database import init_db
from .api import api_router
from .exceptions import (
    NotFound,
    InvalidReorderSet,
    UnsupportedVersion,
    ValidationFailed,
    DuplicateUsername,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时
    await init_db()
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} 启动成功")
    yield
    # 关闭时
    logger.info("👋 应用关闭完成")


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="个人书签管理 API",
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


# ==================== 领域异常 → HTTP ====================

@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidReorderSet)
async def invalid_reorder_handler(request: Request, exc: InvalidReorderSet):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "missing": exc.missing,
            "unexpected": exc.unexpected,
            "duplicates": exc.duplicates,
        },
    )


@app.exception_handler(UnsupportedVersion)
@app.exception_handler(ValidationFailed)
@app.exception_handler(DuplicateUsername)
async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


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
