"""应用配置"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from pathlib import Path
import os

# 确定项目根目录（支持本地开发和 Docker 部署）
# 本地开发: backend/stackmarks/config.py -> 项目根目录是 ../../
# Docker: /app/stackmarks/config.py -> 数据目录是 /app/data
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent  # backend 目录
_project_root = _backend_dir.parent  # 项目根目录

# 检测运行环境
if os.path.exists("/app/data"):
    # Docker 环境
    _data_dir = Path("/app/data")
    _env_file = Path("/app/.env") if Path("/app/.env").exists() else None
else:
    # 本地开发环境
    _data_dir = _project_root / "data"
    _env_file = _project_root / ".env" if (_project_root / ".env").exists() else None


class Settings(BaseSettings):
    """应用设置"""
    # 应用
    APP_NAME: str = "StackMarks"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 数据目录 / 数据库
    DATA_DIR: str = str(_data_dir)
    DATABASE_URL: str = f"sqlite+aiosqlite:///{_data_dir}/stackmarks.db"

    # 日志（未设置 LOG_FILE 时输出到 stderr）
    LOG_FILE: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # JWT
    JWT_SECRET_KEY: str = "change-this-secret-key-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 小时

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost",
        "http://localhost:80",
        "http://localhost:5173",
        "https://localhost",
        "https://localhost:443",
        "https://localhost:5173",
    ]

    # 导入
    IMPORT_MAX_BYTES: int = 10_000_000  # 约 10MB
    DEFAULT_IMPORT_STRATEGY: str = "flatten"
    IMPORT_ROOT_FOLDER_NAME: str = "Imported Bookmarks"

    # 书签标签限制
    MAX_TAGS_PER_BOOKMARK: int = 50
    MAX_TAG_LENGTH: int = 64

    class Config:
        env_file = str(_env_file) if _env_file else ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
