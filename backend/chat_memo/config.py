"""应用配置"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from pathlib import Path
import os

# 确定项目根目录（支持本地开发和 Docker 部署）
# 本地开发: backend/chat_memo/config.py -> 项目根目录是 ../../
# Docker: /app/chat_memo/config.py -> 数据目录是 /app/data
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
    APP_NAME: str = "Chat Memo"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 数据库（默认使用项目根目录的 data 文件夹）
    DATABASE_URL: str = f"sqlite+aiosqlite:///{_data_dir}/chat_memo.db"

    # JWT
    JWT_SECRET_KEY: str = "change-this-secret-key-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 小时
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # 密码哈希强度（bcrypt rounds）
    PASSWORD_HASH_ROUNDS: int = 12

    # 客户端查询缓存
    CACHE_TTL: int = 300  # 5 分钟
    CACHE_MAX_SIZE: int = 500

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # 日志文件（为空时只输出到控制台）
    LOG_FILE: Optional[str] = None

    # 默认值
    DEFAULT_USERNAME: str = "あなた"
    DEFAULT_DISPLAY_MODE: str = "markdown"
    DEFAULT_AI_ICON: str = "bot"

    # 限制
    MAX_CUSTOM_AIS: int = 20
    MAX_TAGS: int = 30
    MAX_TITLE_LENGTH: int = 255
    MAX_USERNAME_LENGTH: int = 50
    MAX_TAG_NAME_LENGTH: int = 20
    MAX_AI_NAME_LENGTH: int = 50
    MIN_PASSWORD_LENGTH: int = 8

    class Config:
        env_file = str(_env_file) if _env_file else ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
