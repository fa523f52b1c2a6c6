"""用户设置服务

所有操作都保证设置行存在：缺失时按默认值创建（每个用户恰好一行）。
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import DuplicateNameError, LimitExceededError
from ..models import UserSettings
from ..schemas import SettingsUpdate
from .base import collect_changes, apply_changes

logger = logging.getLogger(__name__)


def new_settings(user_id: str, **overrides) -> UserSettings:
    """按默认值构造设置行"""
    values = {
        "user_name": settings.DEFAULT_USERNAME,
        "default_display_mode": settings.DEFAULT_DISPLAY_MODE,
        "custom_ai_names": [],
    }
    values.update(overrides)
    return UserSettings(user_id=user_id, **values)


async def get_or_create_settings(db: AsyncSession, user_id: str) -> UserSettings:
    """获取用户设置，不存在时创建"""
    result = await db.execute(select(UserSettings).where(UserSettings.user_id == user_id))
    user_settings = result.scalar_one_or_none()

    if not user_settings:
        user_settings = new_settings(user_id)
        db.add(user_settings)
        await db.flush()
        await db.refresh(user_settings)
        logger.info(f"[Settings] 创建默认设置: user={user_id}")

    return user_settings


async def _save(db: AsyncSession, user_settings: UserSettings) -> UserSettings:
    await db.flush()
    await db.refresh(user_settings)
    return user_settings


async def update_settings(db: AsyncSession, user_id: str, data: SettingsUpdate) -> UserSettings:
    """批量更新设置，只写入显式给出的字段"""
    user_settings = await get_or_create_settings(db, user_id)
    changes = collect_changes(data)
    if "custom_ai_names" in changes:
        changes["custom_ai_names"] = list(dict.fromkeys(changes["custom_ai_names"]))
    apply_changes(user_settings, changes)
    return await _save(db, user_settings)


async def update_user_name(db: AsyncSession, user_id: str, user_name: str) -> UserSettings:
    """更新用户名（消息默认发送者）"""
    user_settings = await get_or_create_settings(db, user_id)
    user_settings.user_name = user_name
    return await _save(db, user_settings)


async def update_display_mode(db: AsyncSession, user_id: str, display_mode: str) -> UserSettings:
    """更新默认显示模式"""
    user_settings = await get_or_create_settings(db, user_id)
    user_settings.default_display_mode = display_mode
    return await _save(db, user_settings)


async def add_custom_ai(db: AsyncSession, user_id: str, ai_name: str) -> UserSettings:
    """向旧版自定义 AI 列表追加名称"""
    user_settings = await get_or_create_settings(db, user_id)
    current = list(user_settings.custom_ai_names or [])

    if len(current) >= settings.MAX_CUSTOM_AIS:
        raise LimitExceededError(f"自定义 AI 最多 {settings.MAX_CUSTOM_AIS} 个")
    if ai_name in current:
        raise DuplicateNameError("AI 名称已存在")

    # 重新赋值列表，JSON 列才会被标记为已修改
    user_settings.custom_ai_names = current + [ai_name]
    return await _save(db, user_settings)


async def remove_custom_ai(db: AsyncSession, user_id: str, ai_name: str) -> UserSettings:
    """从旧版自定义 AI 列表移除名称，名称不存在时不做改动"""
    user_settings = await get_or_create_settings(db, user_id)
    user_settings.custom_ai_names = [
        name for name in (user_settings.custom_ai_names or []) if name != ai_name
    ]
    return await _save(db, user_settings)
