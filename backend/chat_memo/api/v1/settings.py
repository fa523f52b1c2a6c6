"""用户设置路由"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ...models import User
from ...schemas import (
    SettingsUpdate, UserNameUpdate, DisplayModeUpdate, CustomAIRequest, UserSettingsResponse,
)
from ...services import user_settings as settings_service
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=UserSettingsResponse)
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取用户设置（不存在时创建）"""
    return await settings_service.get_or_create_settings(db, current_user.id)


@router.patch("", response_model=UserSettingsResponse)
async def update_settings(
    settings_in: SettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新用户设置"""
    return await settings_service.update_settings(db, current_user.id, settings_in)


@router.put("/user-name", response_model=UserSettingsResponse)
async def update_user_name(
    name_in: UserNameUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新用户名"""
    return await settings_service.update_user_name(db, current_user.id, name_in.user_name)


@router.put("/display-mode", response_model=UserSettingsResponse)
async def update_display_mode(
    mode_in: DisplayModeUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新默认显示模式"""
    return await settings_service.update_display_mode(db, current_user.id, mode_in.display_mode)


@router.post("/custom-ais", response_model=UserSettingsResponse)
async def add_custom_ai(
    ai_in: CustomAIRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """添加自定义 AI 名称"""
    return await settings_service.add_custom_ai(db, current_user.id, ai_in.ai_name)


@router.post("/custom-ais/remove", response_model=UserSettingsResponse)
async def remove_custom_ai(
    ai_in: CustomAIRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """移除自定义 AI 名称"""
    return await settings_service.remove_custom_ai(db, current_user.id, ai_in.ai_name)
