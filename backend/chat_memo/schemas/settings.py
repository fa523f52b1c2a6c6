"""用户设置相关 Schema"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from ..config import settings
from .snippet import DisplayMode


class SettingsUpdate(BaseModel):
    """批量更新设置"""
    user_name: Optional[str] = Field(None, min_length=1, max_length=settings.MAX_USERNAME_LENGTH)
    default_display_mode: Optional[DisplayMode] = None
    custom_ai_names: Optional[List[str]] = Field(None, max_length=settings.MAX_CUSTOM_AIS)


class UserNameUpdate(BaseModel):
    """更新用户名"""
    user_name: str = Field(..., min_length=1, max_length=settings.MAX_USERNAME_LENGTH)


class DisplayModeUpdate(BaseModel):
    """更新默认显示模式"""
    display_mode: DisplayMode


class CustomAIRequest(BaseModel):
    """添加/移除自定义 AI 名称"""
    ai_name: str = Field(..., min_length=1, max_length=settings.MAX_AI_NAME_LENGTH)


class UserSettingsResponse(BaseModel):
    """用户设置响应"""
    id: str
    user_id: str
    user_name: str
    default_display_mode: str
    custom_ai_names: List[str] = []
    updated_at: datetime

    class Config:
        from_attributes = True
