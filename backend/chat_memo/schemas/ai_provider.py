"""AI 提供方相关 Schema"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from ..config import settings


class AIProviderCreate(BaseModel):
    """创建自定义 AI"""
    name: str = Field(..., min_length=1, max_length=settings.MAX_AI_NAME_LENGTH)
    icon: Optional[str] = None


class AIProviderUpdate(BaseModel):
    """更新自定义 AI"""
    name: str = Field(..., min_length=1, max_length=settings.MAX_AI_NAME_LENGTH)
    icon: Optional[str] = None


class AIProviderResponse(BaseModel):
    """AI 提供方响应"""
    id: str
    user_id: Optional[str] = None
    name: str
    icon: Optional[str] = None
    is_default: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ToggleActiveRequest(BaseModel):
    """切换 AI 启用状态"""
    ai_provider_id: str
    is_active: bool


class UserActiveAIResponse(BaseModel):
    """用户启用的 AI"""
    id: str
    user_id: str
    ai_provider_id: str
    is_active: bool
    ai_provider: Optional[AIProviderResponse] = None

    class Config:
        from_attributes = True
