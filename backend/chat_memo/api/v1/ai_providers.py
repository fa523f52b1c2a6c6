"""AI 提供方路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db
from ...models import User
from ...schemas import (
    AIProviderCreate, AIProviderUpdate, AIProviderResponse,
    ToggleActiveRequest, UserActiveAIResponse,
)
from ...services import ai_providers as provider_service
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[AIProviderResponse])
async def get_providers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取全部 AI（默认 + 自定义）"""
    return await provider_service.get_providers(db, current_user.id)


@router.get("/defaults", response_model=List[AIProviderResponse])
async def get_default_providers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取系统默认 AI"""
    return await provider_service.get_default_providers(db)


@router.post("/ensure-defaults", response_model=List[AIProviderResponse])
async def ensure_default_providers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """补齐系统默认 AI"""
    return await provider_service.ensure_default_providers(db)


@router.get("/active", response_model=List[UserActiveAIResponse])
async def get_active_ais(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取 AI 启用状态"""
    return await provider_service.get_active_ais(db, current_user.id)


@router.put("/active", response_model=UserActiveAIResponse)
async def toggle_active(
    toggle_in: ToggleActiveRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """切换 AI 启用状态"""
    return await provider_service.toggle_active(db, current_user.id, toggle_in)


@router.post("", response_model=AIProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_custom_provider(
    provider_in: AIProviderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建自定义 AI"""
    return await provider_service.create_custom_provider(db, current_user.id, provider_in)


@router.patch("/{provider_id}", response_model=AIProviderResponse)
async def update_provider(
    provider_id: str,
    provider_in: AIProviderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新自定义 AI"""
    return await provider_service.update_provider(db, current_user.id, provider_id, provider_in)


@router.delete("/{provider_id}")
async def delete_provider(
    provider_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除自定义 AI"""
    await provider_service.delete_provider(db, current_user.id, provider_id)
    return {"message": "删除成功"}
