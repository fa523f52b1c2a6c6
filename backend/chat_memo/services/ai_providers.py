"""AI 提供方服务"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import settings
from ..errors import DuplicateNameError
from ..models import AIProvider, UserActiveAI
from ..schemas import AIProviderCreate, AIProviderUpdate, ToggleActiveRequest
from .access import get_readable_provider, get_writable_provider

logger = logging.getLogger(__name__)

# 系统默认 AI（按名称幂等创建）
DEFAULT_AI_PROVIDERS = [
    {"name": "ChatGPT", "icon": "bot"},
    {"name": "Claude", "icon": "brain"},
    {"name": "Gemini", "icon": "sparkles"},
    {"name": "Copilot", "icon": "code"},
]


def _defaults_query():
    return (
        select(AIProvider)
        .where(AIProvider.user_id.is_(None), AIProvider.is_default == True)  # noqa: E712
        .order_by(AIProvider.created_at.asc())
    )


async def _name_taken(db: AsyncSession, user_id: str, name: str, exclude_id: str = None) -> bool:
    query = select(AIProvider.id).where(AIProvider.user_id == user_id, AIProvider.name == name)
    if exclude_id:
        query = query.where(AIProvider.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def get_default_providers(db: AsyncSession) -> List[AIProvider]:
    """获取系统默认 AI"""
    result = await db.execute(_defaults_query())
    return list(result.scalars().all())


async def get_providers(db: AsyncSession, user_id: str) -> List[AIProvider]:
    """获取全部可用 AI：系统默认在前，自定义在后"""
    defaults = await get_default_providers(db)
    result = await db.execute(
        select(AIProvider)
        .where(AIProvider.user_id == user_id)
        .order_by(AIProvider.created_at.asc())
    )
    return defaults + list(result.scalars().all())


async def create_custom_provider(db: AsyncSession, user_id: str, data: AIProviderCreate) -> AIProvider:
    """创建自定义 AI"""
    if await _name_taken(db, user_id, data.name):
        raise DuplicateNameError("AI 已存在")

    provider = AIProvider(
        user_id=user_id,
        name=data.name,
        icon=data.icon or settings.DEFAULT_AI_ICON,
        is_default=False,
    )
    db.add(provider)
    await db.flush()
    await db.refresh(provider)
    logger.info(f"[AIProvider] 创建自定义 AI: user={user_id} provider={provider.id}")
    return provider


async def update_provider(db: AsyncSession, user_id: str, provider_id: str, data: AIProviderUpdate) -> AIProvider:
    """更新自定义 AI，默认 AI 不可修改"""
    provider = await get_writable_provider(db, user_id, provider_id)

    if data.name != provider.name and await _name_taken(db, user_id, data.name, exclude_id=provider_id):
        raise DuplicateNameError("AI 名称已存在")

    provider.name = data.name
    if data.icon is not None:
        provider.icon = data.icon

    await db.flush()
    await db.refresh(provider)
    return provider


async def delete_provider(db: AsyncSession, user_id: str, provider_id: str) -> None:
    """删除自定义 AI，默认 AI 不可删除"""
    provider = await get_writable_provider(db, user_id, provider_id)
    await db.delete(provider)
    await db.flush()
    logger.info(f"[AIProvider] 删除自定义 AI: provider={provider_id}")


async def ensure_default_providers(db: AsyncSession) -> List[AIProvider]:
    """补齐缺失的系统默认 AI，可重复调用"""
    existing_names = {provider.name for provider in await get_default_providers(db)}

    created = 0
    for preset in DEFAULT_AI_PROVIDERS:
        if preset["name"] in existing_names:
            continue
        db.add(AIProvider(user_id=None, name=preset["name"], icon=preset["icon"], is_default=True))
        created += 1

    if created:
        await db.flush()
        logger.info(f"[AIProvider] 补齐默认 AI {created} 个")

    return await get_default_providers(db)


async def get_active_ais(db: AsyncSession, user_id: str) -> List[UserActiveAI]:
    """获取用户的 AI 启用记录（含提供方）"""
    result = await db.execute(
        select(UserActiveAI)
        .where(UserActiveAI.user_id == user_id)
        .options(selectinload(UserActiveAI.ai_provider))
        .order_by(UserActiveAI.created_at.asc())
    )
    return list(result.scalars().all())


async def toggle_active(db: AsyncSession, user_id: str, data: ToggleActiveRequest) -> UserActiveAI:
    """切换 AI 启用状态：已有记录则更新，否则新建"""
    await get_readable_provider(db, user_id, data.ai_provider_id)

    result = await db.execute(
        select(UserActiveAI).where(
            UserActiveAI.user_id == user_id,
            UserActiveAI.ai_provider_id == data.ai_provider_id,
        )
    )
    active = result.scalar_one_or_none()

    if active:
        active.is_active = data.is_active
    else:
        active = UserActiveAI(user_id=user_id, ai_provider_id=data.ai_provider_id, is_active=data.is_active)
        db.add(active)
    await db.flush()

    result = await db.execute(
        select(UserActiveAI)
        .where(UserActiveAI.id == active.id)
        .options(selectinload(UserActiveAI.ai_provider))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
