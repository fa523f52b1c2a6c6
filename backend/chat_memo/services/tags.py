"""标签服务"""
import logging
from typing import List

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import NotFoundError, DuplicateNameError, LimitExceededError
from ..models import Tag, SnippetTag
from ..schemas import TagCreate, TagUpdate
from .access import get_owned_snippet, get_owned_tag, find_owned_snippet_tag
from .base import collect_changes, apply_changes

logger = logging.getLogger(__name__)


async def _name_taken(db: AsyncSession, user_id: str, name: str, exclude_id: str = None) -> bool:
    """同一用户下是否已有同名标签（区分大小写）"""
    query = select(Tag.id).where(Tag.user_id == user_id, Tag.name == name)
    if exclude_id:
        query = query.where(Tag.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def get_tags(db: AsyncSession, user_id: str) -> List[Tag]:
    """获取全部标签，按创建时间倒序"""
    result = await db.execute(
        select(Tag).where(Tag.user_id == user_id).order_by(Tag.created_at.desc())
    )
    return list(result.scalars().all())


async def create_tag(db: AsyncSession, user_id: str, data: TagCreate) -> Tag:
    """创建标签"""
    count = await db.scalar(select(func.count(Tag.id)).where(Tag.user_id == user_id))
    if count >= settings.MAX_TAGS:
        raise LimitExceededError(f"标签最多 {settings.MAX_TAGS} 个")

    if await _name_taken(db, user_id, data.name):
        raise DuplicateNameError("标签已存在")

    tag = Tag(user_id=user_id, name=data.name, color=data.color)
    db.add(tag)
    await db.flush()
    await db.refresh(tag)
    logger.info(f"[Tag] 创建标签: user={user_id} tag={tag.id}")
    return tag


async def update_tag(db: AsyncSession, user_id: str, tag_id: str, data: TagUpdate) -> Tag:
    """更新标签名称和/或颜色"""
    tag = await get_owned_tag(db, user_id, tag_id)
    changes = collect_changes(data, nullable=("color",))

    if "name" in changes and changes["name"] != tag.name:
        if await _name_taken(db, user_id, changes["name"], exclude_id=tag_id):
            raise DuplicateNameError("标签名称已存在")

    apply_changes(tag, changes)
    await db.flush()
    await db.refresh(tag)
    return tag


async def delete_tag(db: AsyncSession, user_id: str, tag_id: str) -> None:
    """删除标签：先清理所有摘录关联，再删除标签本身"""
    tag = await get_owned_tag(db, user_id, tag_id)

    result = await db.execute(delete(SnippetTag).where(SnippetTag.tag_id == tag_id))
    await db.delete(tag)
    await db.flush()
    logger.info(f"[Tag] 删除标签: tag={tag_id} 关联 {result.rowcount} 条")


async def add_tag_to_snippet(db: AsyncSession, user_id: str, snippet_id: str, tag_id: str) -> SnippetTag:
    """给摘录添加标签，已存在时直接返回原关联"""
    existing = await find_owned_snippet_tag(db, user_id, snippet_id, tag_id)
    if existing:
        return existing

    snippet_tag = SnippetTag(snippet_id=snippet_id, tag_id=tag_id)
    db.add(snippet_tag)
    await db.flush()
    return snippet_tag


async def remove_tag_from_snippet(db: AsyncSession, user_id: str, snippet_id: str, tag_id: str) -> None:
    """移除摘录上的标签"""
    existing = await find_owned_snippet_tag(db, user_id, snippet_id, tag_id)
    if not existing:
        raise NotFoundError("标签关联不存在")

    await db.delete(existing)
    await db.flush()


async def get_tags_for_snippet(db: AsyncSession, user_id: str, snippet_id: str) -> List[Tag]:
    """获取摘录上的标签"""
    await get_owned_snippet(db, user_id, snippet_id)
    result = await db.execute(
        select(Tag)
        .join(SnippetTag, SnippetTag.tag_id == Tag.id)
        .where(SnippetTag.snippet_id == snippet_id)
        .order_by(Tag.created_at)
    )
    return list(result.scalars().all())
