"""摘录服务"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Snippet, SnippetTag
from ..schemas import SnippetCreate, SnippetUpdate
from .access import get_owned_snippet, ensure_tags_owned

logger = logging.getLogger(__name__)


def _list_query(user_id: str):
    """当前用户的摘录列表（含标签），按更新时间倒序"""
    return (
        select(Snippet)
        .where(Snippet.user_id == user_id)
        .options(selectinload(Snippet.tags))
        .order_by(Snippet.updated_at.desc())
    )


async def _reload(db: AsyncSession, snippet_id: str) -> Snippet:
    """flush 后重新查询，刷新标签关系"""
    await db.flush()
    result = await db.execute(
        select(Snippet)
        .where(Snippet.id == snippet_id)
        .options(selectinload(Snippet.tags))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_snippets(db: AsyncSession, user_id: str) -> List[Snippet]:
    """获取全部摘录"""
    result = await db.execute(_list_query(user_id))
    return list(result.scalars().all())


async def get_snippet(db: AsyncSession, user_id: str, snippet_id: str) -> Optional[Snippet]:
    """获取单个摘录（含按位置排序的消息和标签），不可访问时返回 None"""
    result = await db.execute(
        select(Snippet)
        .where(Snippet.id == snippet_id, Snippet.user_id == user_id)
        .options(selectinload(Snippet.messages), selectinload(Snippet.tags))
    )
    return result.scalar_one_or_none()


async def create_snippet(db: AsyncSession, user_id: str, data: SnippetCreate) -> Snippet:
    """创建摘录"""
    tag_ids = await ensure_tags_owned(db, user_id, data.tag_ids or [])

    snippet = Snippet(user_id=user_id, title=data.title)
    db.add(snippet)
    await db.flush()

    for tag_id in tag_ids:
        db.add(SnippetTag(snippet_id=snippet.id, tag_id=tag_id))

    logger.info(f"[Snippet] 创建摘录: user={user_id} snippet={snippet.id} tags={len(tag_ids)}")
    return await _reload(db, snippet.id)


async def update_snippet(db: AsyncSession, user_id: str, snippet_id: str, data: SnippetUpdate) -> Snippet:
    """更新摘录标题和/或标签集合"""
    snippet = await get_owned_snippet(db, user_id, snippet_id)

    if data.title is not None:
        snippet.title = data.title
        snippet.updated_at = datetime.utcnow()

    # 整体替换标签
    if data.tag_ids is not None:
        tag_ids = await ensure_tags_owned(db, user_id, data.tag_ids)
        await db.execute(delete(SnippetTag).where(SnippetTag.snippet_id == snippet_id))
        for tag_id in tag_ids:
            db.add(SnippetTag(snippet_id=snippet_id, tag_id=tag_id))

    logger.info(f"[Snippet] 更新摘录: snippet={snippet_id}")
    return await _reload(db, snippet_id)


async def delete_snippet(db: AsyncSession, user_id: str, snippet_id: str) -> None:
    """删除摘录，消息和标签关联随之级联删除"""
    snippet = await get_owned_snippet(db, user_id, snippet_id)
    await db.delete(snippet)
    await db.flush()
    logger.info(f"[Snippet] 删除摘录: snippet={snippet_id}")


async def search_snippets(db: AsyncSession, user_id: str, query: str) -> List[Snippet]:
    """按标题搜索（不区分大小写的子串匹配）"""
    result = await db.execute(
        _list_query(user_id).where(Snippet.title.icontains(query, autoescape=True))
    )
    return list(result.scalars().all())


async def filter_snippets_by_tags(db: AsyncSession, user_id: str, tag_ids: List[str]) -> List[Snippet]:
    """按标签筛选：带有任一指定标签即命中；不指定标签时返回全部"""
    query = _list_query(user_id)
    if tag_ids:
        query = query.where(
            Snippet.id.in_(
                select(SnippetTag.snippet_id).where(SnippetTag.tag_id.in_(tag_ids))
            )
        )
    result = await db.execute(query)
    return list(result.scalars().all())
