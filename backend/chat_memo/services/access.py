"""归属校验

所有读写操作在触及数据之前都要经过这里：
- 有直接归属列的实体（摘录、标签、自定义 AI）在同一条查询里按 user_id 过滤；
- 没有归属列的实体（消息、摘录-标签关联）连同所属摘录一起取出再比较 user_id；
- 系统默认 AI 对所有人可读，但永远不能作为写入目标。

不存在与不属于当前用户返回同样的 NotFoundError，调用方无法区分。
"""
import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select, or_, and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from ..errors import NotFoundError, ForbiddenError, ApiErrorCode
from ..models import Snippet, Message, Tag, SnippetTag, AIProvider

logger = logging.getLogger(__name__)


async def get_owned_snippet(
    db: AsyncSession,
    user_id: str,
    snippet_id: str,
    options: Sequence = (),
) -> Snippet:
    """获取当前用户的摘录"""
    result = await db.execute(
        select(Snippet)
        .where(Snippet.id == snippet_id, Snippet.user_id == user_id)
        .options(*options)
    )
    snippet = result.scalar_one_or_none()
    if not snippet:
        raise NotFoundError("摘录不存在")
    return snippet


async def get_owned_tag(db: AsyncSession, user_id: str, tag_id: str) -> Tag:
    """获取当前用户的标签"""
    result = await db.execute(
        select(Tag).where(Tag.id == tag_id, Tag.user_id == user_id)
    )
    tag = result.scalar_one_or_none()
    if not tag:
        raise NotFoundError("标签不存在")
    return tag


async def ensure_tags_owned(db: AsyncSession, user_id: str, tag_ids: Iterable[str]) -> List[str]:
    """确认一组标签都属于当前用户，返回去重后的 ID（保持原顺序）"""
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []

    count = await db.scalar(
        select(func.count(Tag.id)).where(Tag.id.in_(unique_ids), Tag.user_id == user_id)
    )
    if count != len(unique_ids):
        raise NotFoundError("标签不存在")
    return unique_ids


async def get_owned_message(db: AsyncSession, user_id: str, message_id: str) -> Message:
    """获取消息，并经由所属摘录确认归属"""
    result = await db.execute(
        select(Message)
        .join(Message.snippet)
        .where(Message.id == message_id)
        .options(contains_eager(Message.snippet))
    )
    message = result.scalar_one_or_none()
    if not message or message.snippet is None or message.snippet.user_id != user_id:
        raise NotFoundError("消息不存在")
    return message


async def find_owned_snippet_tag(
    db: AsyncSession,
    user_id: str,
    snippet_id: str,
    tag_id: str,
) -> Optional[SnippetTag]:
    """查找摘录-标签关联，摘录和标签两侧都必须属于当前用户

    摘录或标签不可访问时抛出 NotFoundError；两者都可访问但尚未关联时返回 None。
    """
    await get_owned_snippet(db, user_id, snippet_id)
    await get_owned_tag(db, user_id, tag_id)

    result = await db.execute(
        select(SnippetTag).where(
            SnippetTag.snippet_id == snippet_id,
            SnippetTag.tag_id == tag_id,
        )
    )
    return result.scalar_one_or_none()


async def get_readable_provider(db: AsyncSession, user_id: str, provider_id: str) -> AIProvider:
    """获取可读的 AI 提供方（系统默认或自己创建的）"""
    result = await db.execute(
        select(AIProvider).where(
            AIProvider.id == provider_id,
            or_(
                AIProvider.user_id == user_id,
                and_(AIProvider.user_id.is_(None), AIProvider.is_default == True),  # noqa: E712
            ),
        )
    )
    provider = result.scalar_one_or_none()
    if not provider:
        raise NotFoundError("AI 不存在")
    return provider


async def get_writable_provider(db: AsyncSession, user_id: str, provider_id: str) -> AIProvider:
    """获取可修改的 AI 提供方，系统默认提供方拒绝写入"""
    provider = await get_readable_provider(db, user_id, provider_id)
    if provider.is_default or provider.user_id is None:
        logger.warning(f"[Access] 拒绝修改默认 AI: user={user_id} provider={provider_id}")
        raise ForbiddenError("不能修改或删除默认 AI", ApiErrorCode.E_DEFAULT_PROVIDER_FORBIDDEN)
    return provider
