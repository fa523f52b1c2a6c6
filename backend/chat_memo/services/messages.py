"""消息服务"""
import logging
from datetime import datetime
from typing import List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Message
from ..schemas import MessageCreate, MessageUpdate
from .access import get_owned_snippet, get_owned_message
from .base import collect_changes, apply_changes

logger = logging.getLogger(__name__)


async def get_messages(db: AsyncSession, user_id: str, snippet_id: str) -> List[Message]:
    """获取摘录下的消息，按位置升序"""
    await get_owned_snippet(db, user_id, snippet_id)
    result = await db.execute(
        select(Message)
        .where(Message.snippet_id == snippet_id)
        .order_by(Message.position.asc())
    )
    return list(result.scalars().all())


async def next_position(db: AsyncSession, snippet_id: str) -> int:
    """下一个消息位置：现有最大位置 + 1，没有消息时为 0

    先读后写，不防并发：同一摘录的并发创建可能撞上唯一约束而失败。
    """
    max_position = await db.scalar(
        select(func.max(Message.position)).where(Message.snippet_id == snippet_id)
    )
    return 0 if max_position is None else max_position + 1


async def create_message(db: AsyncSession, user_id: str, data: MessageCreate) -> Message:
    """创建消息，并在同一事务内刷新所属摘录的更新时间"""
    snippet = await get_owned_snippet(db, user_id, data.snippet_id)
    position = await next_position(db, snippet.id)

    message = Message(
        snippet_id=snippet.id,
        sender=data.sender,
        sender_type=data.sender_type,
        content=data.content,
        display_mode=data.display_mode,
        position=position,
    )
    db.add(message)
    snippet.updated_at = datetime.utcnow()

    await db.flush()
    await db.refresh(message)
    logger.info(f"[Message] 创建消息: snippet={snippet.id} position={position}")
    return message


async def update_message(db: AsyncSession, user_id: str, message_id: str, data: MessageUpdate) -> Message:
    """更新消息，只写入显式给出的字段"""
    message = await get_owned_message(db, user_id, message_id)

    changes = collect_changes(data, nullable=("display_mode",))
    apply_changes(message, changes)

    await db.flush()
    await db.refresh(message)
    logger.info(f"[Message] 更新消息: message={message_id} fields={sorted(changes)}")
    return message


async def delete_message(db: AsyncSession, user_id: str, message_id: str) -> None:
    """删除消息，其余消息的位置保持不变"""
    message = await get_owned_message(db, user_id, message_id)
    await db.delete(message)
    await db.flush()
    logger.info(f"[Message] 删除消息: message={message_id}")
