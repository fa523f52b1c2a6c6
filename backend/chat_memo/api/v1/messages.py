"""消息路由"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db
from ...models import User
from ...schemas import MessageCreate, MessageUpdate, MessageResponse
from ...services import messages as message_service
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[MessageResponse])
async def get_messages(
    snippet_id: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取摘录下的消息"""
    return await message_service.get_messages(db, current_user.id, snippet_id)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(
    message_in: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建消息"""
    return await message_service.create_message(db, current_user.id, message_in)


@router.patch("/{message_id}", response_model=MessageResponse)
async def update_message(
    message_id: str,
    message_in: MessageUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新消息"""
    return await message_service.update_message(db, current_user.id, message_id, message_in)


@router.delete("/{message_id}")
async def delete_message(
    message_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除消息"""
    await message_service.delete_message(db, current_user.id, message_id)
    return {"message": "删除成功"}
