"""标签路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db
from ...models import User
from ...schemas import TagCreate, TagUpdate, TagResponse, SnippetTagResponse
from ...services import tags as tag_service
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[TagResponse])
async def get_tags(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取标签列表"""
    return await tag_service.get_tags(db, current_user.id)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_in: TagCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建标签"""
    return await tag_service.create_tag(db, current_user.id, tag_in)


@router.patch("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: str,
    tag_in: TagUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新标签"""
    return await tag_service.update_tag(db, current_user.id, tag_id, tag_in)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除标签（同时移除所有摘录上的该标签）"""
    await tag_service.delete_tag(db, current_user.id, tag_id)
    return {"message": "删除成功"}


# ==================== 摘录上的标签 ====================

@router.get("/snippet/{snippet_id}", response_model=List[TagResponse])
async def get_tags_for_snippet(
    snippet_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取摘录的标签"""
    return await tag_service.get_tags_for_snippet(db, current_user.id, snippet_id)


@router.post("/snippet/{snippet_id}/{tag_id}", response_model=SnippetTagResponse)
async def add_tag_to_snippet(
    snippet_id: str,
    tag_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """给摘录添加标签（重复添加直接返回已有关联）"""
    return await tag_service.add_tag_to_snippet(db, current_user.id, snippet_id, tag_id)


@router.delete("/snippet/{snippet_id}/{tag_id}")
async def remove_tag_from_snippet(
    snippet_id: str,
    tag_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """移除摘录上的标签"""
    await tag_service.remove_tag_from_snippet(db, current_user.id, snippet_id, tag_id)
    return {"message": "删除成功"}
