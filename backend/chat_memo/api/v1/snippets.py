"""摘录路由"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db
from ...errors import NotFoundError
from ...models import User
from ...schemas import SnippetCreate, SnippetUpdate, SnippetResponse, SnippetDetailResponse
from ...services import snippets as snippet_service
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[SnippetResponse])
async def get_snippets(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取全部摘录（含标签），按更新时间倒序"""
    return await snippet_service.get_snippets(db, current_user.id)


@router.get("/search", response_model=List[SnippetResponse])
async def search_snippets(
    query: str = Query(""),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """按标题搜索摘录"""
    return await snippet_service.search_snippets(db, current_user.id, query)


@router.get("/filter", response_model=List[SnippetResponse])
async def filter_snippets(
    tag_ids: List[str] = Query([]),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """按标签筛选摘录（任一匹配）"""
    return await snippet_service.filter_snippets_by_tags(db, current_user.id, tag_ids)


@router.get("/{snippet_id}", response_model=SnippetDetailResponse)
async def get_snippet(
    snippet_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取单个摘录（含消息和标签）"""
    snippet = await snippet_service.get_snippet(db, current_user.id, snippet_id)
    if not snippet:
        raise NotFoundError("摘录不存在")
    return snippet


@router.post("", response_model=SnippetResponse, status_code=status.HTTP_201_CREATED)
async def create_snippet(
    snippet_in: SnippetCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建摘录"""
    return await snippet_service.create_snippet(db, current_user.id, snippet_in)


@router.patch("/{snippet_id}", response_model=SnippetResponse)
async def update_snippet(
    snippet_id: str,
    snippet_in: SnippetUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新摘录"""
    return await snippet_service.update_snippet(db, current_user.id, snippet_id, snippet_in)


@router.delete("/{snippet_id}")
async def delete_snippet(
    snippet_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除摘录"""
    await snippet_service.delete_snippet(db, current_user.id, snippet_id)
    return {"message": "删除成功"}
