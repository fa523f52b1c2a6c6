"""摘录、消息、标签相关 Schema"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Literal

from ..config import settings

DisplayMode = Literal["markdown", "plain"]
SenderType = Literal["user", "ai"]


# ==================== 标签 ====================

class TagCreate(BaseModel):
    """创建标签"""
    name: str = Field(..., min_length=1, max_length=settings.MAX_TAG_NAME_LENGTH)
    color: Optional[str] = None


class TagUpdate(BaseModel):
    """更新标签"""
    name: Optional[str] = Field(None, min_length=1, max_length=settings.MAX_TAG_NAME_LENGTH)
    color: Optional[str] = None


class TagResponse(BaseModel):
    """标签响应"""
    id: str
    name: str
    color: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SnippetTagResponse(BaseModel):
    """摘录-标签关联响应"""
    snippet_id: str
    tag_id: str

    class Config:
        from_attributes = True


# ==================== 消息 ====================

class MessageCreate(BaseModel):
    """创建消息（position 由服务端计算）"""
    snippet_id: str
    sender: str = Field(..., max_length=100)
    sender_type: SenderType
    content: str
    display_mode: Optional[DisplayMode] = None


class MessageUpdate(BaseModel):
    """更新消息，只写入显式给出的字段"""
    content: Optional[str] = None
    display_mode: Optional[DisplayMode] = None
    sender_type: Optional[SenderType] = None
    sender: Optional[str] = Field(None, max_length=100)


class MessageResponse(BaseModel):
    """消息响应"""
    id: str
    snippet_id: str
    sender: str
    sender_type: str
    content: str
    display_mode: Optional[str] = None
    position: int
    created_at: datetime

    class Config:
        from_attributes = True


# ==================== 摘录 ====================

class SnippetCreate(BaseModel):
    """创建摘录"""
    title: str = Field(..., min_length=1, max_length=settings.MAX_TITLE_LENGTH)
    tag_ids: Optional[List[str]] = None


class SnippetUpdate(BaseModel):
    """更新摘录"""
    title: Optional[str] = Field(None, min_length=1, max_length=settings.MAX_TITLE_LENGTH)
    tag_ids: Optional[List[str]] = None


class SnippetResponse(BaseModel):
    """摘录响应（列表用，含标签）"""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    tags: List[TagResponse] = []

    class Config:
        from_attributes = True


class SnippetDetailResponse(SnippetResponse):
    """摘录详情（含按位置排序的消息）"""
    messages: List[MessageResponse] = []
