"""摘录相关模型"""
from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class Tag(Base):
    """标签表"""
    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="tags")
    snippet_links = relationship("SnippetTag", back_populates="tag", cascade="all, delete-orphan")


class SnippetTag(Base):
    """摘录-标签关联表"""
    __tablename__ = "snippet_tags"

    snippet_id = Column(String(36), ForeignKey("snippets.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    snippet = relationship("Snippet", back_populates="tag_links")
    tag = relationship("Tag", back_populates="snippet_links")


class Snippet(Base):
    """摘录表"""
    __tablename__ = "snippets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="snippets")
    messages = relationship(
        "Message",
        back_populates="snippet",
        cascade="all, delete-orphan",
        order_by="Message.position",
    )
    tag_links = relationship("SnippetTag", back_populates="snippet", cascade="all, delete-orphan")
    tags = relationship("Tag", secondary="snippet_tags", viewonly=True, order_by="Tag.created_at")


class Message(Base):
    """消息表"""
    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("snippet_id", "position", name="uq_messages_snippet_position"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    snippet_id = Column(String(36), ForeignKey("snippets.id", ondelete="CASCADE"), nullable=False, index=True)
    sender = Column(String(100), nullable=False)
    sender_type = Column(String(10), nullable=False)  # user / ai
    content = Column(Text, nullable=False, default="")
    display_mode = Column(String(20), nullable=True)  # 为空时沿用用户默认显示模式
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    snippet = relationship("Snippet", back_populates="messages")
