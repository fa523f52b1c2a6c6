"""AI 提供方模型"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class AIProvider(Base):
    """AI 提供方表

    user_id 为空且 is_default 为真的是系统默认提供方，所有用户共享；
    其余为用户自定义。
    """
    __tablename__ = "ai_providers"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_ai_providers_user_name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(50), nullable=False)
    icon = Column(String(50), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="ai_providers")
    activations = relationship("UserActiveAI", back_populates="ai_provider", cascade="all, delete-orphan")


class UserActiveAI(Base):
    """用户启用的 AI 提供方"""
    __tablename__ = "user_active_ais"
    __table_args__ = (
        UniqueConstraint("user_id", "ai_provider_id", name="uq_user_active_ais_user_provider"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    ai_provider_id = Column(String(36), ForeignKey("ai_providers.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="active_ais")
    ai_provider = relationship("AIProvider", back_populates="activations")
