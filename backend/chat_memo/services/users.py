"""用户注册与登录"""
import logging
from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import InvalidRequestError
from ..models import User
from ..utils.security import hash_password, verify_password
from .user_settings import new_settings

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


async def register_user(db: AsyncSession, email: Optional[str], password: Optional[str]) -> User:
    """注册用户并同时创建默认设置"""
    if not email or not password:
        raise InvalidRequestError("邮箱和密码为必填项")

    try:
        email = _email_adapter.validate_python(email)
    except ValidationError:
        raise InvalidRequestError("邮箱格式不正确")

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise InvalidRequestError("该邮箱已被注册")

    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise InvalidRequestError(f"密码至少 {settings.MIN_PASSWORD_LENGTH} 位")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    await db.flush()

    db.add(new_settings(user.id))
    await db.flush()
    await db.refresh(user)

    logger.info(f"[Auth] 新用户注册: user={user.id}")
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """校验邮箱和密码，失败返回 None"""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()
