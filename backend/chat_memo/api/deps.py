"""路由依赖"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import UnauthenticatedError
from ..models import User
from ..services.users import get_user
from ..utils.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """从 Bearer 访问令牌解析当前用户"""
    if credentials is None:
        raise UnauthenticatedError()

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise UnauthenticatedError("无效的访问令牌")

    user = await get_user(db, payload.get("sub"))
    if not user or not user.is_active:
        raise UnauthenticatedError("用户不存在或已被禁用")

    return user
