"""认证路由"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ...errors import UnauthenticatedError, ForbiddenError, InternalError
from ...schemas import UserRegister, UserLogin, RegisterResponse, Token, RefreshTokenRequest
from ...services import users as user_service
from ...utils.security import create_access_token, create_refresh_token, decode_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserRegister, db: AsyncSession = Depends(get_db)):
    """用户注册（同时创建默认设置）"""
    try:
        await user_service.register_user(db, user_in.email, user_in.password)
    except SQLAlchemyError:
        logger.exception("[Auth] 注册失败")
        raise InternalError("注册失败")

    return RegisterResponse(message="用户已创建")


@router.post("/login", response_model=Token)
async def login(user_in: UserLogin, db: AsyncSession = Depends(get_db)):
    """用户登录"""
    user = await user_service.authenticate(db, user_in.email, user_in.password)

    if not user:
        raise UnauthenticatedError("邮箱或密码错误")

    if not user.is_active:
        raise ForbiddenError("用户已被禁用")

    # 生成令牌
    return Token(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id)
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(request: RefreshTokenRequest, db: AsyncSession = Depends(get_db)):
    """刷新令牌"""
    payload = decode_token(request.refresh_token)

    if payload is None or payload.get("type") != "refresh":
        raise UnauthenticatedError("无效的刷新令牌")

    # 验证用户
    user = await user_service.get_user(db, payload.get("sub"))
    if not user or not user.is_active:
        raise UnauthenticatedError("用户不存在或已被禁用")

    # 生成新令牌
    return Token(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id)
    )
