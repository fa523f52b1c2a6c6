"""用户认证相关 Schema"""
from pydantic import BaseModel, EmailStr
from typing import Optional


class UserRegister(BaseModel):
    """用户注册

    字段允许缺省，由注册接口自行校验并返回 400。
    """
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    """用户登录"""
    email: EmailStr
    password: str


class RegisterResponse(BaseModel):
    """注册结果"""
    message: str


class Token(BaseModel):
    """Token 响应"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    """刷新 Token 请求"""
    refresh_token: str
