"""API 路由"""
from fastapi import APIRouter
from .v1 import auth, snippets, messages, tags, ai_providers, settings

api_router = APIRouter()

# 注册路由
api_router.include_router(auth.router, prefix="/auth", tags=["认证"])
api_router.include_router(snippets.router, prefix="/snippets", tags=["摘录"])
api_router.include_router(messages.router, prefix="/messages", tags=["消息"])
api_router.include_router(tags.router, prefix="/tags", tags=["标签"])
api_router.include_router(ai_providers.router, prefix="/ai-providers", tags=["AI"])
api_router.include_router(settings.router, prefix="/settings", tags=["设置"])
