"""Pydantic Schemas"""
from .user import (
    UserRegister, UserLogin, RegisterResponse, Token, RefreshTokenRequest,
)
from .snippet import (
    TagCreate, TagUpdate, TagResponse, SnippetTagResponse,
    MessageCreate, MessageUpdate, MessageResponse,
    SnippetCreate, SnippetUpdate, SnippetResponse, SnippetDetailResponse,
)
from .ai_provider import (
    AIProviderCreate, AIProviderUpdate, AIProviderResponse,
    ToggleActiveRequest, UserActiveAIResponse,
)
from .settings import (
    SettingsUpdate, UserNameUpdate, DisplayModeUpdate, CustomAIRequest, UserSettingsResponse,
)

__all__ = [
    "UserRegister", "UserLogin", "RegisterResponse", "Token", "RefreshTokenRequest",
    "TagCreate", "TagUpdate", "TagResponse", "SnippetTagResponse",
    "MessageCreate", "MessageUpdate", "MessageResponse",
    "SnippetCreate", "SnippetUpdate", "SnippetResponse", "SnippetDetailResponse",
    "AIProviderCreate", "AIProviderUpdate", "AIProviderResponse",
    "ToggleActiveRequest", "UserActiveAIResponse",
    "SettingsUpdate", "UserNameUpdate", "DisplayModeUpdate", "CustomAIRequest", "UserSettingsResponse",
]
