"""数据模型"""
from .user import User, UserSettings
from .snippet import Snippet, Message, Tag, SnippetTag
from .ai_provider import AIProvider, UserActiveAI

__all__ = [
    "User", "UserSettings",
    "Snippet", "Message", "Tag", "SnippetTag",
    "AIProvider", "UserActiveAI",
]
