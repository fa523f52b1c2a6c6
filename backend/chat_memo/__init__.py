"""Chat Memo：AI 对话摘录笔记"""
__version__ = "1.0.0"
