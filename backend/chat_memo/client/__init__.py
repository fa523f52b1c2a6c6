"""Chat Memo 客户端：API 调用、查询缓存与乐观更新"""
from .api import ChatMemoClient, PROCEDURES
from .cache import QueryCache, make_key
from .optimistic import OptimisticCoordinator, CacheTransaction, temp_id, is_temp_id
from .store import ChatMemoStore

__all__ = [
    "ChatMemoClient", "PROCEDURES",
    "QueryCache", "make_key",
    "OptimisticCoordinator", "CacheTransaction", "temp_id", "is_temp_id",
    "ChatMemoStore",
]
