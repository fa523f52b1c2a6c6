"""客户端查询缓存

以 (过程名, 参数) 为键缓存查询结果。条目可以被标记为过期（下次读取时重新请求），
正在进行的读取可以按键取消，以免过期的响应覆盖乐观写入的数据。
"""
import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple

from cachetools import TTLCache

from ..config import settings

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[Tuple[str, Hashable], ...]]
Fetcher = Callable[..., Awaitable[Any]]

MISSING = object()


def _freeze(value: Any) -> Hashable:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    return value


def make_key(procedure: str, **params) -> CacheKey:
    """生成缓存键"""
    return procedure, tuple(sorted((name, _freeze(value)) for name, value in params.items()))


@dataclass
class CacheEntry:
    data: Any
    stale: bool = False


class QueryCache:
    """查询缓存

    Args:
        fetcher: ``await fetcher(procedure, **params)`` 返回服务端数据
        maxsize: 最多缓存的条目数
        ttl: 条目存活秒数，过期后视为不存在
    """

    def __init__(self, fetcher: Fetcher, maxsize: int = None, ttl: int = None):
        self._fetcher = fetcher
        self._entries: TTLCache = TTLCache(
            maxsize=maxsize or settings.CACHE_MAX_SIZE,
            ttl=ttl or settings.CACHE_TTL,
        )
        self._inflight: Dict[CacheKey, asyncio.Task] = {}

    # ==================== 同步读写 ====================

    def get_data(self, key: CacheKey, default: Any = None) -> Any:
        """读取缓存数据（过期标记不影响读取）"""
        entry = self._entries.get(key)
        return default if entry is None else entry.data

    def set_data(self, key: CacheKey, data: Any) -> None:
        """写入数据并标记为最新"""
        self._entries[key] = CacheEntry(data=data)

    def remove(self, key: CacheKey) -> None:
        self._entries.pop(key, None)

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def invalidate(self, key: CacheKey) -> None:
        """标记为过期，下次 fetch 时重新请求"""
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True

    def invalidate_procedure(self, procedure: str) -> None:
        """把某个过程的所有缓存条目标记为过期"""
        for key in list(self._entries.keys()):
            if key[0] == procedure:
                self.invalidate(key)

    # ==================== 异步读取 ====================

    async def _load(self, key: CacheKey, procedure: str, params: dict) -> Any:
        data = await self._fetcher(procedure, **params)
        self.set_data(key, data)
        return data

    async def fetch(self, procedure: str, **params) -> Any:
        """读取数据：最新则直接返回，否则请求服务端

        同一键的并发读取共享一次请求。读取被 cancel() 取消时返回缓存中的当前数据。
        """
        key = make_key(procedure, **params)
        if not self.is_stale(key):
            return copy.deepcopy(self.get_data(key))

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, procedure, params))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))

        await asyncio.wait({task})
        if task.cancelled():
            return copy.deepcopy(self.get_data(key))
        return copy.deepcopy(task.result())

    def _forget(self, key: CacheKey, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def cancel(self, key: CacheKey) -> None:
        """取消该键上正在进行的读取，其结果不会写入缓存"""
        task = self._inflight.pop(key, None)
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait({task})
        logger.debug(f"[Cache] 取消读取: {key[0]}")
