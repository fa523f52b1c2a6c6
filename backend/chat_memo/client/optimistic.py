"""乐观更新

一次乐观变更分为六步：

1. 快照：记录将被改动的每个缓存条目的当前值；
2. 预写：立即把预期结果写入缓存，新建实体使用临时 ID；
3. 发送：调用服务端过程；
4. 成功：用服务端返回的权威字段修正缓存；
5. 失败：原样恢复第 1 步的所有快照，并通知用户；
6. 无论成败：把涉及的条目标记为过期，下次读取时与服务端重新同步。

第 2 步之前会取消这些键上进行中的读取。同一键上的多个变更按顺序完成快照和预写，
后一个变更的快照一定包含前一个变更的预写结果。
"""
import asyncio
import copy
import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from .cache import QueryCache, CacheKey, MISSING

logger = logging.getLogger(__name__)

Notifier = Callable[[Exception], None]


def temp_id() -> str:
    """新建实体在服务端确认前使用的临时 ID"""
    return f"temp-{uuid.uuid4().hex}"


def is_temp_id(value: str) -> bool:
    return isinstance(value, str) and value.startswith("temp-")


class CacheTransaction:
    """缓存变更日志：记录变更前的值，失败时整体恢复"""

    def __init__(self, cache: QueryCache):
        self.cache = cache
        self._before: Dict[CacheKey, Any] = {}

    @property
    def keys(self) -> List[CacheKey]:
        return list(self._before)

    def snapshot(self, key: CacheKey) -> None:
        """记录某个键的当前值，同一键只记录第一次"""
        if key not in self._before:
            self._before[key] = copy.deepcopy(self.cache.get_data(key, MISSING))

    def patch(self, key: CacheKey, updater: Callable[[Any], Any]) -> bool:
        """用 updater 生成新值写入缓存；缓存中没有该键时不做预写"""
        self.snapshot(key)
        current = self.cache.get_data(key, MISSING)
        if current is MISSING:
            return False
        self.cache.set_data(key, updater(copy.deepcopy(current)))
        return True

    def restore(self) -> None:
        """恢复所有快照"""
        for key, value in self._before.items():
            if value is MISSING:
                self.cache.remove(key)
            else:
                self.cache.set_data(key, copy.deepcopy(value))


def default_notify(error: Exception) -> None:
    logger.warning(f"[Cache] 操作失败，已回滚: {error}")


class OptimisticCoordinator:
    """乐观更新协调器"""

    def __init__(self, cache: QueryCache, notify: Optional[Notifier] = None):
        self.cache = cache
        self.notify = notify or default_notify
        self._locks: Dict[CacheKey, asyncio.Lock] = {}
        self._holders: Dict[CacheKey, int] = {}

    @asynccontextmanager
    async def _hold(self, key: CacheKey):
        """持有某个键的锁；没有变更持有或等待时释放该锁对象"""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    async def mutate(
        self,
        keys: Iterable[CacheKey],
        apply: Callable[[CacheTransaction], None],
        dispatch: Callable[[], Awaitable[Any]],
        reconcile: Optional[Callable[[CacheTransaction, Any], None]] = None,
        invalidate: Iterable[CacheKey] = (),
    ) -> Any:
        """执行一次乐观变更

        Args:
            keys: 预写会改动的缓存键
            apply: 预写函数，通过 CacheTransaction.patch 修改缓存
            dispatch: 发送请求，返回服务端结果
            reconcile: 成功后用服务端结果修正缓存
            invalidate: 除 keys 外，结束后还需要标记过期的键

        请求失败时恢复快照、调用 notify，然后重新抛出原异常。
        预写本身出错时同样恢复快照并标记过期，但不通知用户。
        """
        keys = list(dict.fromkeys(keys))
        tx = CacheTransaction(self.cache)

        # 同一键上的快照和预写串行执行；按固定顺序加锁避免互相等待
        async with AsyncExitStack() as stack:
            for key in sorted(keys, key=repr):
                await stack.enter_async_context(self._hold(key))
            for key in keys:
                await self.cache.cancel(key)
            for key in keys:
                tx.snapshot(key)
            try:
                apply(tx)
            except Exception:
                tx.restore()
                for key in keys:
                    self.cache.invalidate(key)
                raise

        try:
            result = await dispatch()
        except (Exception, asyncio.CancelledError) as e:
            tx.restore()
            self.notify(e)
            raise
        else:
            if reconcile is not None:
                reconcile(tx, result)
            return result
        finally:
            for key in list(keys) + list(invalidate):
                self.cache.invalidate(key)
