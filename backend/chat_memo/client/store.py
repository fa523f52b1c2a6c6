"""客户端数据层

查询经由 QueryCache，对延迟敏感的变更（消息增删改、AI 启用切换、标签和 AI 改名、
显示模式和用户名设置）经由 OptimisticCoordinator。删除类操作必须传入 confirm，
返回假值时不发送请求。
"""
import inspect
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Union

from .api import ChatMemoClient
from .cache import QueryCache, make_key
from .optimistic import OptimisticCoordinator, CacheTransaction, Notifier, temp_id

logger = logging.getLogger(__name__)

Confirm = Callable[[], Union[bool, Awaitable[bool]]]


async def _confirmed(confirm: Confirm) -> bool:
    answer = confirm()
    if inspect.isawaitable(answer):
        answer = await answer
    return bool(answer)


def _replace_item(items: List[dict], item_id: str, new_item: dict) -> List[dict]:
    return [new_item if item["id"] == item_id else item for item in items]


def _patch_item(items: List[dict], item_id: str, changes: dict) -> List[dict]:
    return [{**item, **changes} if item["id"] == item_id else item for item in items]


def _drop_item(items: List[dict], item_id: str) -> List[dict]:
    return [item for item in items if item["id"] != item_id]


class ChatMemoStore:
    """缓存 + 乐观更新的客户端入口"""

    def __init__(self, api: ChatMemoClient, notify: Optional[Notifier] = None, cache: QueryCache = None):
        self.api = api
        self.cache = cache or QueryCache(api.call)
        self.coordinator = OptimisticCoordinator(self.cache, notify)

    # ==================== 查询 ====================

    async def snippets(self) -> List[dict]:
        return await self.cache.fetch("snippet.getAll")

    async def snippet(self, snippet_id: str) -> Optional[dict]:
        return await self.cache.fetch("snippet.getById", id=snippet_id)

    async def tags(self) -> List[dict]:
        return await self.cache.fetch("tag.getAll")

    async def ai_providers(self) -> List[dict]:
        return await self.cache.fetch("aiProvider.getAll")

    async def active_ais(self) -> List[dict]:
        return await self.cache.fetch("aiProvider.getActiveAIs")

    async def settings(self) -> dict:
        return await self.cache.fetch("settings.get")

    # ==================== 普通变更 ====================

    async def create_snippet(self, title: str, tag_ids: List[str] = None) -> dict:
        params = {"title": title}
        if tag_ids is not None:
            params["tag_ids"] = tag_ids
        snippet = await self.api.call("snippet.create", **params)
        self.cache.invalidate_procedure("snippet.getAll")
        return snippet

    async def create_tag(self, name: str, color: str = None) -> dict:
        params = {"name": name}
        if color is not None:
            params["color"] = color
        tag = await self.api.call("tag.create", **params)
        self.cache.invalidate_procedure("tag.getAll")
        return tag

    async def _delete(self, confirm: Confirm, keys, apply, dispatch, invalidate=()) -> bool:
        if not await _confirmed(confirm):
            logger.info("[Store] 用户取消删除")
            return False
        await self.coordinator.mutate(keys=keys, apply=apply, dispatch=dispatch, invalidate=invalidate)
        return True

    async def delete_snippet(self, snippet_id: str, *, confirm: Confirm) -> bool:
        """删除摘录（需确认）"""
        list_key = make_key("snippet.getAll")

        def apply(tx: CacheTransaction):
            tx.patch(list_key, lambda items: _drop_item(items, snippet_id))

        return await self._delete(
            confirm,
            keys=[list_key],
            apply=apply,
            dispatch=lambda: self.api.call("snippet.delete", id=snippet_id),
            invalidate=[make_key("snippet.getById", id=snippet_id)],
        )

    async def delete_tag(self, tag_id: str, *, confirm: Confirm) -> bool:
        """删除标签（需确认）"""
        list_key = make_key("tag.getAll")

        def apply(tx: CacheTransaction):
            tx.patch(list_key, lambda items: _drop_item(items, tag_id))

        deleted = await self._delete(
            confirm,
            keys=[list_key],
            apply=apply,
            dispatch=lambda: self.api.call("tag.delete", id=tag_id),
        )
        if deleted:
            self.cache.invalidate_procedure("snippet.getAll")
            self.cache.invalidate_procedure("snippet.getById")
            self.cache.invalidate_procedure("tag.getForSnippet")
        return deleted

    async def delete_ai_provider(self, provider_id: str, *, confirm: Confirm) -> bool:
        """删除自定义 AI（需确认）"""
        list_key = make_key("aiProvider.getAll")
        active_key = make_key("aiProvider.getActiveAIs")

        def apply(tx: CacheTransaction):
            tx.patch(list_key, lambda items: _drop_item(items, provider_id))
            tx.patch(active_key, lambda items: [a for a in items if a["ai_provider_id"] != provider_id])

        return await self._delete(
            confirm,
            keys=[list_key, active_key],
            apply=apply,
            dispatch=lambda: self.api.call("aiProvider.delete", id=provider_id),
        )

    # ==================== 乐观变更：消息 ====================

    async def create_message(
        self,
        snippet_id: str,
        sender: str,
        sender_type: str,
        content: str,
        display_mode: str = None,
    ) -> dict:
        """创建消息，先以临时 ID 追加到摘录详情"""
        detail_key = make_key("snippet.getById", id=snippet_id)
        placeholder_id = temp_id()

        def apply(tx: CacheTransaction):
            def append(snippet):
                if snippet is None:
                    return None
                positions = [m["position"] for m in snippet["messages"]]
                snippet["messages"].append({
                    "id": placeholder_id,
                    "snippet_id": snippet_id,
                    "sender": sender,
                    "sender_type": sender_type,
                    "content": content,
                    "display_mode": display_mode,
                    "position": max(positions) + 1 if positions else 0,
                    "created_at": datetime.utcnow().isoformat(),
                })
                return snippet
            tx.patch(detail_key, append)

        def reconcile(tx: CacheTransaction, message: dict):
            snippet = self.cache.get_data(detail_key)
            if snippet is not None:
                snippet["messages"] = _replace_item(snippet["messages"], placeholder_id, message)
                self.cache.set_data(detail_key, snippet)

        params = {"snippet_id": snippet_id, "sender": sender, "sender_type": sender_type, "content": content}
        if display_mode is not None:
            params["display_mode"] = display_mode

        return await self.coordinator.mutate(
            keys=[detail_key],
            apply=apply,
            dispatch=lambda: self.api.call("message.create", **params),
            reconcile=reconcile,
            invalidate=[make_key("snippet.getAll")],
        )

    async def update_message(self, snippet_id: str, message_id: str, **changes) -> dict:
        """更新消息内容、显示模式或发送者"""
        detail_key = make_key("snippet.getById", id=snippet_id)

        def apply(tx: CacheTransaction):
            def update(snippet):
                if snippet is not None:
                    snippet["messages"] = _patch_item(snippet["messages"], message_id, changes)
                return snippet
            tx.patch(detail_key, update)

        def reconcile(tx: CacheTransaction, message: dict):
            snippet = self.cache.get_data(detail_key)
            if snippet is not None:
                snippet["messages"] = _replace_item(snippet["messages"], message_id, message)
                self.cache.set_data(detail_key, snippet)

        return await self.coordinator.mutate(
            keys=[detail_key],
            apply=apply,
            dispatch=lambda: self.api.call("message.update", id=message_id, **changes),
            reconcile=reconcile,
        )

    async def delete_message(self, snippet_id: str, message_id: str, *, confirm: Confirm) -> bool:
        """删除消息（需确认）"""
        detail_key = make_key("snippet.getById", id=snippet_id)

        def apply(tx: CacheTransaction):
            def drop(snippet):
                if snippet is not None:
                    snippet["messages"] = _drop_item(snippet["messages"], message_id)
                return snippet
            tx.patch(detail_key, drop)

        return await self._delete(
            confirm,
            keys=[detail_key],
            apply=apply,
            dispatch=lambda: self.api.call("message.delete", id=message_id),
        )

    # ==================== 乐观变更：AI / 标签 / 设置 ====================

    async def toggle_active(self, ai_provider_id: str, is_active: bool) -> dict:
        """切换 AI 启用状态"""
        active_key = make_key("aiProvider.getActiveAIs")
        placeholder_id = temp_id()

        def apply(tx: CacheTransaction):
            def toggle(records):
                for record in records:
                    if record["ai_provider_id"] == ai_provider_id:
                        record["is_active"] = is_active
                        return records
                providers = self.cache.get_data(make_key("aiProvider.getAll")) or []
                provider = next((p for p in providers if p["id"] == ai_provider_id), None)
                records.append({
                    "id": placeholder_id,
                    "user_id": None,
                    "ai_provider_id": ai_provider_id,
                    "is_active": is_active,
                    "ai_provider": provider,
                })
                return records
            tx.patch(active_key, toggle)

        def reconcile(tx: CacheTransaction, record: dict):
            records = self.cache.get_data(active_key)
            if records is not None:
                records = [r for r in records if r["ai_provider_id"] != ai_provider_id]
                self.cache.set_data(active_key, records + [record])

        return await self.coordinator.mutate(
            keys=[active_key],
            apply=apply,
            dispatch=lambda: self.api.call(
                "aiProvider.toggleActive", ai_provider_id=ai_provider_id, is_active=is_active
            ),
            reconcile=reconcile,
        )

    async def update_tag(self, tag_id: str, **changes) -> dict:
        """重命名标签或修改颜色"""
        list_key = make_key("tag.getAll")

        def apply(tx: CacheTransaction):
            tx.patch(list_key, lambda items: _patch_item(items, tag_id, changes))

        def reconcile(tx: CacheTransaction, tag: dict):
            items = self.cache.get_data(list_key)
            if items is not None:
                self.cache.set_data(list_key, _replace_item(items, tag_id, tag))

        result = await self.coordinator.mutate(
            keys=[list_key],
            apply=apply,
            dispatch=lambda: self.api.call("tag.update", id=tag_id, **changes),
            reconcile=reconcile,
        )
        self.cache.invalidate_procedure("snippet.getAll")
        self.cache.invalidate_procedure("tag.getForSnippet")
        return result

    async def update_ai_provider(self, provider_id: str, name: str, icon: str = None) -> dict:
        """重命名自定义 AI"""
        list_key = make_key("aiProvider.getAll")
        changes = {"name": name}
        if icon is not None:
            changes["icon"] = icon

        def apply(tx: CacheTransaction):
            tx.patch(list_key, lambda items: _patch_item(items, provider_id, changes))

        def reconcile(tx: CacheTransaction, provider: dict):
            items = self.cache.get_data(list_key)
            if items is not None:
                self.cache.set_data(list_key, _replace_item(items, provider_id, provider))

        return await self.coordinator.mutate(
            keys=[list_key],
            apply=apply,
            dispatch=lambda: self.api.call("aiProvider.update", id=provider_id, **changes),
            reconcile=reconcile,
            invalidate=[make_key("aiProvider.getActiveAIs")],
        )

    async def _update_settings(self, procedure: str, changes: dict, params: dict) -> dict:
        settings_key = make_key("settings.get")

        def apply(tx: CacheTransaction):
            tx.patch(settings_key, lambda current: {**current, **changes})

        def reconcile(tx: CacheTransaction, updated: dict):
            self.cache.set_data(settings_key, updated)

        return await self.coordinator.mutate(
            keys=[settings_key],
            apply=apply,
            dispatch=lambda: self.api.call(procedure, **params),
            reconcile=reconcile,
        )

    async def update_display_mode(self, display_mode: str) -> dict:
        """修改默认显示模式"""
        return await self._update_settings(
            "settings.updateDisplayMode",
            {"default_display_mode": display_mode},
            {"display_mode": display_mode},
        )

    async def update_user_name(self, user_name: str) -> dict:
        """修改用户名"""
        return await self._update_settings(
            "settings.updateUserName",
            {"user_name": user_name},
            {"user_name": user_name},
        )
