"""客户端数据层端到端测试

ChatMemoClient 通过 ASGITransport 直接调用应用，验证乐观变更在真实服务端上的
修正、回滚与确认行为。
"""
import pytest
import pytest_asyncio

from chat_memo.client import ChatMemoClient, ChatMemoStore, make_key, is_temp_id
from chat_memo.errors import DuplicateNameError, ForbiddenError, NotFoundError, UnauthenticatedError

from tests.helpers import DEFAULT_PASSWORD


@pytest_asyncio.fixture
async def api(client):
    api = ChatMemoClient(client)
    await api.register("carol@z.com", DEFAULT_PASSWORD)
    await api.login("carol@z.com", DEFAULT_PASSWORD)
    return api


@pytest_asyncio.fixture
async def store(api):
    errors = []
    store = ChatMemoStore(api, notify=errors.append)
    store.errors = errors
    return store


class TestClient:

    async def test_requires_login(self, client):
        with pytest.raises(UnauthenticatedError):
            await ChatMemoClient(client).call("snippet.getAll")

    async def test_get_by_id_missing_is_none(self, api):
        assert await api.call("snippet.getById", id="missing") is None

    async def test_other_not_found_raises(self, api):
        with pytest.raises(NotFoundError):
            await api.call("message.getBySnippetId", snippet_id="missing")

    async def test_unknown_procedure(self, api):
        with pytest.raises(ValueError):
            await api.call("snippet.archive")

    async def test_refresh_rotates_tokens(self, api):
        await api.refresh()
        assert await api.call("snippet.getAll") == []

    async def test_default_provider_forbidden(self, api):
        defaults = await api.call("aiProvider.ensureDefaults")
        with pytest.raises(ForbiddenError):
            await api.call("aiProvider.delete", id=defaults[0]["id"])


class TestMessages:

    async def test_create_message_replaces_temp_id(self, store):
        snippet = await store.create_snippet("memo")
        assert (await store.snippet(snippet["id"]))["messages"] == []

        message = await store.create_message(snippet["id"], "あなた", "user", "hello")

        assert not is_temp_id(message["id"])
        key = make_key("snippet.getById", id=snippet["id"])
        cached = store.cache.get_data(key)
        assert [m["id"] for m in cached["messages"]] == [message["id"]]
        assert store.cache.is_stale(key)

        refreshed = await store.snippet(snippet["id"])
        assert refreshed["messages"][0]["position"] == 0
        assert refreshed["messages"][0]["content"] == "hello"

    async def test_create_message_rolls_back(self, store, api):
        snippet = await store.create_snippet("memo")
        before = await store.snippet(snippet["id"])
        await api.call("snippet.delete", id=snippet["id"])

        with pytest.raises(NotFoundError):
            await store.create_message(snippet["id"], "あなた", "user", "hello")

        key = make_key("snippet.getById", id=snippet["id"])
        assert store.cache.get_data(key) == before
        assert len(store.errors) == 1
        assert await store.snippet(snippet["id"]) is None

    async def test_update_and_delete_message(self, store):
        snippet = await store.create_snippet("memo")
        message = await store.create_message(snippet["id"], "ChatGPT", "ai", "hi")
        await store.snippet(snippet["id"])

        updated = await store.update_message(snippet["id"], message["id"], content="edited", display_mode="plain")
        assert updated["content"] == "edited"
        assert updated["display_mode"] == "plain"
        assert updated["sender"] == "ChatGPT"

        assert await store.delete_message(snippet["id"], message["id"], confirm=lambda: True)
        assert (await store.snippet(snippet["id"]))["messages"] == []


class TestConfirmation:

    async def test_declined_delete_dispatches_nothing(self, store, api):
        snippet = await store.create_snippet("keep me")

        assert await store.delete_snippet(snippet["id"], confirm=lambda: False) is False
        assert await api.call("snippet.getById", id=snippet["id"]) is not None

    async def test_async_confirm(self, store, api):
        snippet = await store.create_snippet("drop me")
        await store.snippets()

        async def confirm():
            return True

        assert await store.delete_snippet(snippet["id"], confirm=confirm) is True
        assert await api.call("snippet.getById", id=snippet["id"]) is None
        assert await store.snippets() == []


class TestTagsAndSettings:

    async def test_duplicate_tag_rename_rolls_back(self, store):
        await store.create_tag("work")
        home = await store.create_tag("home")
        before = await store.tags()

        with pytest.raises(DuplicateNameError):
            await store.update_tag(home["id"], name="work")

        assert store.cache.get_data(make_key("tag.getAll")) == before
        assert isinstance(store.errors[0], DuplicateNameError)

    async def test_duplicate_tag_create(self, store):
        await store.create_tag("work")
        with pytest.raises(DuplicateNameError):
            await store.create_tag("work")

    async def test_toggle_active(self, store, api):
        defaults = await api.call("aiProvider.ensureDefaults")
        await store.ai_providers()
        assert await store.active_ais() == []

        record = await store.toggle_active(defaults[0]["id"], True)

        cached = store.cache.get_data(make_key("aiProvider.getActiveAIs"))
        assert [r["id"] for r in cached] == [record["id"]]
        assert (await store.active_ais())[0]["is_active"] is True

    async def test_settings_updates(self, store):
        assert (await store.settings())["default_display_mode"] == "markdown"

        await store.update_display_mode("plain")
        await store.update_user_name("Carol")

        current = await store.settings()
        assert current["default_display_mode"] == "plain"
        assert current["user_name"] == "Carol"
