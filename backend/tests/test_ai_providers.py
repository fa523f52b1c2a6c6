"""AI 提供方测试

Tests cover:
- 默认 AI 幂等补齐
- 默认 AI 不可修改、删除
- 自定义 AI 的增删改与重名检查
- 启用状态切换（新建或更新记录）
"""
from sqlalchemy import select

from chat_memo.models import AIProvider
from chat_memo.services.ai_providers import DEFAULT_AI_PROVIDERS


async def _ensure_defaults(client, headers):
    response = await client.post("/api/ai-providers/ensure-defaults", headers=headers)
    assert response.status_code == 200
    return response.json()


class TestDefaults:

    async def test_ensure_defaults_is_idempotent(self, client, alice, db_session):
        first = await _ensure_defaults(client, alice)
        second = await _ensure_defaults(client, alice)

        expected = [p["name"] for p in DEFAULT_AI_PROVIDERS]
        assert sorted(p["name"] for p in first) == sorted(expected)
        assert sorted(p["id"] for p in second) == sorted(p["id"] for p in first)

        result = await db_session.execute(select(AIProvider).where(AIProvider.is_default == True))  # noqa: E712
        names = [p.name for p in result.scalars().all()]
        assert sorted(names) == sorted(expected)

    async def test_defaults_are_shared(self, client, alice, bob):
        await _ensure_defaults(client, alice)
        defaults = (await client.get("/api/ai-providers/defaults", headers=bob)).json()
        assert len(defaults) == len(DEFAULT_AI_PROVIDERS)
        assert all(p["is_default"] and p["user_id"] is None for p in defaults)

    async def test_delete_default_forbidden(self, client, alice):
        defaults = await _ensure_defaults(client, alice)
        target = defaults[0]

        response = await client.delete(f"/api/ai-providers/{target['id']}", headers=alice)
        assert response.status_code == 403

        remaining = (await client.get("/api/ai-providers/defaults", headers=alice)).json()
        assert target["id"] in [p["id"] for p in remaining]

    async def test_update_default_forbidden(self, client, alice):
        defaults = await _ensure_defaults(client, alice)

        response = await client.patch(
            f"/api/ai-providers/{defaults[0]['id']}", json={"name": "Hacked"}, headers=alice
        )
        assert response.status_code == 403


class TestCustomProviders:

    async def test_create_and_list(self, client, alice, bob):
        await _ensure_defaults(client, alice)

        response = await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)
        assert response.status_code == 201
        custom = response.json()
        assert custom["icon"] == "bot"
        assert custom["is_default"] is False

        providers = (await client.get("/api/ai-providers", headers=alice)).json()
        assert [p["name"] for p in providers][-1] == "Grok"
        assert providers[0]["is_default"] is True

        bob_providers = (await client.get("/api/ai-providers", headers=bob)).json()
        assert "Grok" not in [p["name"] for p in bob_providers]

    async def test_duplicate_rejected(self, client, alice):
        await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)
        response = await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)
        assert response.status_code == 400
        assert response.json()["code"] == "E_DUPLICATE_NAME"

    async def test_update_and_delete(self, client, alice):
        custom = (await client.post("/api/ai-providers", json={"name": "Grok", "icon": "zap"}, headers=alice)).json()

        response = await client.patch(f"/api/ai-providers/{custom['id']}", json={"name": "Grok 2"}, headers=alice)
        assert response.status_code == 200
        assert response.json()["name"] == "Grok 2"
        assert response.json()["icon"] == "zap"

        response = await client.delete(f"/api/ai-providers/{custom['id']}", headers=alice)
        assert response.status_code == 200
        providers = (await client.get("/api/ai-providers", headers=alice)).json()
        assert custom["id"] not in [p["id"] for p in providers]

    async def test_foreign_custom_not_found(self, client, alice, bob):
        custom = (await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)).json()

        response = await client.delete(f"/api/ai-providers/{custom['id']}", headers=bob)
        assert response.status_code == 404
        response = await client.patch(f"/api/ai-providers/{custom['id']}", json={"name": "x"}, headers=bob)
        assert response.status_code == 404


class TestActiveAIs:

    async def test_toggle_creates_then_updates(self, client, alice):
        defaults = await _ensure_defaults(client, alice)
        provider_id = defaults[1]["id"]

        response = await client.put(
            "/api/ai-providers/active", json={"ai_provider_id": provider_id, "is_active": True}, headers=alice
        )
        assert response.status_code == 200
        record = response.json()
        assert record["is_active"] is True
        assert record["ai_provider"]["name"] == defaults[1]["name"]

        response = await client.put(
            "/api/ai-providers/active", json={"ai_provider_id": provider_id, "is_active": False}, headers=alice
        )
        assert response.json()["id"] == record["id"]
        assert response.json()["is_active"] is False

        active = (await client.get("/api/ai-providers/active", headers=alice)).json()
        assert len(active) == 1
        assert active[0]["is_active"] is False
        assert active[0]["ai_provider"]["id"] == provider_id

    async def test_toggle_foreign_custom_not_found(self, client, alice, bob):
        custom = (await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)).json()

        response = await client.put(
            "/api/ai-providers/active", json={"ai_provider_id": custom["id"], "is_active": True}, headers=bob
        )
        assert response.status_code == 404

    async def test_delete_custom_removes_activation(self, client, alice):
        custom = (await client.post("/api/ai-providers", json={"name": "Grok"}, headers=alice)).json()
        await client.put(
            "/api/ai-providers/active", json={"ai_provider_id": custom["id"], "is_active": True}, headers=alice
        )

        await client.delete(f"/api/ai-providers/{custom['id']}", headers=alice)
        assert (await client.get("/api/ai-providers/active", headers=alice)).json() == []
