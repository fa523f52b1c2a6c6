"""注册、登录与认证测试

Tests cover:
- 注册成功后自动创建默认设置
- 注册参数校验（缺失、格式、重复、密码长度）返回 400
- 登录、刷新令牌
- 未认证访问被拒绝
"""
import pytest

from tests.helpers import register_and_login


class TestRegister:
    """POST /api/auth/register"""

    async def test_register_creates_default_settings(self, client):
        """注册返回 201，之后设置为默认用户名和 markdown"""
        response = await client.post("/api/auth/register", json={"email": "a@x.com", "password": "abcd1234"})
        assert response.status_code == 201
        assert "message" in response.json()

        login = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "abcd1234"})
        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

        response = await client.get("/api/settings", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["user_name"] == "あなた"
        assert data["default_display_mode"] == "markdown"
        assert data["custom_ai_names"] == []

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"email": "a@x.com"},
            {"password": "abcd1234"},
            {"email": "", "password": "abcd1234"},
        ],
    )
    async def test_missing_fields_rejected(self, client, body):
        response = await client.post("/api/auth/register", json=body)
        assert response.status_code == 400

    async def test_mixed_case_domain_can_log_in(self, client):
        """域名大小写归一化后保存，注册与登录使用同一个邮箱"""
        response = await client.post(
            "/api/auth/register", json={"email": "Dana@Example.COM", "password": "abcd1234"}
        )
        assert response.status_code == 201

        login = await client.post("/api/auth/login", json={"email": "Dana@Example.COM", "password": "abcd1234"})
        assert login.status_code == 200

        response = await client.post(
            "/api/auth/register", json={"email": "Dana@example.com", "password": "abcd1234"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "E_INVALID_REQUEST"

    async def test_short_password_rejected(self, client):
        response = await client.post("/api/auth/register", json={"email": "a@x.com", "password": "abc1234"})
        assert response.status_code == 400

    async def test_invalid_email_rejected(self, client):
        response = await client.post("/api/auth/register", json={"email": "not-an-email", "password": "abcd1234"})
        assert response.status_code == 400

    async def test_duplicate_email_rejected(self, client):
        body = {"email": "a@x.com", "password": "abcd1234"}
        assert (await client.post("/api/auth/register", json=body)).status_code == 201

        response = await client.post("/api/auth/register", json=body)
        assert response.status_code == 400


class TestLogin:
    """POST /api/auth/login 与 /api/auth/refresh"""

    async def test_wrong_password_rejected(self, client):
        await register_and_login(client, "a@x.com")

        response = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong-pass"})
        assert response.status_code == 401
        assert response.json()["code"] == "E_UNAUTHENTICATED"

    async def test_refresh_issues_new_tokens(self, client):
        await client.post("/api/auth/register", json={"email": "a@x.com", "password": "abcd1234"})
        tokens = (await client.post("/api/auth/login", json={"email": "a@x.com", "password": "abcd1234"})).json()

        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_access_token_cannot_refresh(self, client):
        await client.post("/api/auth/register", json={"email": "a@x.com", "password": "abcd1234"})
        tokens = (await client.post("/api/auth/login", json={"email": "a@x.com", "password": "abcd1234"})).json()

        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401


class TestAuthentication:
    """受保护路由"""

    async def test_missing_token_rejected(self, client):
        response = await client.get("/api/snippets")
        assert response.status_code == 401

    async def test_garbage_token_rejected(self, client):
        response = await client.get("/api/snippets", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    async def test_refresh_token_not_accepted_as_access(self, client):
        await client.post("/api/auth/register", json={"email": "a@x.com", "password": "abcd1234"})
        tokens = (await client.post("/api/auth/login", json={"email": "a@x.com", "password": "abcd1234"})).json()

        response = await client.get(
            "/api/snippets", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        assert response.status_code == 401

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
