"""测试辅助函数

Provides:
- 注册并登录，返回认证头
- 创建摘录、标签、消息的快捷方法
"""
from datetime import datetime

import httpx

DEFAULT_PASSWORD = "abcd1234"


async def register_and_login(client: httpx.AsyncClient, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """注册用户并返回 Authorization 头"""
    response = await client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text

    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def create_snippet(client: httpx.AsyncClient, headers: dict, title: str = "memo", **extra) -> dict:
    response = await client.post("/api/snippets", json={"title": title, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_tag(client: httpx.AsyncClient, headers: dict, name: str, **extra) -> dict:
    response = await client.post("/api/tags", json={"name": name, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_message(
    client: httpx.AsyncClient,
    headers: dict,
    snippet_id: str,
    content: str = "hello",
    sender: str = "あなた",
    sender_type: str = "user",
    **extra,
) -> dict:
    response = await client.post(
        "/api/messages",
        json={
            "snippet_id": snippet_id,
            "sender": sender,
            "sender_type": sender_type,
            "content": content,
            **extra,
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value)
