"""Chat Memo API 客户端

以 "实体.过程" 的名称调用服务端，例如::

    client = ChatMemoClient(httpx.AsyncClient(base_url="http://localhost:8000"))
    await client.login("a@x.com", "abcd1234")
    snippets = await client.call("snippet.getAll")
    message = await client.call("message.create", snippet_id=..., sender="あなた",
                                sender_type="user", content="hello")

错误响应还原为 chat_memo.errors 中的异常类型。
"""
import logging
import string
from typing import Any, Optional

import httpx

from ..errors import ApiError, NotFoundError, error_from_response

logger = logging.getLogger(__name__)

# 过程名 -> (HTTP 方法, 路径模板)
# 路径模板中的占位符取自同名参数，GET 的其余参数作为查询串，其它方法作为 JSON 请求体
PROCEDURES: dict[str, tuple[str, str]] = {
    "snippet.getAll": ("GET", "/snippets"),
    "snippet.getById": ("GET", "/snippets/{id}"),
    "snippet.create": ("POST", "/snippets"),
    "snippet.update": ("PATCH", "/snippets/{id}"),
    "snippet.delete": ("DELETE", "/snippets/{id}"),
    "snippet.search": ("GET", "/snippets/search"),
    "snippet.filterByTags": ("GET", "/snippets/filter"),

    "message.getBySnippetId": ("GET", "/messages"),
    "message.create": ("POST", "/messages"),
    "message.update": ("PATCH", "/messages/{id}"),
    "message.delete": ("DELETE", "/messages/{id}"),

    "tag.getAll": ("GET", "/tags"),
    "tag.create": ("POST", "/tags"),
    "tag.update": ("PATCH", "/tags/{id}"),
    "tag.delete": ("DELETE", "/tags/{id}"),
    "tag.addToSnippet": ("POST", "/tags/snippet/{snippet_id}/{tag_id}"),
    "tag.removeFromSnippet": ("DELETE", "/tags/snippet/{snippet_id}/{tag_id}"),
    "tag.getForSnippet": ("GET", "/tags/snippet/{snippet_id}"),

    "aiProvider.getAll": ("GET", "/ai-providers"),
    "aiProvider.getDefaults": ("GET", "/ai-providers/defaults"),
    "aiProvider.createCustom": ("POST", "/ai-providers"),
    "aiProvider.update": ("PATCH", "/ai-providers/{id}"),
    "aiProvider.delete": ("DELETE", "/ai-providers/{id}"),
    "aiProvider.ensureDefaults": ("POST", "/ai-providers/ensure-defaults"),
    "aiProvider.getActiveAIs": ("GET", "/ai-providers/active"),
    "aiProvider.toggleActive": ("PUT", "/ai-providers/active"),

    "settings.get": ("GET", "/settings"),
    "settings.update": ("PATCH", "/settings"),
    "settings.updateUserName": ("PUT", "/settings/user-name"),
    "settings.updateDisplayMode": ("PUT", "/settings/display-mode"),
    "settings.addCustomAI": ("POST", "/settings/custom-ais"),
    "settings.removeCustomAI": ("POST", "/settings/custom-ais/remove"),
}

# 404 时返回 None 而不是抛出异常的过程
NULLABLE_PROCEDURES = {"snippet.getById"}

_formatter = string.Formatter()


def _path_fields(template: str) -> list[str]:
    return [field for _, field, _, _ in _formatter.parse(template) if field]


class ChatMemoClient:
    """异步 API 客户端"""

    def __init__(self, http_client: httpx.AsyncClient, api_prefix: str = "/api"):
        self.http = http_client
        self.api_prefix = api_prefix.rstrip("/")
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

    def _headers(self) -> dict:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self.http.request(
            method,
            f"{self.api_prefix}{path}",
            headers=self._headers(),
            **kwargs,
        )
        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            raise error_from_response(response.status_code, payload)
        return response

    # ==================== 认证 ====================

    async def register(self, email: str, password: str) -> dict:
        """注册新用户"""
        response = await self._request("POST", "/auth/register", json={"email": email, "password": password})
        return response.json()

    async def login(self, email: str, password: str) -> None:
        """登录并保存令牌"""
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        tokens = response.json()
        self.access_token = tokens["access_token"]
        self.refresh_token = tokens["refresh_token"]

    async def refresh(self) -> None:
        """用刷新令牌换新令牌"""
        response = await self._request("POST", "/auth/refresh", json={"refresh_token": self.refresh_token})
        tokens = response.json()
        self.access_token = tokens["access_token"]
        self.refresh_token = tokens["refresh_token"]

    # ==================== 过程调用 ====================

    async def call(self, procedure: str, **params) -> Any:
        """调用一个过程并返回解码后的 JSON"""
        try:
            method, template = PROCEDURES[procedure]
        except KeyError:
            raise ValueError(f"未知的过程: {procedure}")

        path_params = {name: params.pop(name) for name in _path_fields(template)}
        path = template.format(**path_params)

        kwargs: dict = {}
        if method == "GET":
            kwargs["params"] = params
        elif method != "DELETE":
            kwargs["json"] = params

        logger.debug(f"[Client] {procedure} {method} {path}")
        try:
            response = await self._request(method, path, **kwargs)
        except NotFoundError:
            if procedure in NULLABLE_PROCEDURES:
                return None
            raise
        except ApiError as e:
            logger.debug(f"[Client] {procedure} 失败: {e.code.value} {e.message}")
            raise

        return response.json()
