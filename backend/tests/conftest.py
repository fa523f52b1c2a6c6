"""Pytest 配置与公共 fixture

测试隔离策略：
- 所有测试共用一个临时 SQLite 文件，每个测试前删表重建；
- 测试结束后释放连接池，连接不会跨事件循环复用；
- HTTP 测试通过 httpx.ASGITransport 直接调用应用，不启动服务。
"""
import os
import tempfile

# 必须在导入 chat_memo 之前设置
_tmp_dir = tempfile.mkdtemp(prefix="chat_memo_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import httpx
import pytest_asyncio

from chat_memo import models  # noqa: F401
from chat_memo.database import Base, engine, AsyncSessionLocal
from chat_memo.main import app

from tests.helpers import register_and_login


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    """每个测试使用空数据库"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session():
    """直接访问服务层用的会话，测试结束时回滚未提交的改动"""
    async with AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client():
    """指向应用的 HTTP 客户端"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def alice(client):
    """已登录用户 alice 的认证头"""
    return await register_and_login(client, "alice@x.com")


@pytest_asyncio.fixture
async def bob(client):
    """已登录用户 bob 的认证头"""
    return await register_and_login(client, "bob@y.com")


