"""归属校验测试（直接调用服务层）"""
import pytest
import pytest_asyncio

from chat_memo.errors import ApiErrorCode, ForbiddenError, NotFoundError
from chat_memo.schemas import AIProviderCreate, MessageCreate, SnippetCreate, TagCreate
from chat_memo.services import access
from chat_memo.services import ai_providers as provider_service
from chat_memo.services import messages as message_service
from chat_memo.services import snippets as snippet_service
from chat_memo.services import tags as tag_service
from chat_memo.services import users as user_service


@pytest_asyncio.fixture
async def users(db_session):
    """两个用户，各自一条摘录、一个标签、一条消息"""
    owner = await user_service.register_user(db_session, "owner@x.com", "abcd1234")
    other = await user_service.register_user(db_session, "other@y.com", "abcd1234")

    snippet = await snippet_service.create_snippet(db_session, owner.id, SnippetCreate(title="mine"))
    tag = await tag_service.create_tag(db_session, owner.id, TagCreate(name="work"))
    message = await message_service.create_message(
        db_session,
        owner.id,
        MessageCreate(snippet_id=snippet.id, sender="あなた", sender_type="user", content="hi"),
    )
    return {"owner": owner, "other": other, "snippet": snippet, "tag": tag, "message": message}


class TestOwnedEntities:

    async def test_owner_can_read(self, db_session, users):
        owner_id = users["owner"].id
        assert (await access.get_owned_snippet(db_session, owner_id, users["snippet"].id)).title == "mine"
        assert (await access.get_owned_tag(db_session, owner_id, users["tag"].id)).name == "work"
        assert (await access.get_owned_message(db_session, owner_id, users["message"].id)).content == "hi"

    async def test_foreign_and_missing_look_the_same(self, db_session, users):
        other_id = users["other"].id

        with pytest.raises(NotFoundError) as foreign:
            await access.get_owned_snippet(db_session, other_id, users["snippet"].id)
        with pytest.raises(NotFoundError) as missing:
            await access.get_owned_snippet(db_session, other_id, "no-such-id")
        assert foreign.value.to_dict() == missing.value.to_dict()

        with pytest.raises(NotFoundError):
            await access.get_owned_tag(db_session, other_id, users["tag"].id)
        with pytest.raises(NotFoundError):
            await access.get_owned_message(db_session, other_id, users["message"].id)

    async def test_snippet_tag_checks_both_sides(self, db_session, users):
        other_id = users["other"].id
        foreign_tag = await tag_service.create_tag(db_session, other_id, TagCreate(name="work"))

        # 自己的摘录 + 别人的标签
        with pytest.raises(NotFoundError):
            await access.find_owned_snippet_tag(
                db_session, users["owner"].id, users["snippet"].id, foreign_tag.id
            )
        # 别人的摘录 + 自己的标签
        other_snippet = await snippet_service.create_snippet(db_session, other_id, SnippetCreate(title="theirs"))
        with pytest.raises(NotFoundError):
            await access.find_owned_snippet_tag(db_session, users["owner"].id, other_snippet.id, users["tag"].id)

        assert await access.find_owned_snippet_tag(
            db_session, users["owner"].id, users["snippet"].id, users["tag"].id
        ) is None

    async def test_ensure_tags_owned_dedupes(self, db_session, users):
        tag_id = users["tag"].id
        assert await access.ensure_tags_owned(db_session, users["owner"].id, [tag_id, tag_id]) == [tag_id]
        assert await access.ensure_tags_owned(db_session, users["owner"].id, []) == []

        with pytest.raises(NotFoundError):
            await access.ensure_tags_owned(db_session, users["other"].id, [tag_id])


class TestProviders:

    async def test_default_readable_not_writable(self, db_session, users):
        defaults = await provider_service.ensure_default_providers(db_session)
        provider_id = defaults[0].id

        provider = await access.get_readable_provider(db_session, users["other"].id, provider_id)
        assert provider.is_default

        with pytest.raises(ForbiddenError) as exc_info:
            await access.get_writable_provider(db_session, users["owner"].id, provider_id)
        assert exc_info.value.code == ApiErrorCode.E_DEFAULT_PROVIDER_FORBIDDEN
        assert exc_info.value.status_code == 403

    async def test_custom_provider_owner_only(self, db_session, users):
        custom = await provider_service.create_custom_provider(
            db_session, users["owner"].id, AIProviderCreate(name="Grok")
        )

        assert (await access.get_writable_provider(db_session, users["owner"].id, custom.id)).name == "Grok"
        with pytest.raises(NotFoundError):
            await access.get_readable_provider(db_session, users["other"].id, custom.id)
