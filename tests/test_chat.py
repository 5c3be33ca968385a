"""
Tests for chats and messages
"""

import asyncio

import pytest
import pytest_asyncio
from sqlmodel import select

from netcafe.services.chat import ChatService, normalize_pair


def test_normalize_pair():
    assert normalize_pair(3, 9) == (3, 9)
    assert normalize_pair(9, 3) == (3, 9)
    with pytest.raises(ValueError):
        normalize_pair(4, 4)


@pytest_asyncio.fixture
async def tenant(runtime, acme):
    """Resolved acme context with a second user"""
    context = await runtime.resolver.resolve("acme")
    async with context.session() as session:
        admin = (await session.exec(select(context.schema.user))).first()
        waiter = context.schema.user(
            username="waiter",
            email="waiter@acme.com",
            password_hash="unused",
            role_id=admin.role_id,
        )
        session.add(waiter)
        await session.commit()
        await session.refresh(waiter)
    return context, admin.user_id, waiter.user_id


@pytest.mark.asyncio
async def test_chat_lookup_is_symmetric(tenant):
    context, admin_id, waiter_id = tenant
    async with context.session() as session:
        service = ChatService(session, context.schema)
        first = await service.get_or_create_chat(admin_id, waiter_id)
        second = await service.get_or_create_chat(waiter_id, admin_id)

    assert first.chat_id == second.chat_id
    assert first.low_user_id == min(admin_id, waiter_id)


@pytest.mark.asyncio
async def test_concurrent_chat_creation_yields_one_row(tenant):
    context, admin_id, waiter_id = tenant

    async def open_chat(a, b):
        async with context.session() as session:
            return (await ChatService(session, context.schema).get_or_create_chat(a, b)).chat_id

    ids = await asyncio.gather(open_chat(admin_id, waiter_id), open_chat(waiter_id, admin_id))
    assert ids[0] == ids[1]

    async with context.session() as session:
        chats = (await session.exec(select(context.schema.chat))).all()
    assert len(chats) == 1


@pytest.mark.asyncio
async def test_send_and_list_messages(tenant):
    context, admin_id, waiter_id = tenant
    async with context.session() as session:
        service = ChatService(session, context.schema)
        hello = await service.send_message(admin_id, waiter_id, "table 4 is ready")
        reply = await service.send_message(waiter_id, admin_id, "on it")
        messages = await service.list_messages(hello.chat_id)

        assert hello.chat_id == reply.chat_id
        assert [m.message for m in messages] == ["table 4 is ready", "on it"]
        assert await service.is_participant(hello.chat_id, waiter_id)
        assert not await service.is_participant(hello.chat_id, 999)


@pytest.mark.asyncio
async def test_message_to_unknown_user(tenant):
    context, admin_id, _ = tenant
    async with context.session() as session:
        with pytest.raises(LookupError):
            await ChatService(session, context.schema).send_message(admin_id, 999, "hi")
