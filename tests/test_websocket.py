"""
Tests for the chat room manager and the relay frame handler
"""

import json
from unittest.mock import AsyncMock

import pytest
from sqlmodel import select

from netcafe.api.websockets import handle_client_frame
from netcafe.core.websocket_manager import ChatRoomManager
from netcafe.services.chat import ChatService


def make_socket():
    websocket = AsyncMock()
    websocket.send_text = AsyncMock()
    websocket.send_json = AsyncMock()
    return websocket


@pytest.mark.asyncio
async def test_broadcast_skips_sender_and_other_rooms():
    rooms = ChatRoomManager()
    sender, receiver, elsewhere, other_tenant = (make_socket() for _ in range(4))
    rooms.join(sender, "tenant_a", 1)
    rooms.join(receiver, "tenant_a", 1)
    rooms.join(elsewhere, "tenant_a", 2)
    rooms.join(other_tenant, "tenant_b", 1)

    delivered = await rooms.broadcast("tenant_a", 1, {"type": "receive_message"}, exclude=sender)

    assert delivered == 1
    receiver.send_text.assert_awaited_once_with(json.dumps({"type": "receive_message"}))
    sender.send_text.assert_not_awaited()
    elsewhere.send_text.assert_not_awaited()
    other_tenant.send_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_dead_connections_are_dropped():
    rooms = ChatRoomManager()
    alive, dead = make_socket(), make_socket()
    dead.send_text.side_effect = RuntimeError("socket closed")
    rooms.join(alive, "tenant_a", 1)
    rooms.join(dead, "tenant_a", 1)

    assert await rooms.broadcast("tenant_a", 1, {"type": "x"}) == 1
    assert rooms.members("tenant_a", 1) == {alive}


def test_disconnect_leaves_every_room():
    rooms = ChatRoomManager()
    websocket = make_socket()
    rooms.join(websocket, "tenant_a", 1)
    rooms.join(websocket, "tenant_a", 2)

    rooms.disconnect(websocket)

    assert rooms.get_connection_count() == {"rooms": 0, "connections": 0}


@pytest.mark.asyncio
async def test_send_message_frame_persists_and_relays(runtime, acme):
    context = await runtime.resolver.resolve("acme")
    schema = context.schema
    async with context.session() as session:
        admin = (await session.exec(select(schema.user))).first()
        waiter = schema.user(username="w", email="w@acme.com", password_hash="-", role_id=admin.role_id)
        session.add(waiter)
        await session.commit()
        await session.refresh(waiter)
        chat = await ChatService(session, schema).get_or_create_chat(admin.user_id, waiter.user_id)

    rooms = ChatRoomManager()
    sender, receiver = make_socket(), make_socket()

    assert await handle_client_frame(
        receiver, context, waiter.user_id, {"type": "join_room", "chat_id": chat.chat_id}, rooms
    )
    receiver.send_json.assert_awaited_with({"type": "joined", "chat_id": chat.chat_id})

    assert await handle_client_frame(
        sender,
        context,
        admin.user_id,
        {"type": "send_message", "receiver_id": waiter.user_id, "message": "hello"},
        rooms,
    )

    relayed = json.loads(receiver.send_text.await_args.args[0])
    assert relayed["type"] == "receive_message"
    assert relayed["chat_id"] == chat.chat_id
    assert relayed["message"] == "hello"
    ack = sender.send_json.await_args.args[0]
    assert ack["type"] == "message_sent"
    assert ack["chat_id"] == chat.chat_id

    async with context.session() as session:
        stored = await ChatService(session, schema).list_messages(chat.chat_id)
    assert [m.message for m in stored] == ["hello"]


@pytest.mark.asyncio
async def test_join_room_of_foreign_chat_is_refused(runtime, acme):
    context = await runtime.resolver.resolve("acme")
    rooms = ChatRoomManager()
    websocket = make_socket()

    assert await handle_client_frame(websocket, context, 1, {"type": "join_room", "chat_id": 42}, rooms)
    websocket.send_json.assert_awaited_with({"type": "error", "detail": "Chat not found"})
    assert rooms.get_connection_count()["rooms"] == 0


@pytest.mark.asyncio
async def test_ping_and_logout(runtime, acme):
    context = await runtime.resolver.resolve("acme")
    websocket = make_socket()

    assert await handle_client_frame(websocket, context, 1, {"type": "ping"}, ChatRoomManager())
    assert websocket.send_json.await_args.args[0]["type"] == "pong"
    assert not await handle_client_frame(websocket, context, 1, {"type": "logout"}, ChatRoomManager())
