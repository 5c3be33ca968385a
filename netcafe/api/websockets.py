"""
WebSocket chat relay

Client frames:
    {"type": "join_room", "chat_id": 1}
    {"type": "send_message", "receiver_id": 2, "message": "..."}
    {"type": "ping"}
    {"type": "logout"}
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from datetime import datetime
import json
from typing import Optional
import structlog

from netcafe.core.auth import TENANT_SCOPE, decode_access_token
from netcafe.core.exceptions import NetCafeError
from netcafe.core.websocket_manager import ChatRoomManager, manager
from netcafe.services.chat import ChatService
from netcafe.tenancy.resolver import TenantContext

logger = structlog.get_logger(__name__)
router = APIRouter()


async def handle_client_frame(
    websocket: WebSocket,
    context: TenantContext,
    user_id: int,
    data: dict,
    rooms: ChatRoomManager = manager,
) -> bool:
    """Handle one client frame; returns False when the socket should close"""
    frame_type = data.get("type")
    database_name = context.database_name

    if frame_type == "ping":
        await websocket.send_json({
            "type": "pong",
            "timestamp": datetime.utcnow().isoformat()
        })

    elif frame_type == "join_room":
        chat_id = data.get("chat_id")
        async with context.session() as session:
            allowed = isinstance(chat_id, int) and await ChatService(
                session, context.schema
            ).is_participant(chat_id, user_id)
        if not allowed:
            await websocket.send_json({"type": "error", "detail": "Chat not found"})
            return True
        rooms.join(websocket, database_name, chat_id)
        await websocket.send_json({"type": "joined", "chat_id": chat_id})

    elif frame_type == "send_message":
        receiver_id = data.get("receiver_id")
        body = data.get("message")
        if not isinstance(receiver_id, int) or not body:
            await websocket.send_json({"type": "error", "detail": "receiver_id and message are required"})
            return True

        async with context.session() as session:
            try:
                message = await ChatService(session, context.schema).send_message(
                    user_id, receiver_id, body
                )
            except (ValueError, LookupError) as e:
                await websocket.send_json({"type": "error", "detail": str(e)})
                return True

        rooms.join(websocket, database_name, message.chat_id)
        payload = {
            "type": "receive_message",
            "chat_id": message.chat_id,
            "message_id": message.message_id,
            "sender_id": message.sender_id,
            "message": message.message,
            "created_at": message.created_at.isoformat(),
        }
        await rooms.broadcast(database_name, message.chat_id, payload, exclude=websocket)
        await websocket.send_json({
            "type": "message_sent",
            "chat_id": message.chat_id,
            "message_id": message.message_id,
        })

    elif frame_type == "logout":
        return False

    else:
        await websocket.send_json({"type": "error", "detail": f"Unknown frame type: {frame_type}"})

    return True


@router.websocket("/chat")
async def websocket_chat(websocket: WebSocket, token: Optional[str] = None):
    """Chat relay for a tenant user authenticated by the token query parameter"""
    runtime = websocket.app.state.runtime
    payload = decode_access_token(token, runtime.settings) if token else None
    if payload is None or payload.get("scope") != TENANT_SCOPE or not payload.get("tenant"):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        context = await runtime.resolver.resolve(payload["tenant"])
    except NetCafeError as e:
        logger.warning(f"Chat socket rejected: {e.code.value}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = int(payload["sub"])
    await websocket.accept()
    await websocket.send_json({"type": "connection_confirmed", "user_id": user_id})
    logger.info(f"Chat socket connected: user {user_id} ({context.database_name})")

    try:
        while True:
            try:
                data = json.loads(await websocket.receive_text())
            except ValueError:
                await websocket.send_json({"type": "error", "detail": "Frames must be JSON"})
                continue

            if not isinstance(data, dict):
                await websocket.send_json({"type": "error", "detail": "Frames must be JSON objects"})
                continue

            logger.debug(f"Received frame from user {user_id}: {data.get('type')}")
            if not await handle_client_frame(websocket, context, user_id, data):
                await websocket.close()
                break
    except WebSocketDisconnect:
        logger.info(f"User {user_id} disconnected")
    except Exception as e:
        logger.error(f"Error in chat WebSocket: {e}", exc_info=True)
    finally:
        manager.disconnect(websocket)
