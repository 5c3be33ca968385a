"""
WebSocket room manager for the chat relay

Rooms are keyed by (tenant database name, chat id), so sockets of different
tenants never share a room even when their chat ids coincide.
"""

from typing import Dict, Optional, Set, Tuple
from fastapi import WebSocket
from json import dumps
import structlog

logger = structlog.get_logger(__name__)

RoomKey = Tuple[str, int]


class ChatRoomManager:
    """Tracks which sockets joined which chat rooms"""

    def __init__(self):
        self.rooms: Dict[RoomKey, Set[WebSocket]] = {}

        # WebSocket to joined rooms (for cleanup)
        self.connection_to_rooms: Dict[WebSocket, Set[RoomKey]] = {}

    def join(self, websocket: WebSocket, database_name: str, chat_id: int) -> RoomKey:
        """Add an accepted socket to a room"""
        key = (database_name, chat_id)
        self.rooms.setdefault(key, set()).add(websocket)
        self.connection_to_rooms.setdefault(websocket, set()).add(key)
        logger.debug(f"Socket joined room {chat_id} of {database_name}")
        return key

    def leave(self, websocket: WebSocket, database_name: str, chat_id: int) -> None:
        key = (database_name, chat_id)
        members = self.rooms.get(key)
        if members is not None:
            members.discard(websocket)
            if not members:
                del self.rooms[key]
        joined = self.connection_to_rooms.get(websocket)
        if joined is not None:
            joined.discard(key)
            if not joined:
                del self.connection_to_rooms[websocket]

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a socket from every room it joined"""
        for database_name, chat_id in list(self.connection_to_rooms.get(websocket, ())):
            self.leave(websocket, database_name, chat_id)
        self.connection_to_rooms.pop(websocket, None)

    def members(self, database_name: str, chat_id: int) -> Set[WebSocket]:
        return set(self.rooms.get((database_name, chat_id), ()))

    async def broadcast(
        self,
        database_name: str,
        chat_id: int,
        message: dict,
        exclude: Optional[WebSocket] = None,
    ) -> int:
        """Send message to every socket in the room except exclude; returns deliveries"""
        connections = self.members(database_name, chat_id)
        if not connections:
            logger.debug(f"No connections for room {chat_id} of {database_name}")
            return 0

        message_json = dumps(message, default=str)
        delivered = 0
        disconnected = []
        for connection in connections:
            if connection is exclude:
                continue
            try:
                await connection.send_text(message_json)
                delivered += 1
            except Exception as e:
                logger.error(f"Error sending to connection: {e}")
                disconnected.append(connection)

        # Clean up dead connections
        for connection in disconnected:
            self.disconnect(connection)

        logger.debug(f"Relayed to {delivered} connections in room {chat_id} of {database_name}")
        return delivered

    def get_connection_count(self) -> dict:
        return {
            "rooms": len(self.rooms),
            "connections": len(self.connection_to_rooms),
        }


# Global room manager instance
manager = ChatRoomManager()
