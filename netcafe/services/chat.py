"""
One-to-one chat between users of a tenant
"""

from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from netcafe.tenancy.schema import EntitySchemaSet

logger = structlog.get_logger(__name__)


def normalize_pair(user_a: int, user_b: int) -> tuple[int, int]:
    """Order a participant pair so (a, b) and (b, a) map to the same chat"""
    if user_a == user_b:
        raise ValueError("A chat needs two distinct participants")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class ChatService:
    """Chats and messages in one tenant database"""

    def __init__(self, session: AsyncSession, schema: EntitySchemaSet):
        self.session = session
        self.schema = schema

    async def _find_chat(self, low: int, high: int):
        Chat = self.schema.chat
        result = await self.session.exec(
            select(Chat).where(Chat.low_user_id == low, Chat.high_user_id == high)
        )
        return result.first()

    async def get_or_create_chat(self, user_a: int, user_b: int):
        low, high = normalize_pair(user_a, user_b)
        chat = await self._find_chat(low, high)
        if chat is not None:
            return chat

        chat = self.schema.chat(low_user_id=low, high_user_id=high)
        self.session.add(chat)
        try:
            await self.session.commit()
        except IntegrityError:
            # Created concurrently by the other participant
            await self.session.rollback()
            chat = await self._find_chat(low, high)
            if chat is None:
                raise
            return chat
        await self.session.refresh(chat)
        logger.info("Chat created", chat_id=chat.chat_id, database_name=self.schema.database_name)
        return chat

    async def send_message(self, sender_id: int, receiver_id: int, body: str):
        """Store a message in the chat between sender and receiver"""
        User = self.schema.user
        receiver = await self.session.get(User, receiver_id)
        if receiver is None or receiver.deleted_at is not None:
            raise LookupError(f"User {receiver_id} not found")

        chat = await self.get_or_create_chat(sender_id, receiver_id)
        message = self.schema.message(chat_id=chat.chat_id, sender_id=sender_id, message=body)
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def list_messages(self, chat_id: int, limit: int = 100, offset: int = 0) -> List:
        Message = self.schema.message
        result = await self.session.exec(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at, Message.message_id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.all())

    async def is_participant(self, chat_id: int, user_id: int) -> bool:
        chat = await self.session.get(self.schema.chat, chat_id)
        return chat is not None and user_id in (chat.low_user_id, chat.high_user_id)
