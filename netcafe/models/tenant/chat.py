"""
Chat and message models

A chat is an unordered pair of users. The pair is stored normalized, lower
user id in low_user_id, so looking up (a, b) and (b, a) hits the same row.
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint, UniqueConstraint
from datetime import datetime
from typing import Optional


class Chat(SQLModel, table=True):
    """Conversation between two users"""

    __tablename__ = "chats"
    __table_args__ = (
        UniqueConstraint("low_user_id", "high_user_id", name="uq_chat_participants"),
        CheckConstraint("low_user_id < high_user_id", name="ck_chat_participants_ordered"),
    )

    chat_id: Optional[int] = Field(default=None, primary_key=True)
    low_user_id: int = Field(foreign_key="users.user_id", index=True)
    high_user_id: int = Field(foreign_key="users.user_id", index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)


class Message(SQLModel, table=True):
    """Message posted in a chat"""

    __tablename__ = "messages"

    message_id: Optional[int] = Field(default=None, primary_key=True)
    chat_id: int = Field(foreign_key="chats.chat_id", index=True)
    sender_id: int = Field(foreign_key="users.user_id")
    message: str = Field(nullable=False)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
