"""
Pydantic schemas for chat messages
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class MessageCreate(BaseModel):
    receiver_id: int
    message: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: int
    chat_id: int
    sender_id: int
    message: str
    created_at: datetime
