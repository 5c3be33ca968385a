"""
Chat endpoints (tenant scoped)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List

from netcafe.core.dependencies import get_current_user_id, get_tenant_context, get_tenant_session
from netcafe.schemas.chat import MessageCreate, MessageResponse
from netcafe.services.chat import ChatService
from netcafe.tenancy.resolver import TenantContext

router = APIRouter()


def get_chat_service(
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
) -> ChatService:
    return ChatService(session, context.schema)


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    user_id: int = Depends(get_current_user_id),
    chat: ChatService = Depends(get_chat_service),
):
    """Store a message in the chat between the caller and the receiver"""
    try:
        return await chat.send_message(user_id, message_data.receiver_id, message_data.message)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/chats/{chat_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    chat_id: int,
    limit: int = 100,
    offset: int = 0,
    user_id: int = Depends(get_current_user_id),
    chat: ChatService = Depends(get_chat_service),
):
    if not await chat.is_participant(chat_id, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return await chat.list_messages(chat_id, limit=limit, offset=offset)
