from fastapi import APIRouter, Depends, Query, status

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.repositories.conversation_repository import ConversationRepository
from nexus_api.repositories.message_repository import MessageRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.message import SendMessageRequest
from nexus_api.services.chat_service import ChatService
from nexus_api.services.errors import ServiceError
from nexus_api.utils.dependencies import as_http_exception, get_current_user
from nexus_api.utils.rate_limiter import get_rate_limiter


router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_chat_service(db = Depends(mongo_db_dependency), limiter = Depends(get_rate_limiter)) -> ChatService:
    return ChatService(MessageRepository(db), ConversationRepository(db), UserRepository(db), limiter)


@router.get("/conversations")
async def get_conversations(current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    conversations = await service.get_conversations(current_user["_id"])
    return {"conversations": conversations}


@router.post("/send", status_code=status.HTTP_201_CREATED)
async def send_message(payload: SendMessageRequest, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        message = await service.send_message(current_user["_id"], payload.recipient_id, payload.content)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Message sent", "data": message}


@router.get("/{conversation_id}")
async def get_messages(conversation_id: str, page: int = Query(1), current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        return await service.get_messages(conversation_id, current_user["_id"], page)
    except ServiceError as exc:
        raise as_http_exception(exc)


@router.put("/{message_id}/read")
async def mark_as_read(message_id: str, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        await service.mark_as_read(message_id, current_user["_id"])
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Marked as read"}


@router.delete("/{message_id}")
async def delete_message(message_id: str, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        await service.delete_message(message_id, current_user["_id"], current_user.get("role"))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Message deleted"}
