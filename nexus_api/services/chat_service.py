import logging
import math
from typing import Any, Dict, List, Optional

from nexus_api.models.message import MAX_MESSAGE_LENGTH
from nexus_api.models.user import UserRole
from nexus_api.repositories.conversation_repository import ConversationRepository
from nexus_api.repositories.message_repository import MessageRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import NotFoundError, PermissionDenied, RateLimitExceeded, ValidationError
from nexus_api.utils.rate_limiter import now_ms


logger = logging.getLogger(__name__)

PAGE_SIZE = 50
SENDER_FIELDS = ("name", "profile_picture")
OTHER_USER_FIELDS = ("name", "email", "profile_picture", "role")


class ChatService:

    def __init__(
        self,
        message_repo: MessageRepository,
        conversation_repo: ConversationRepository,
        user_repo: UserRepository,
        rate_limiter,
    ) -> None:
        self._message_repo = message_repo
        self._conversation_repo = conversation_repo
        self._user_repo = user_repo
        self._rate_limiter = rate_limiter

    async def send_message(self, sender_id: str, recipient_id: Optional[str], content: Optional[str]) -> Dict[str, Any]:
        content = (content or "").strip()
        if not recipient_id or not content:
            raise ValidationError("Recipient and content required")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
        if recipient_id == sender_id:
            raise ValidationError("Cannot send a message to yourself")
        if not await self._user_repo.exists(recipient_id):
            raise NotFoundError("Recipient not found")

        if not await self._rate_limiter.check_and_record(sender_id, now_ms()):
            logger.warning("Rate limit hit for sender %s", sender_id)
            raise RateLimitExceeded(
                f"Rate limit exceeded. Max {self._rate_limiter.limit} messages per hour."
            )

        saved = await self._message_repo.save_message(sender_id, recipient_id, content)
        convo = await self._conversation_repo.record_message(sender_id, recipient_id, saved["_id"])
        if convo and convo.get("created_at") == convo.get("updated_at"):
            logger.info("Conversation %s created for %s", convo["_id"], convo.get("participants"))

        users = await self._user_repo.get_summaries([sender_id, recipient_id], SENDER_FIELDS)
        return self._with_people(saved, users)

    async def get_conversations(self, user_id: str) -> List[Dict[str, Any]]:
        conversations = await self._conversation_repo.list_for_user(user_id)
        other_ids = [p for c in conversations for p in c.get("participants", []) if p != user_id]
        users = await self._user_repo.get_summaries(other_ids, OTHER_USER_FIELDS)
        last_messages = await self._message_repo.get_many(
            [c["last_message_id"] for c in conversations if c.get("last_message_id")]
        )

        items = []
        for conv in conversations:
            other_id = next((p for p in conv.get("participants", []) if p != user_id), None)
            other_user = users.get(other_id) if other_id else None
            if other_user is None:
                logger.error("Conversation %s has no resolvable other participant", conv["_id"])
                continue
            items.append({
                "_id": conv["_id"],
                "other_user": other_user,
                "last_message": last_messages.get(conv.get("last_message_id")),
                "unread_count": conv.get("unread_counts", {}).get(user_id, 0),
                "updated_at": conv.get("updated_at"),
            })
        return items

    async def get_messages(self, conversation_id: str, user_id: str, page: int = 1) -> Dict[str, Any]:
        page = max(page, 1)
        conversation = await self._conversation_repo.get_by_id(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation not found")
        participants = conversation.get("participants", [])
        if user_id not in participants:
            raise PermissionDenied("Access denied")

        user_a, user_b = participants[0], participants[1]
        newest_first = await self._message_repo.get_page_between(user_a, user_b, (page - 1) * PAGE_SIZE, PAGE_SIZE)
        total = await self._message_repo.count_between(user_a, user_b)
        users = await self._user_repo.get_summaries(participants, SENDER_FIELDS)

        return {
            "messages": [self._with_people(m, users) for m in reversed(newest_first)],
            "pagination": {
                "page": page,
                "limit": PAGE_SIZE,
                "total_pages": math.ceil(total / PAGE_SIZE),
                "total_messages": total,
            },
        }

    async def mark_as_read(self, message_id: str, user_id: str) -> None:
        message = await self._message_repo.get_by_id(message_id)
        if not message:
            raise NotFoundError("Message not found")
        if message["recipient_id"] != user_id:
            raise PermissionDenied("Access denied")

        await self._message_repo.mark_read(message_id)
        await self._conversation_repo.decrement_unread(message["sender_id"], message["recipient_id"], user_id)

    async def delete_message(self, message_id: str, user_id: str, role: Optional[str] = None) -> None:
        message = await self._message_repo.get_by_id(message_id)
        if not message:
            raise NotFoundError("Message not found")
        if message["sender_id"] != user_id and role != UserRole.ADMIN.value:
            raise PermissionDenied("Only sender can delete message")
        # conversation last_message_id / unread_counts are left as they are
        await self._message_repo.delete_message(message_id)

    @staticmethod
    def _with_people(message: Dict[str, Any], users: Dict[str, dict]) -> Dict[str, Any]:
        return {
            **message,
            "sender": users.get(message["sender_id"]),
            "recipient": users.get(message["recipient_id"]),
        }
