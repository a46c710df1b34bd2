import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from nexus_api.models.conversation import pair_key_for
from nexus_api.repositories.base import normalize, to_object_id


logger = logging.getLogger(__name__)


class ConversationRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["conversations"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("pair_key", ASCENDING)], unique=True)
        await self.collection.create_index([("participants", ASCENDING), ("updated_at", DESCENDING)])

    async def get_by_id(self, conversation_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(conversation_id)
        if oid is None:
            return None
        return normalize(await self.collection.find_one({"_id": oid}))

    async def get_for_pair(self, user_a: str, user_b: str) -> Optional[Dict[str, Any]]:
        return normalize(await self.collection.find_one({"pair_key": pair_key_for(user_a, user_b)}))

    async def record_message(self, sender_id: str, recipient_id: str, message_id: str) -> Dict[str, Any]:
        """Create-or-update the pair's conversation in one atomic upsert.

        Bumps the recipient's counter by one and touches the sender's by zero,
        so a fresh conversation starts at {sender: 0, recipient: 1}.
        """
        now = datetime.now(timezone.utc)
        key = pair_key_for(sender_id, recipient_id)
        update = {
            "$set": {"last_message_id": message_id, "updated_at": now},
            "$inc": {f"unread_counts.{recipient_id}": 1, f"unread_counts.{sender_id}": 0},
            "$setOnInsert": {"participants": sorted([sender_id, recipient_id]), "created_at": now},
        }
        try:
            doc = await self.collection.find_one_and_update(
                {"pair_key": key}, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # lost the insert race; the conversation now exists, so apply as a plain update
            doc = await self.collection.find_one_and_update(
                {"pair_key": key}, update, return_document=ReturnDocument.AFTER
            )
        return normalize(doc)

    async def decrement_unread(self, user_a: str, user_b: str, reader_id: str) -> bool:
        """Decrement reader's counter on the pair's conversation, never below zero."""
        result = await self.collection.update_one(
            {"pair_key": pair_key_for(user_a, user_b), f"unread_counts.{reader_id}": {"$gt": 0}},
            {"$inc": {f"unread_counts.{reader_id}": -1}},
        )
        return bool(result.modified_count)

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"participants": user_id}).sort([("updated_at", DESCENDING), ("_id", DESCENDING)])
        return [normalize(doc) async for doc in cursor]
