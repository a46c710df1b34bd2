from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from nexus_api.repositories.base import normalize, to_object_id, to_object_ids


class MessageRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["messages"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("sender_id", ASCENDING), ("recipient_id", ASCENDING), ("created_at", DESCENDING)])
        await self.collection.create_index([("recipient_id", ASCENDING), ("read", ASCENDING)])

    async def save_message(self, sender_id: str, recipient_id: str, content: str) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "sender_id": sender_id,
            "recipient_id": recipient_id,
            "content": content,
            "read": False,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def get_by_id(self, message_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(message_id)
        if oid is None:
            return None
        return normalize(await self.collection.find_one({"_id": oid}))

    async def get_many(self, message_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        oids = to_object_ids(message_ids)
        if not oids:
            return {}
        cursor = self.collection.find({"_id": {"$in": oids}})
        items = await cursor.to_list(length=len(oids))
        return {normalize(it)["_id"]: it for it in items}

    @staticmethod
    def _between(user_a: str, user_b: str) -> Dict[str, Any]:
        return {
            "$or": [
                {"sender_id": user_a, "recipient_id": user_b},
                {"sender_id": user_b, "recipient_id": user_a},
            ]
        }

    async def get_page_between(self, user_a: str, user_b: str, skip: int, limit: int) -> List[Dict[str, Any]]:
        """Newest-first page of the messages exchanged by two users."""
        sort = [("created_at", DESCENDING), ("_id", DESCENDING)]
        cur = self.collection.find(self._between(user_a, user_b)).sort(sort).skip(skip).limit(limit)
        items = await cur.to_list(length=limit)
        for it in items:
            normalize(it)
        return items

    async def count_between(self, user_a: str, user_b: str) -> int:
        return await self.collection.count_documents(self._between(user_a, user_b))

    async def mark_read(self, message_id: str) -> bool:
        result = await self.collection.update_one({"_id": to_object_id(message_id)}, {"$set": {"read": True}})
        return bool(result.matched_count)

    async def delete_message(self, message_id: str) -> bool:
        result = await self.collection.delete_one({"_id": to_object_id(message_id)})
        return result.deleted_count > 0
