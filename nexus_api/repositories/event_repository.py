from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from nexus_api.repositories.base import normalize, to_object_id


class EventRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("events")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("date", ASCENDING)])
        await self._collection.create_index([("organizer_id", ASCENDING)])
        await self._collection.create_index([("tags", ASCENDING)])

    async def create_event(self, organizer_id: str, fields: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        doc = {
            **fields,
            "organizer_id": organizer_id,
            "participants": [],
            "created_at": now,
            "updated_at": now,
        }
        result = await self._collection.insert_one(doc)
        return str(result.inserted_id)

    async def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(event_id)
        if oid is None:
            return None
        return normalize(await self._collection.find_one({"_id": oid}))

    async def list_events(self, organizer_id: Optional[str] = None, limit: int = 0) -> List[Dict[str, Any]]:
        query = {"organizer_id": organizer_id} if organizer_id else {}
        cursor = self._collection.find(query).sort([("date", ASCENDING), ("_id", ASCENDING)])
        if limit:
            cursor = cursor.limit(limit)
        return [normalize(doc) async for doc in cursor]

    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> bool:
        fields = {**fields, "updated_at": datetime.now(timezone.utc)}
        result = await self._collection.update_one({"_id": to_object_id(event_id)}, {"$set": fields})
        return bool(result.matched_count)

    async def delete_event(self, event_id: str) -> bool:
        result = await self._collection.delete_one({"_id": to_object_id(event_id)})
        return result.deleted_count > 0

    async def add_participant(self, event_id: str, user_id: str, max_participants: Optional[int]) -> bool:
        """Conditional push: fails when already joined or when the event is full."""
        query: Dict[str, Any] = {"_id": to_object_id(event_id), "participants": {"$ne": user_id}}
        if max_participants:
            # index max-1 exists only once the list is full
            query[f"participants.{max_participants - 1}"] = {"$exists": False}
        result = await self._collection.update_one(query, {"$push": {"participants": user_id}})
        return bool(result.modified_count)

    async def remove_participant(self, event_id: str, user_id: str) -> bool:
        result = await self._collection.update_one(
            {"_id": to_object_id(event_id), "participants": user_id},
            {"$pull": {"participants": user_id}},
        )
        return bool(result.modified_count)
