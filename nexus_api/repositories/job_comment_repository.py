from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from nexus_api.repositories.base import normalize, to_object_id


class JobCommentRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("job_comments")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("job_id", ASCENDING), ("created_at", DESCENDING)])

    async def create_comment(self, job_id: str, user_id: str, text: str, rating: Optional[int]) -> str:
        now = datetime.now(timezone.utc)
        result = await self._collection.insert_one({
            "job_id": job_id,
            "user_id": user_id,
            "text": text,
            "rating": rating,
            "created_at": now,
            "updated_at": now,
        })
        return str(result.inserted_id)

    async def get_comment(self, comment_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(comment_id)
        if oid is None:
            return None
        return normalize(await self._collection.find_one({"_id": oid}))

    async def list_for_job(self, job_id: str) -> List[Dict[str, Any]]:
        cursor = self._collection.find({"job_id": job_id}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return [normalize(doc) async for doc in cursor]

    async def delete_comment(self, comment_id: str) -> bool:
        result = await self._collection.delete_one({"_id": to_object_id(comment_id)})
        return result.deleted_count > 0
