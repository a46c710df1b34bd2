from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from nexus_api.repositories.base import normalize, to_object_id


class PostRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("posts")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("author_id", ASCENDING), ("created_at", DESCENDING)])
        await self._collection.create_index([("tags", ASCENDING)])

    async def create_post(self, author_id: str, title: str, content: str, tags: List[str], images: List[str]) -> str:
        now = datetime.now(timezone.utc)
        doc = {
            "title": title,
            "content": content,
            "author_id": author_id,
            "likes": [],
            "comments": [],
            "tags": tags,
            "image_url": images[0] if images else "",
            "images": images,
            "created_at": now,
            "updated_at": now,
        }
        result = await self._collection.insert_one(doc)
        return str(result.inserted_id)

    async def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return normalize(await self._collection.find_one({"_id": oid}))

    async def list_posts(self, author_id: Optional[str] = None, limit: int = 0) -> List[Dict[str, Any]]:
        query = {"author_id": author_id} if author_id else {}
        cursor = self._collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        if limit:
            cursor = cursor.limit(limit)
        return [normalize(doc) async for doc in cursor]

    async def update_post(self, post_id: str, fields: Dict[str, Any]) -> bool:
        fields = {**fields, "updated_at": datetime.now(timezone.utc)}
        result = await self._collection.update_one({"_id": to_object_id(post_id)}, {"$set": fields})
        return bool(result.matched_count)

    async def delete_post(self, post_id: str) -> bool:
        result = await self._collection.delete_one({"_id": to_object_id(post_id)})
        return result.deleted_count > 0

    async def add_like(self, post_id: str, user_id: str) -> None:
        await self._collection.update_one({"_id": to_object_id(post_id)}, {"$addToSet": {"likes": user_id}})

    async def remove_like(self, post_id: str, user_id: str) -> None:
        await self._collection.update_one({"_id": to_object_id(post_id)}, {"$pull": {"likes": user_id}})

    async def push_comment(self, post_id: str, user_id: str, text: str, parent_comment_id: Optional[str]) -> Dict[str, Any]:
        comment = {
            "_id": str(ObjectId()),
            "user_id": user_id,
            "text": text,
            "parent_comment_id": parent_comment_id,
            "created_at": datetime.now(timezone.utc),
        }
        await self._collection.update_one({"_id": to_object_id(post_id)}, {"$push": {"comments": comment}})
        return comment

    async def pull_comment(self, post_id: str, comment_id: str) -> bool:
        result = await self._collection.update_one(
            {"_id": to_object_id(post_id)}, {"$pull": {"comments": {"_id": comment_id}}}
        )
        return bool(result.modified_count)
