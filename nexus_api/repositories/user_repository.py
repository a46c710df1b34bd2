from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from nexus_api.repositories.base import normalize, to_object_id, to_object_ids


PUBLIC_PROJECTION = {"hashed_password": 0}
SUMMARY_FIELDS = ("name", "email", "profile_picture", "role")


class UserRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("users")

    @property
    def collection(self):
        return self._collection

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("email", ASCENDING)], unique=True)

    async def create_user(self, doc: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        doc = {
            "bio": None,
            "major": None,
            "department": None,
            "profile_picture": "",
            "skills": [],
            "certifications": [],
            "followers": [],
            "following": [],
            "is_verified": False,
            **doc,
            "created_at": now,
            "updated_at": now,
        }
        result = await self._collection.insert_one(doc)
        return str(result.inserted_id)

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        user = await self._collection.find_one({"email": email.lower()})
        return normalize(user)

    async def get_user_by_id(self, user_id: str, public: bool = True) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        user = await self._collection.find_one({"_id": oid}, PUBLIC_PROJECTION if public else None)
        return normalize(user)

    async def exists(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        return await self._collection.find_one({"_id": oid}, {"_id": 1}) is not None

    async def list_users(self) -> List[dict]:
        cursor = self._collection.find({}, PUBLIC_PROJECTION).sort("created_at", -1)
        return [normalize(doc) async for doc in cursor]

    async def get_summaries(self, user_ids: Iterable[str], fields: Iterable[str] = SUMMARY_FIELDS) -> Dict[str, dict]:
        """Resolve ids to small public dicts; unknown ids are simply absent."""
        oids = to_object_ids(set(user_ids))
        if not oids:
            return {}
        projection = {field: 1 for field in fields}
        cursor = self._collection.find({"_id": {"$in": oids}}, projection)
        summaries: Dict[str, dict] = {}
        async for doc in cursor:
            normalize(doc)
            summaries[doc["_id"]] = doc
        return summaries

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        update = {**fields, "updated_at": datetime.now(timezone.utc)}
        doc = await self._collection.find_one_and_update(
            {"_id": oid},
            {"$set": update},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        return normalize(doc)

    async def add_follow(self, follower_id: str, target_id: str) -> None:
        await self._collection.update_one({"_id": to_object_id(follower_id)}, {"$addToSet": {"following": target_id}})
        await self._collection.update_one({"_id": to_object_id(target_id)}, {"$addToSet": {"followers": follower_id}})

    async def remove_follow(self, follower_id: str, target_id: str) -> None:
        await self._collection.update_one({"_id": to_object_id(follower_id)}, {"$pull": {"following": target_id}})
        await self._collection.update_one({"_id": to_object_id(target_id)}, {"$pull": {"followers": follower_id}})

    async def delete_user(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0
