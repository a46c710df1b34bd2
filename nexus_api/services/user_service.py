from typing import Any, Dict, List, Optional, Tuple

from pymongo.errors import DuplicateKeyError

from nexus_api.models.user import UserRole
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import AuthenticationError, NotFoundError, ValidationError
from nexus_api.utils.security import create_access_token, hash_password, verify_password


FOLLOW_FIELDS = ("name", "email", "profile_picture")
PROFILE_LIMIT = 10


class UserService:
    """Registration, login and profile operations on the users collection."""

    def __init__(self, user_repository: UserRepository, post_repository: Optional[PostRepository] = None, event_repository: Optional[EventRepository] = None):
        self.user_repository = user_repository
        self.post_repository = post_repository
        self.event_repository = event_repository

    async def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.STUDENT,
        bio: Optional[str] = None,
        major: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Tuple[dict, str]:
        """
        Register a new user and issue a token.
        - name, email and password are required
        - admin accounts cannot be self-registered
        - email must not be taken
        """
        if not name or not email or not password:
            raise ValidationError("Please provide name, email, and password")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters")
        role = UserRole(role)
        if role == UserRole.ADMIN:
            raise ValidationError("Admin accounts cannot be self-registered")

        email = email.strip().lower()
        if await self.user_repository.get_user_by_email(email):
            raise ValidationError("User with this email already exists")

        try:
            new_id = await self.user_repository.create_user({
                "name": name.strip(),
                "email": email,
                "hashed_password": hash_password(password),
                "role": role.value,
                "bio": bio,
                "major": major,
                "department": department,
            })
        except DuplicateKeyError:
            raise ValidationError("User with this email already exists")

        user = await self.user_repository.get_user_by_id(new_id)
        return user, create_access_token(new_id, email, role.value)

    async def authenticate_user(self, email: str, password: str) -> Tuple[dict, str]:
        if not email or not password:
            raise ValidationError("Please provide email and password")
        user = await self.user_repository.get_user_by_email(email.strip())
        if not user or not verify_password(password, user.get("hashed_password", "")):
            raise AuthenticationError("Invalid email or password")
        user.pop("hashed_password", None)
        return user, create_access_token(user["_id"], user["email"], user.get("role", UserRole.STUDENT.value))

    async def get_current(self, user_id: str) -> dict:
        user = await self.user_repository.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> List[dict]:
        return await self.user_repository.list_users()

    async def get_profile(self, user_id: str) -> Dict[str, Any]:
        """Public profile with the follow graph resolved, plus recent posts and upcoming events."""
        user = await self.user_repository.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        people = await self.user_repository.get_summaries(
            user.get("followers", []) + user.get("following", []), FOLLOW_FIELDS
        )
        user["followers"] = [people[uid] for uid in user.get("followers", []) if uid in people]
        user["following"] = [people[uid] for uid in user.get("following", []) if uid in people]

        posts: List[dict] = []
        events: List[dict] = []
        if self.post_repository is not None:
            posts = await self.post_repository.list_posts(author_id=user_id, limit=PROFILE_LIMIT)
        if self.event_repository is not None:
            events = await self.event_repository.list_events(organizer_id=user_id, limit=PROFILE_LIMIT)
        return {"user": user, "posts": posts, "events": events}

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> dict:
        fields = {k: v for k, v in fields.items() if v is not None}
        if not fields:
            return await self.get_current(user_id)
        user = await self.user_repository.update_profile(user_id, fields)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def follow(self, user_id: str, target_id: str) -> None:
        if user_id == target_id:
            raise ValidationError("You cannot follow yourself")
        await self._require_both(user_id, target_id)
        await self.user_repository.add_follow(user_id, target_id)

    async def unfollow(self, user_id: str, target_id: str) -> None:
        await self._require_both(user_id, target_id)
        await self.user_repository.remove_follow(user_id, target_id)

    async def delete_user(self, user_id: str) -> None:
        if not await self.user_repository.delete_user(user_id):
            raise NotFoundError("User not found")

    async def _require_both(self, user_id: str, target_id: str) -> None:
        if not await self.user_repository.exists(user_id) or not await self.user_repository.exists(target_id):
            raise NotFoundError("User not found")
