from typing import Any, Dict, List, Optional

from nexus_api.models.user import UserRole
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import NotFoundError, PermissionDenied, ValidationError


AUTHOR_FIELDS = ("name", "email", "profile_picture", "role")
COMMENTER_FIELDS = ("name", "profile_picture")


class PostService:

    def __init__(self, post_repo: PostRepository, user_repo: UserRepository) -> None:
        self._post_repo = post_repo
        self._user_repo = user_repo

    async def list_posts(self, author_id: Optional[str] = None) -> List[Dict[str, Any]]:
        posts = await self._post_repo.list_posts(author_id=author_id)
        return await self._populate(posts)

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        post = await self._require(post_id)
        return (await self._populate([post]))[0]

    async def create_post(self, author_id: str, title: str, content: str, tags: Optional[List[str]] = None, images: Optional[List[str]] = None) -> Dict[str, Any]:
        if not title or not title.strip() or not content or not content.strip():
            raise ValidationError("Title and content are required")
        post_id = await self._post_repo.create_post(author_id, title.strip(), content, tags or [], images or [])
        return await self.get_post(post_id)

    async def update_post(self, post_id: str, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        post = await self._require(post_id)
        if post["author_id"] != user_id:
            raise PermissionDenied("You can only update your own posts")
        # empty values keep the stored ones
        changes = {k: v for k, v in fields.items() if v}
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        if "images" in changes:
            changes["image_url"] = changes["images"][0]
        if changes:
            await self._post_repo.update_post(post_id, changes)
        return await self.get_post(post_id)

    async def delete_post(self, post_id: str, user_id: str, role: Optional[str]) -> None:
        post = await self._require(post_id)
        if post["author_id"] != user_id and role != UserRole.ADMIN.value:
            raise PermissionDenied("You can only delete your own posts")
        await self._post_repo.delete_post(post_id)

    async def toggle_like(self, post_id: str, user_id: str) -> Dict[str, Any]:
        post = await self._require(post_id)
        liked = user_id not in post.get("likes", [])
        if liked:
            await self._post_repo.add_like(post_id, user_id)
        else:
            await self._post_repo.remove_like(post_id, user_id)
        updated = await self._require(post_id)
        return {"liked": liked, "likes": len(updated.get("likes", []))}

    async def add_comment(self, post_id: str, user_id: str, text: str, parent_comment_id: Optional[str] = None) -> Dict[str, Any]:
        if not text or not text.strip():
            raise ValidationError("Comment text is required")
        if len(text) > 500:
            raise ValidationError("Comment cannot exceed 500 characters")
        post = await self._require(post_id)
        if parent_comment_id and not any(c["_id"] == parent_comment_id for c in post.get("comments", [])):
            raise NotFoundError("Parent comment not found")
        await self._post_repo.push_comment(post_id, user_id, text, parent_comment_id)
        return await self.get_post(post_id)

    async def delete_comment(self, post_id: str, comment_id: str, user_id: str, role: Optional[str]) -> Dict[str, Any]:
        post = await self._require(post_id)
        comment = next((c for c in post.get("comments", []) if c["_id"] == comment_id), None)
        if comment is None:
            raise NotFoundError("Comment not found")
        allowed = (
            comment["user_id"] == user_id
            or post["author_id"] == user_id
            or role == UserRole.ADMIN.value
        )
        if not allowed:
            raise PermissionDenied("Not authorized to delete this comment")
        await self._post_repo.pull_comment(post_id, comment_id)
        return await self.get_post(post_id)

    async def _require(self, post_id: str) -> Dict[str, Any]:
        post = await self._post_repo.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    async def _populate(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        authors = await self._user_repo.get_summaries({p["author_id"] for p in posts}, AUTHOR_FIELDS)
        commenters = await self._user_repo.get_summaries(
            {c["user_id"] for p in posts for c in p.get("comments", [])}, COMMENTER_FIELDS
        )
        for post in posts:
            post["author"] = authors.get(post["author_id"])
            for comment in post.get("comments", []):
                comment["user"] = commenters.get(comment["user_id"])
        return posts
