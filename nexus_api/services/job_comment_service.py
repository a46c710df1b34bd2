from typing import Any, Dict, List, Optional

from nexus_api.models.job_comment import MAX_JOB_COMMENT_LENGTH, MAX_RATING, MIN_RATING
from nexus_api.models.user import UserRole
from nexus_api.repositories.job_comment_repository import JobCommentRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import NotFoundError, PermissionDenied, ValidationError


COMMENTER_FIELDS = ("name", "profile_picture", "role")


class JobCommentService:
    """Comments and optional 1-5 ratings left on job listings.

    Jobs live outside this API, so ``job_id`` is an opaque string and is
    not checked for existence.
    """

    def __init__(self, comment_repo: JobCommentRepository, user_repo: UserRepository) -> None:
        self._comment_repo = comment_repo
        self._user_repo = user_repo

    async def list_comments(self, job_id: str) -> List[Dict[str, Any]]:
        comments = await self._comment_repo.list_for_job(job_id)
        return await self._populate(comments)

    async def add_comment(self, job_id: str, user_id: str, text: Optional[str], rating: Optional[int] = None) -> Dict[str, Any]:
        if not text or not text.strip():
            raise ValidationError("Comment text required")
        if len(text) > MAX_JOB_COMMENT_LENGTH:
            raise ValidationError(f"Comment cannot exceed {MAX_JOB_COMMENT_LENGTH} characters")
        if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        comment_id = await self._comment_repo.create_comment(job_id, user_id, text, rating)
        comment = await self._comment_repo.get_comment(comment_id)
        return (await self._populate([comment]))[0]

    async def delete_comment(self, comment_id: str, user_id: str, role: Optional[str]) -> None:
        comment = await self._comment_repo.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment["user_id"] != user_id and role != UserRole.ADMIN.value:
            raise PermissionDenied("Unauthorized")
        await self._comment_repo.delete_comment(comment_id)

    async def _populate(self, comments: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        users = await self._user_repo.get_summaries({c["user_id"] for c in comments}, COMMENTER_FIELDS)
        for comment in comments:
            comment["user"] = users.get(comment["user_id"])
        return comments
