import pytest

from nexus_api.repositories.job_comment_repository import JobCommentRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import NotFoundError, PermissionDenied, ValidationError
from nexus_api.services.job_comment_service import JobCommentService


@pytest.fixture
def job_comments(indexed_db) -> JobCommentService:
    return JobCommentService(JobCommentRepository(indexed_db), UserRepository(indexed_db))


async def test_add_comment_resolves_user(job_comments, carol):
    comment = await job_comments.add_comment("job-42", carol, "Great team, fair interviews", rating=5)

    assert comment["job_id"] == "job-42"
    assert comment["rating"] == 5
    assert comment["user"]["name"] == "Carol"
    assert comment["user"]["role"] == "professor"
    assert "email" not in comment["user"]


async def test_rating_is_optional(job_comments, alice):
    comment = await job_comments.add_comment("job-42", alice, "No rating from me")
    assert comment["rating"] is None


@pytest.mark.parametrize("text, rating", [(None, None), ("   ", None), ("x" * 1001, None), ("ok", 0), ("ok", 6)])
async def test_add_comment_validation(job_comments, alice, text, rating):
    with pytest.raises(ValidationError):
        await job_comments.add_comment("job-42", alice, text, rating)


async def test_list_comments_newest_first_per_job(job_comments, alice, bob):
    await job_comments.add_comment("job-42", alice, "first")
    await job_comments.add_comment("job-7", alice, "elsewhere")
    await job_comments.add_comment("job-42", bob, "second")

    comments = await job_comments.list_comments("job-42")

    assert [c["text"] for c in comments] == ["second", "first"]
    assert [c["user"]["name"] for c in comments] == ["Bob", "Alice"]
    assert await job_comments.list_comments("job-unknown") == []


async def test_delete_by_author_or_admin(job_comments, alice, bob):
    first = await job_comments.add_comment("job-42", alice, "mine")
    second = await job_comments.add_comment("job-42", alice, "also mine")

    with pytest.raises(PermissionDenied):
        await job_comments.delete_comment(first["_id"], bob, "student")

    await job_comments.delete_comment(first["_id"], alice, "student")
    await job_comments.delete_comment(second["_id"], bob, "admin")
    assert await job_comments.list_comments("job-42") == []

    with pytest.raises(NotFoundError):
        await job_comments.delete_comment(first["_id"], alice, "student")
    with pytest.raises(NotFoundError):
        await job_comments.delete_comment("not-an-id", alice, "student")
