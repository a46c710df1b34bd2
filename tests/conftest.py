import uuid

import pytest

from nexus_api.repositories.conversation_repository import ConversationRepository
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.job_comment_repository import JobCommentRepository
from nexus_api.repositories.message_repository import MessageRepository
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.chat_service import ChatService
from nexus_api.services.errors import UpstreamError
from nexus_api.utils.cache import MemoryCache
from nexus_api.utils.rate_limiter import MemoryRateLimiter

from fakes import FakeHttp, make_user, mock_database


@pytest.fixture
def db():
    return mock_database(f"nexusnu_test_{uuid.uuid4().hex[:8]}")


@pytest.fixture
async def indexed_db(db):
    repos = (
        UserRepository(db), MessageRepository(db), ConversationRepository(db),
        PostRepository(db), EventRepository(db), JobCommentRepository(db),
    )
    for repo in repos:
        await repo.ensure_indexes()
    return db


@pytest.fixture
async def alice(indexed_db) -> str:
    return await make_user(indexed_db, "Alice")


@pytest.fixture
async def bob(indexed_db) -> str:
    return await make_user(indexed_db, "Bob")


@pytest.fixture
async def carol(indexed_db) -> str:
    return await make_user(indexed_db, "Carol", role="professor")


@pytest.fixture
def limiter() -> MemoryRateLimiter:
    return MemoryRateLimiter(limit=50, window_ms=3_600_000)


@pytest.fixture
def chat_service(indexed_db, limiter) -> ChatService:
    return ChatService(
        MessageRepository(indexed_db),
        ConversationRepository(indexed_db),
        UserRepository(indexed_db),
        limiter,
    )


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def upstream_down() -> FakeHttp:
    return FakeHttp(error=UpstreamError("connection refused"))
