import pytest

from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import AuthenticationError, NotFoundError, ValidationError
from nexus_api.services.user_service import UserService
from nexus_api.utils.security import decode_access_token


@pytest.fixture
def user_service(indexed_db) -> UserService:
    return UserService(UserRepository(indexed_db), PostRepository(indexed_db), EventRepository(indexed_db))


async def test_register_returns_public_user_and_token(user_service):
    user, token = await user_service.register_user("Dana", "Dana@University.edu", "secret123", role="professor")

    assert user["email"] == "dana@university.edu"
    assert user["role"] == "professor"
    assert "hashed_password" not in user
    payload = decode_access_token(token)
    assert payload["sub"] == user["_id"]
    assert payload["role"] == "professor"


async def test_register_refuses_duplicates_admins_and_short_passwords(user_service):
    await user_service.register_user("Dana", "dana@university.edu", "secret123")

    with pytest.raises(ValidationError, match="already exists"):
        await user_service.register_user("Dana Again", "DANA@university.edu", "secret123")
    with pytest.raises(ValidationError):
        await user_service.register_user("Root", "root@university.edu", "secret123", role="admin")
    with pytest.raises(ValidationError):
        await user_service.register_user("Eve", "eve@university.edu", "123")


async def test_login(user_service):
    await user_service.register_user("Dana", "dana@university.edu", "secret123")

    user, token = await user_service.authenticate_user("dana@university.edu", "secret123")
    assert user["name"] == "Dana"
    assert "hashed_password" not in user
    assert decode_access_token(token)["email"] == "dana@university.edu"

    with pytest.raises(AuthenticationError):
        await user_service.authenticate_user("dana@university.edu", "wrong-password")
    with pytest.raises(AuthenticationError):
        await user_service.authenticate_user("nobody@university.edu", "secret123")


async def test_follow_and_unfollow(user_service, alice, bob):
    await user_service.follow(alice, bob)
    await user_service.follow(alice, bob)

    profile = await user_service.get_profile(bob)
    assert [u["name"] for u in profile["user"]["followers"]] == ["Alice"]
    assert [u["name"] for u in (await user_service.get_profile(alice))["user"]["following"]] == ["Bob"]

    await user_service.unfollow(alice, bob)
    assert (await user_service.get_profile(bob))["user"]["followers"] == []

    with pytest.raises(ValidationError):
        await user_service.follow(alice, alice)
    with pytest.raises(NotFoundError):
        await user_service.follow(alice, "0123456789abcdef01234567")


async def test_update_profile_skips_missing_fields(user_service, alice):
    user = await user_service.update_profile(alice, {"bio": "CS junior", "major": None})
    assert user["bio"] == "CS junior"
    assert user["name"] == "Alice"


async def test_delete_user(user_service, alice):
    await user_service.delete_user(alice)
    with pytest.raises(NotFoundError):
        await user_service.get_current(alice)
    with pytest.raises(NotFoundError):
        await user_service.delete_user(alice)
