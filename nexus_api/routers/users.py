from fastapi import APIRouter, Depends

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.models.user import UserRole
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.user import ProfileUpdate
from nexus_api.services.errors import ServiceError
from nexus_api.services.user_service import UserService
from nexus_api.utils.dependencies import as_http_exception, get_current_user, require_roles


router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_service(db = Depends(mongo_db_dependency)) -> UserService:
    return UserService(UserRepository(db), PostRepository(db), EventRepository(db))


@router.get("")
async def list_users(service: UserService = Depends(get_user_service)):
    return {"users": await service.list_users()}


@router.put("/profile")
async def update_profile(payload: ProfileUpdate, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        user = await service.update_profile(current_user["_id"], payload.model_dump(exclude_none=True))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Profile updated successfully", "user": user}


@router.get("/{user_id}")
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    try:
        return await service.get_profile(user_id)
    except ServiceError as exc:
        raise as_http_exception(exc)


@router.post("/{user_id}/follow")
async def follow_user(user_id: str, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        await service.follow(current_user["_id"], user_id)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "User followed successfully"}


@router.delete("/{user_id}/unfollow")
async def unfollow_user(user_id: str, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        await service.unfollow(current_user["_id"], user_id)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "User unfollowed successfully"}


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: dict = Depends(require_roles(UserRole.ADMIN)), service: UserService = Depends(get_user_service)):
    try:
        await service.delete_user(user_id)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "User deleted successfully"}
