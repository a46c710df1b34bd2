from fastapi import APIRouter, Depends, status

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.post import CommentCreate, PostCreate, PostUpdate
from nexus_api.services.errors import ServiceError
from nexus_api.services.post_service import PostService
from nexus_api.utils.dependencies import as_http_exception, get_current_user


router = APIRouter(prefix="/api/posts", tags=["posts"])


def get_post_service(db = Depends(mongo_db_dependency)) -> PostService:
    return PostService(PostRepository(db), UserRepository(db))


@router.get("")
async def list_posts(service: PostService = Depends(get_post_service)):
    return {"posts": await service.list_posts()}


@router.get("/user/{user_id}")
async def list_posts_by_user(user_id: str, service: PostService = Depends(get_post_service)):
    return {"posts": await service.list_posts(author_id=user_id)}


@router.get("/{post_id}")
async def get_post(post_id: str, service: PostService = Depends(get_post_service)):
    try:
        return {"post": await service.get_post(post_id)}
    except ServiceError as exc:
        raise as_http_exception(exc)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        post = await service.create_post(current_user["_id"], payload.title, payload.content, payload.tags, payload.images)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Post created successfully", "post": post}


@router.put("/{post_id}")
async def update_post(post_id: str, payload: PostUpdate, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        post = await service.update_post(post_id, current_user["_id"], payload.model_dump(exclude_none=True))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Post updated successfully", "post": post}


@router.delete("/{post_id}")
async def delete_post(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        await service.delete_post(post_id, current_user["_id"], current_user.get("role"))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like")
async def toggle_like(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        result = await service.toggle_like(post_id, current_user["_id"])
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Post liked" if result["liked"] else "Post unliked", **result}


@router.post("/{post_id}/comment", status_code=status.HTTP_201_CREATED)
async def add_comment(post_id: str, payload: CommentCreate, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        post = await service.add_comment(post_id, current_user["_id"], payload.text, payload.parent_comment_id)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Comment added successfully", "post": post}


@router.delete("/{post_id}/comment/{comment_id}")
async def delete_comment(post_id: str, comment_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        post = await service.delete_comment(post_id, comment_id, current_user["_id"], current_user.get("role"))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Comment deleted successfully", "post": post}
