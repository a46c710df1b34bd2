from fastapi import APIRouter, Depends, Response, status

from nexus_api.config import COOKIE_SECURE, JWT_EXPIRE_DAYS
from nexus_api.database.connection import mongo_db_dependency
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.user import UserCreate, UserLogin
from nexus_api.services.errors import ServiceError
from nexus_api.services.user_service import UserService
from nexus_api.utils.dependencies import as_http_exception, get_current_user


router = APIRouter(prefix="/api/auth", tags=["auth"])

COOKIE_MAX_AGE = JWT_EXPIRE_DAYS * 24 * 60 * 60


def get_user_service(db = Depends(mongo_db_dependency)) -> UserService:
    return UserService(UserRepository(db))


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie("token", token, httponly=True, secure=COOKIE_SECURE, max_age=COOKIE_MAX_AGE, samesite="lax")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, response: Response, service: UserService = Depends(get_user_service)):
    try:
        user, token = await service.register_user(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            bio=payload.bio,
            major=payload.major,
            department=payload.department,
        )
    except ServiceError as exc:
        raise as_http_exception(exc)
    _set_token_cookie(response, token)
    return {"message": "User registered successfully", "user": user, "token": token}


@router.post("/login")
async def login(payload: UserLogin, response: Response, service: UserService = Depends(get_user_service)):
    try:
        user, token = await service.authenticate_user(payload.email, payload.password)
    except ServiceError as exc:
        raise as_http_exception(exc)
    _set_token_cookie(response, token)
    return {"message": "Login successful", "user": user, "token": token}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie("token")
    return {"message": "Logout successful"}


@router.get("/me")
async def me(current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        user = await service.get_current(current_user["_id"])
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"user": user}
