import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nexus_api.config import CLIENT_URL
from nexus_api.database.connection import close_mongo_connection, connect_to_mongo, get_database
from nexus_api.repositories.conversation_repository import ConversationRepository
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.job_comment_repository import JobCommentRepository
from nexus_api.repositories.message_repository import MessageRepository
from nexus_api.repositories.post_repository import PostRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.routers.auth import router as auth_router
from nexus_api.routers.certifications import router as certifications_router
from nexus_api.routers.chat import router as chat_router
from nexus_api.routers.events import router as events_router
from nexus_api.routers.job_comments import router as job_comments_router
from nexus_api.routers.posts import router as posts_router
from nexus_api.routers.skills import router as skills_router
from nexus_api.routers.users import router as users_router
from nexus_api.utils.http_client import close_http_client
from nexus_api.utils.logger import setup_logger


logger = logging.getLogger(__name__)


async def ensure_indexes() -> None:
    db = get_database()
    repos = (
        UserRepository(db), PostRepository(db), EventRepository(db), JobCommentRepository(db),
        MessageRepository(db), ConversationRepository(db),
    )
    for repo in repos:
        await repo.ensure_indexes()


@asynccontextmanager
async def lifespan(app: FastAPI):

    await connect_to_mongo()
    await ensure_indexes()
    try:
        yield
    finally:
        await close_http_client()
        await close_mongo_connection()


setup_logger()

app = FastAPI(title="NexusNU API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list({"http://localhost:5173", CLIENT_URL}),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed input is a 400 across the API
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(posts_router)
app.include_router(events_router)
app.include_router(job_comments_router)
app.include_router(chat_router)
app.include_router(certifications_router)
app.include_router(skills_router)


@app.get("/")
async def root():

    return {
        "message": "Welcome to NexusNU API",
        "version": app.version,
        "endpoints": {
            "auth": "/api/auth",
            "users": "/api/users",
            "posts": "/api/posts",
            "events": "/api/events",
            "job_comments": "/api/job-comments",
            "chat": "/api/chat",
            "certifications": "/api/certifications",
            "skills": "/api/skills",
        },
    }
