from fastapi import APIRouter, Depends, status

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.repositories.job_comment_repository import JobCommentRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.job_comment import JobCommentCreate
from nexus_api.services.errors import ServiceError
from nexus_api.services.job_comment_service import JobCommentService
from nexus_api.utils.dependencies import as_http_exception, get_current_user


router = APIRouter(prefix="/api/job-comments", tags=["job-comments"])


def get_job_comment_service(db = Depends(mongo_db_dependency)) -> JobCommentService:
    return JobCommentService(JobCommentRepository(db), UserRepository(db))


@router.get("/{job_id}")
async def list_comments(job_id: str, service: JobCommentService = Depends(get_job_comment_service)):
    return {"comments": await service.list_comments(job_id)}


@router.post("/{job_id}", status_code=status.HTTP_201_CREATED)
async def add_comment(job_id: str, payload: JobCommentCreate, current_user: dict = Depends(get_current_user), service: JobCommentService = Depends(get_job_comment_service)):
    try:
        comment = await service.add_comment(job_id, current_user["_id"], payload.text, payload.rating)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"comment": comment}


@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, current_user: dict = Depends(get_current_user), service: JobCommentService = Depends(get_job_comment_service)):
    try:
        await service.delete_comment(comment_id, current_user["_id"], current_user.get("role"))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Comment deleted"}
