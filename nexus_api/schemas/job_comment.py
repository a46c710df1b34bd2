from typing import Optional

from pydantic import BaseModel, Field

from nexus_api.models.job_comment import MAX_JOB_COMMENT_LENGTH, MAX_RATING, MIN_RATING


class JobCommentCreate(BaseModel):

    text: str = Field(min_length=1, max_length=MAX_JOB_COMMENT_LENGTH)
    rating: Optional[int] = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
