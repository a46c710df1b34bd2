from datetime import datetime
from typing import Optional, TypedDict


MAX_JOB_COMMENT_LENGTH = 1000
MIN_RATING = 1
MAX_RATING = 5


class JobCommentDocument(TypedDict, total=False):
    _id: str
    job_id: str
    user_id: str
    text: str
    rating: Optional[int]
    created_at: datetime
    updated_at: datetime
