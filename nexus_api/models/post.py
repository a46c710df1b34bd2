from datetime import datetime
from typing import List, Optional, TypedDict


class CommentDocument(TypedDict, total=False):
    _id: str
    user_id: str
    text: str
    parent_comment_id: Optional[str]
    created_at: datetime


class PostDocument(TypedDict, total=False):
    _id: str
    title: str
    content: str
    author_id: str
    likes: List[str]
    comments: List[CommentDocument]
    tags: List[str]
    image_url: str
    images: List[str]
    created_at: datetime
    updated_at: datetime
