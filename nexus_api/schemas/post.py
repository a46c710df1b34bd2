from typing import List, Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class PostUpdate(BaseModel):

    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, max_length=5000)
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None


class CommentCreate(BaseModel):

    text: str = Field(min_length=1, max_length=500)
    parent_comment_id: Optional[str] = None
