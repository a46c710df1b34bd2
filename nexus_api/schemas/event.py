from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class EventCreate(BaseModel):

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    date: datetime
    location: str = Field(min_length=1)
    max_participants: Optional[int] = Field(default=None, ge=1)
    tags: List[str] = Field(default_factory=list)
    image_url: str = ""
    images: List[str] = Field(default_factory=list)


class EventUpdate(BaseModel):

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    tags: Optional[List[str]] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
