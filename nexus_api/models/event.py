from datetime import datetime
from typing import List, Optional, TypedDict


class EventDocument(TypedDict, total=False):
    _id: str
    title: str
    description: str
    date: datetime
    location: str
    organizer_id: str
    participants: List[str]
    max_participants: Optional[int]
    tags: List[str]
    image_url: str
    images: List[str]
    created_at: datetime
    updated_at: datetime
