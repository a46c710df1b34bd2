from datetime import datetime
from typing import TypedDict


MAX_MESSAGE_LENGTH = 1000


class MessageDocument(TypedDict, total=False):
    _id: str
    sender_id: str
    recipient_id: str
    content: str
    read: bool
    created_at: datetime
