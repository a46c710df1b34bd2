from datetime import datetime
from typing import List, Optional, TypedDict


class ConversationDocument(TypedDict, total=False):
    _id: str
    # exactly two user ids, sorted
    participants: List[str]
    # "<low_id>:<high_id>", unique
    pair_key: str
    last_message_id: Optional[str]
    # per-user unread counters (user_id -> count)
    unread_counts: dict[str, int]
    created_at: datetime
    updated_at: datetime


def pair_key_for(user_a: str, user_b: str) -> str:
    low, high = sorted([user_a, user_b])
    return f"{low}:{high}"
