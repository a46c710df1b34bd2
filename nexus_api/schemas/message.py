from typing import Optional

from pydantic import BaseModel


class SendMessageRequest(BaseModel):

    # presence and length are checked by ChatService so the edge reports 400
    recipient_id: Optional[str] = None
    content: Optional[str] = None
