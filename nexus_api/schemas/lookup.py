from typing import Optional

from pydantic import BaseModel


class Certification(BaseModel):

    platform: str
    certificate_name: str
    issuer: str
    completion_date: str = ""
    credential_id: str
    credential_url: str = ""
    verified: bool = False
    notes: Optional[str] = None


class Skill(BaseModel):

    id: str
    name: str
