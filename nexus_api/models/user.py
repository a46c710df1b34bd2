from datetime import datetime
from enum import Enum
from typing import List, Optional, TypedDict


class UserRole(str, Enum):
    STUDENT = "student"
    PROFESSOR = "professor"
    ADMIN = "admin"


class CertificationDocument(TypedDict, total=False):
    platform: str
    certificate_name: str
    issuer: str
    completion_date: str
    credential_id: str
    credential_url: str
    verified: bool
    notes: Optional[str]


class UserDocument(TypedDict, total=False):

    _id: str
    name: str
    email: str
    hashed_password: str
    role: str
    bio: Optional[str]
    major: Optional[str]
    department: Optional[str]
    profile_picture: str
    skills: List[str]
    certifications: List[CertificationDocument]
    # user ids
    followers: List[str]
    following: List[str]
    is_verified: bool
    created_at: datetime
    updated_at: datetime
