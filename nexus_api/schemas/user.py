from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from nexus_api.models.user import UserRole
from nexus_api.schemas.lookup import Certification


class UserBase(BaseModel):

    email: EmailStr


class UserCreate(UserBase):

    name: str = Field(min_length=1)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.STUDENT
    bio: Optional[str] = Field(default=None, max_length=500)
    major: Optional[str] = None
    department: Optional[str] = None


class UserLogin(UserBase):

    password: str


class ProfileUpdate(BaseModel):

    name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = Field(default=None, max_length=500)
    major: Optional[str] = None
    department: Optional[str] = None
    profile_picture: Optional[str] = None
    skills: Optional[List[str]] = None
    certifications: Optional[List[Certification]] = None


class TokenPayload(BaseModel):

    sub: str = Field(min_length=1)
    email: str
    role: UserRole
    exp: int
