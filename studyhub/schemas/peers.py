from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional


class PeerIn(BaseModel):
    id: str = Field(min_length=1, max_length=64, pattern=r'^[A-Za-z0-9_.-]+$')
    display_name: str = Field(min_length=1, max_length=150)
    university_id: str
    course: str = ''
    year_of_study: str = ''
    initials: str = ''
    avatar_color: str = ''
    bio: Optional[str] = None
    email: Optional[EmailStr] = None


class PeerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str
    initials: str
    avatar_color: str
    university_id: str
    course: str
    year_of_study: str
    bio: Optional[str] = None
    online: bool
    last_seen: Optional[datetime] = None


class PresenceIn(BaseModel):
    online: bool = True


class ProfileUpdateIn(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    course: Optional[str] = None
    year_of_study: Optional[str] = None
    bio: Optional[str] = None
    avatar_color: Optional[str] = None


class UniversityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    full_name: str
    color: str


class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None
