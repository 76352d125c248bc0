# backend/caras/schemas/identity.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role: str
    idle_timeout_minutes: int


class SessionRead(BaseModel):
    user_id: str
    email: str
    role: str


class ProfileRead(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: str = ""
    avatar_url: str = ""
    bio: str = ""
    # Password change is attempted only when either field is filled
    new_password: str = ""
    confirm_password: str = ""
