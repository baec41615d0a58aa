"""
User schemas.

POST /users        → UserCreateRequest            → UserResponse
GET  /users/{id}   → UserResponse
PUT  /users/{id}   → UserUpdateRequest            → UserResponse
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    id: str = Field(min_length=1, max_length=64, description="Identity-provider user id.")
    display_name: Optional[str] = Field(default=None, max_length=128)
    email: Optional[str] = None
    image: Optional[str] = None


class UserUpdateRequest(BaseModel):
    selected_personality_id: str = Field(min_length=1, max_length=64)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str
    email: Optional[str] = None
    image: Optional[str] = None
    selected_personality_id: str
    created_at: datetime
