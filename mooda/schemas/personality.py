"""
Personality schemas.

GET    /personalities               → list[PersonalityResponse]
POST   /personalities/custom        → CustomPersonalityCreate → PersonalityResponse
DELETE /personalities/custom/{id}   → PersonalityResponse
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MBTISelection(BaseModel):
    energy: Literal["E", "I"]
    information: Literal["S", "N"]
    decisions: Literal["T", "F"]
    lifestyle: Literal["J", "P"]

    @property
    def code(self) -> str:
        return f"{self.energy}{self.information}{self.decisions}{self.lifestyle}"


class CustomPersonalityCreate(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=64)
    description: str = Field(default="", max_length=500)
    mbti: MBTISelection


class PersonalityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    icon_type: str
    is_custom: bool = False
