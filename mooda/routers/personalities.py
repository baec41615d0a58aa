"""
Personalities router.

GET    /personalities?user_id=      : Built-ins plus the user's custom ones
POST   /personalities/custom        : Create an MBTI personality
DELETE /personalities/custom/{id}   : Deactivate a custom personality
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mooda.db.base import get_db
from mooda.schemas.common import NOT_FOUND
from mooda.schemas.personality import CustomPersonalityCreate, PersonalityResponse
from mooda.services.personalities import (
    create_custom_personality,
    deactivate_custom_personality,
    list_personalities,
)

router = APIRouter(prefix="/personalities", tags=["personalities"], responses=NOT_FOUND)


@router.get("", response_model=list[PersonalityResponse])
def get_personalities(
    user_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> list[PersonalityResponse]:
    return [PersonalityResponse.model_validate(p) for p in list_personalities(db, user_id)]


@router.post(
    "/custom",
    response_model=PersonalityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_personality(
    payload: CustomPersonalityCreate,
    db: Session = Depends(get_db),
) -> PersonalityResponse:
    row = create_custom_personality(
        db,
        user_id=payload.user_id,
        name=payload.name,
        mbti=payload.mbti.code,
        description=payload.description,
    )
    return PersonalityResponse(
        id=row.id,
        name=row.name,
        description=row.description,
        icon_type=row.mbti_type,
        is_custom=True,
    )


@router.delete("/custom/{personality_id}", response_model=PersonalityResponse)
def delete_personality(
    personality_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
) -> PersonalityResponse:
    row = deactivate_custom_personality(db, personality_id, user_id)
    return PersonalityResponse(
        id=row.id,
        name=row.name,
        description=row.description,
        icon_type=row.mbti_type,
        is_custom=True,
    )
