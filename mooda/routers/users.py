"""
Users router.

POST /users        : Create the user on first login (idempotent)
GET  /users/{id}   : Fetch a user
PUT  /users/{id}   : Change the selected personality
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from mooda.db.base import get_db
from mooda.models.user import User
from mooda.schemas.common import NOT_FOUND
from mooda.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from mooda.services.personalities import default_personality
from mooda.services.users import get_or_create_user, get_user, set_selected_personality

router = APIRouter(prefix="/users", tags=["users"], responses=NOT_FOUND)


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        display_name=user.display_name,
        email=user.email,
        image=user.image,
        selected_personality_id=user.selected_personality_id or default_personality().id,
        created_at=user.created_at,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user if it does not exist yet",
)
def create_user(
    payload: UserCreateRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> UserResponse:
    user, created = get_or_create_user(
        db,
        payload.id,
        display_name=payload.display_name,
        email=payload.email,
        image=payload.image,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return _to_response(user)


@router.get("/{user_id}", response_model=UserResponse)
def read_user(user_id: str, db: Session = Depends(get_db)) -> UserResponse:
    return _to_response(get_user(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    db: Session = Depends(get_db),
) -> UserResponse:
    return _to_response(set_selected_personality(db, user_id, payload.selected_personality_id))
