"""
User accounts as seen by this service: created on first login, then only the
selected personality changes.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from mooda.core.errors import UserNotFoundError
from mooda.models.user import User
from mooda.services.personalities import resolve_personality


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def get_or_create_user(
    db: Session,
    user_id: str,
    display_name: Optional[str] = None,
    provider_id: Optional[str] = None,
    email: Optional[str] = None,
    image: Optional[str] = None,
) -> tuple[User, bool]:
    """Return (user, created). An existing user is returned unchanged."""
    existing = db.get(User, user_id)
    if existing is not None:
        return existing, False
    user = User(
        id=user_id,
        display_name=display_name or "사용자",
        provider_id=provider_id or user_id,
        email=email,
        image=image,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, True


def set_selected_personality(db: Session, user_id: str, personality_id: str) -> User:
    user = get_user(db, user_id)
    personality = resolve_personality(db, personality_id, user_id)
    user.selected_personality_id = personality.id
    db.commit()
    db.refresh(user)
    return user
