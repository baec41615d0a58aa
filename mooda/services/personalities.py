"""
AI personalities: four built-ins plus user-created MBTI personalities.

Public API
----------
BUILTIN_PERSONALITIES                                  dict[id, Personality]
generate_system_prompt(mbti, name)                  -> str
list_personalities(db, user_id)                     -> list[Personality]
resolve_personality(db, personality_id, user_id)    -> Personality
create_custom_personality(db, user_id, name, ...)   -> CustomPersonality
deactivate_custom_personality(db, id, user_id)      -> CustomPersonality
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from mooda.core.config import settings
from mooda.core.errors import PersonalityNotFoundError, UserNotFoundError
from mooda.models.personality import CustomPersonality
from mooda.models.user import User


@dataclass(frozen=True)
class Personality:
    id: str
    name: str
    description: str
    icon_type: str
    system_prompt: str
    is_custom: bool = False


_COMMON_RULES = """
📌 핵심 원칙:
- 입장 시 1회만 자기소개, 그 외에는 인사 반복 금지
- 같은 질문 반복 금지
- 무조건 상담사처럼 굴지 않기
- 항상 150자 이내로 답변
"""

BUILTIN_PERSONALITIES: dict[str, Personality] = {
    p.id: p
    for p in (
        Personality(
            id="friendly",
            name="무니",
            description="편안하고 자연스러운 대화를 나눠요. 오랜 친구와 이야기하는 것처럼 소통해요.",
            icon_type="friendly",
            system_prompt="너는 무니야. 따뜻하고 친근한 AI 친구로서, 반말로 편안한 대화를 나눈다.\n"
            + _COMMON_RULES,
        ),
        Personality(
            id="calm",
            name="무무",
            description="차분하게 이야기를 들어주고 마음을 정리하도록 도와줘요.",
            icon_type="calm",
            system_prompt="너는 무무야. 차분하고 따뜻한 목소리로 천천히 이야기를 들어준다.\n"
            + _COMMON_RULES,
        ),
        Personality(
            id="wise",
            name="무리",
            description="고민을 함께 정리하고 현실적인 관점을 나눠줘요.",
            icon_type="wise",
            system_prompt="너는 무리야. 사려 깊은 친구로서 고민을 함께 정리하고 현실적인 관점을 나눈다.\n"
            + _COMMON_RULES,
        ),
        Personality(
            id="energetic",
            name="무크",
            description="밝은 에너지로 하루에 활력을 더해줘요.",
            icon_type="energetic",
            system_prompt="너는 무크야. 밝고 에너지 넘치는 친구로서 신나게 맞장구치며 대화한다.\n"
            + _COMMON_RULES,
        ),
    )
}

MBTI_TRAITS: dict[str, str] = {
    "E": "외향적이고 사교적인",
    "I": "내향적이고 신중한",
    "S": "구체적이고 현실적인",
    "N": "직관적이고 상상력이 풍부한",
    "T": "논리적이고 객관적인",
    "F": "감정적이고 공감을 잘하는",
    "J": "계획적이고 체계적인",
    "P": "유연하고 즉흥적인",
}


def generate_system_prompt(mbti: str, name: str) -> str:
    traits = ", ".join(MBTI_TRAITS[letter] for letter in mbti.upper())
    return (
        f"너는 {name}이야. 절대로 이 이름을 잊지 마. {traits} 성격의 AI 친구로서, "
        "사용자와 자연스럽고 편안한 대화를 나눈다.\n\n"
        f"- 너의 이름은 \"{name}\"이고 MBTI는 \"{mbti.upper()}\"이다. 물어보면 그대로 대답한다.\n"
        f"- MBTI {mbti.upper()} 성향에 맞는 대화 스타일을 유지한다.\n"
        + _COMMON_RULES
    )


def _from_custom(row: CustomPersonality) -> Personality:
    return Personality(
        id=row.id,
        name=row.name,
        description=row.description,
        icon_type=row.mbti_type,
        system_prompt=row.system_prompt,
        is_custom=True,
    )


def default_personality() -> Personality:
    return BUILTIN_PERSONALITIES.get(
        settings.DEFAULT_PERSONALITY_ID, BUILTIN_PERSONALITIES["friendly"]
    )


def _active_custom(db: Session, user_id: str) -> list[CustomPersonality]:
    return (
        db.query(CustomPersonality)
        .filter(CustomPersonality.user_id == user_id, CustomPersonality.is_active.is_(True))
        .order_by(CustomPersonality.created_at.asc())
        .all()
    )


def list_personalities(db: Session, user_id: Optional[str] = None) -> list[Personality]:
    """Built-ins first, then the user's active custom personalities."""
    result = list(BUILTIN_PERSONALITIES.values())
    if user_id:
        result.extend(_from_custom(row) for row in _active_custom(db, user_id))
    return result


def find_personality(
    db: Session, personality_id: str, user_id: Optional[str] = None
) -> Optional[Personality]:
    if personality_id in BUILTIN_PERSONALITIES:
        return BUILTIN_PERSONALITIES[personality_id]
    q = db.query(CustomPersonality).filter(
        CustomPersonality.id == personality_id, CustomPersonality.is_active.is_(True)
    )
    if user_id:
        q = q.filter(CustomPersonality.user_id == user_id)
    row = q.first()
    return _from_custom(row) if row is not None else None


def resolve_personality(
    db: Session, personality_id: Optional[str], user_id: Optional[str] = None
) -> Personality:
    """No id -> the default personality; an unknown id -> PersonalityNotFoundError."""
    if not personality_id:
        return default_personality()
    found = find_personality(db, personality_id, user_id)
    if found is None:
        raise PersonalityNotFoundError(personality_id)
    return found


def create_custom_personality(
    db: Session,
    user_id: str,
    name: str,
    mbti: str,
    description: str = "",
) -> CustomPersonality:
    if db.get(User, user_id) is None:
        raise UserNotFoundError(user_id)
    mbti = mbti.upper()
    row = CustomPersonality(
        user_id=user_id,
        name=name,
        description=description,
        mbti_type=mbti,
        system_prompt=generate_system_prompt(mbti, name),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def deactivate_custom_personality(
    db: Session, personality_id: str, user_id: str
) -> CustomPersonality:
    row = (
        db.query(CustomPersonality)
        .filter(CustomPersonality.id == personality_id, CustomPersonality.user_id == user_id)
        .first()
    )
    if row is None:
        raise PersonalityNotFoundError(personality_id)
    row.is_active = False
    db.commit()
    db.refresh(row)
    return row
