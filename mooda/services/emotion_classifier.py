"""
Emotion classifier : one day of conversation -> {emotion, summary, highlight}.

Two tiers, tried in order:

  1. Remote LLM
     A diary-voice prompt is sent to the text-completion client. The first
     balanced `{...}` block in the reply is JSON-decoded and validated; the
     emotion label is coerced into the closed `Emotion` set. Any LLMError,
     missing block, bad JSON or schema violation falls through to tier 2.

  2. Keyword heuristic (pure, no I/O)
     Each emotion is scored by counting keyword substrings in the lowercased
     NFC text of the whole conversation. The strictly highest score wins;
     equal non-zero scores go to the emotion declared first in
     EMOTION_KEYWORDS; all-zero scores give Neutral.

Public API
----------
EmotionClassifier(llm_client).classify(lines)  -> ClassificationResult
heuristic_classify(lines)                      -> ClassificationResult
extract_json_block(text)                       -> str | None
"""
from __future__ import annotations

import json
import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from mooda.models.conversation import ConversationMessage, MessageRole
from mooda.models.emotion_log import Emotion
from mooda.services.llm_client import LLMError, TextCompletionClient

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Keyword configuration
# ---------------------------------------------------------------------------

# Declaration order is the tie-break priority.
EMOTION_KEYWORDS: dict[Emotion, tuple[str, ...]] = {
    Emotion.VeryHappy: ("완전", "너무좋", "최고", "대박", "신나", "환상적", "완벽"),
    Emotion.Happy: ("좋", "기쁘", "행복", "즐거", "만족", "웃", "기분좋", "다행"),
    Emotion.Neutral: ("그냥", "보통", "평범", "괜찮", "무난"),
    Emotion.Sad: ("슬프", "우울", "힘들", "아프", "속상", "실망", "걱정"),
    Emotion.VerySad: ("너무슬", "절망", "포기", "죽고싶", "최악"),
    Emotion.Angry: ("짜증", "화", "빡", "싫", "답답", "스트레스", "열받", "미치"),
}

SUMMARY_MAX_CHARS = 80
SUMMARY_USER_LINES = 3
DEFAULT_SUMMARY = "오늘은 평범한 하루를 보냈어요."
DEFAULT_HIGHLIGHT = "일상 대화"


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

class TranscriptLine(NamedTuple):
    role: str
    content: str


LineInput = Union[TranscriptLine, ConversationMessage, str]


@dataclass(frozen=True)
class ClassificationResult:
    emotion: Emotion
    summary: str
    highlight: str
    source: str  # "llm" | "heuristic"


class LLMSummary(BaseModel):
    """Shape the remote model is asked to return; validated before use."""
    summary: str = Field(min_length=1)
    emotion: Emotion
    highlight: str = ""

    @field_validator("summary", "highlight", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("emotion", mode="before")
    @classmethod
    def coerce_emotion(cls, v):
        return Emotion.normalize(v)


# ---------------------------------------------------------------------------
# Transcript helpers
# ---------------------------------------------------------------------------

_ROLE_PREFIXES = {
    "user": MessageRole.user.value,
    "ai": MessageRole.ai.value,
    "assistant": MessageRole.ai.value,
}


def _to_line(item: LineInput) -> TranscriptLine:
    if isinstance(item, TranscriptLine):
        return item
    if isinstance(item, ConversationMessage):
        role = item.role.value if hasattr(item.role, "value") else str(item.role)
        return TranscriptLine(role, item.content)
    text = str(item)
    head, sep, rest = text.partition(":")
    if sep and head.strip().lower() in _ROLE_PREFIXES:
        return TranscriptLine(_ROLE_PREFIXES[head.strip().lower()], rest.strip())
    return TranscriptLine(MessageRole.user.value, text.strip())


def to_transcript(items: Iterable[LineInput]) -> list[TranscriptLine]:
    """Normalize messages, ORM rows or "role: text" strings into transcript lines."""
    return [line for line in (_to_line(i) for i in items) if line.content]


def _normalize_text(text: str) -> str:
    return unicodedata.normalize("NFC", text).lower()


# ---------------------------------------------------------------------------
# Tier 2 : keyword heuristic
# ---------------------------------------------------------------------------

def score_emotions(text: str) -> dict[Emotion, int]:
    normalized = _normalize_text(text)
    return {
        emotion: sum(normalized.count(_normalize_text(k)) for k in keywords)
        for emotion, keywords in EMOTION_KEYWORDS.items()
    }


def pick_emotion(scores: dict[Emotion, int]) -> Emotion:
    best, best_score = Emotion.Neutral, 0
    for emotion in EMOTION_KEYWORDS:
        if scores.get(emotion, 0) > best_score:
            best, best_score = emotion, scores[emotion]
    return best


def _summarize_user_lines(lines: Sequence[TranscriptLine]) -> str:
    user_lines = [l.content for l in lines if l.role == MessageRole.user.value]
    if not user_lines:
        return DEFAULT_SUMMARY
    joined = " ".join(user_lines[-SUMMARY_USER_LINES:])
    if len(joined) > SUMMARY_MAX_CHARS:
        return joined[:SUMMARY_MAX_CHARS] + "..."
    return joined


def heuristic_classify(items: Iterable[LineInput]) -> ClassificationResult:
    """Deterministic fallback: same input always yields the same result."""
    lines = to_transcript(items)
    text = "\n".join(l.content for l in lines)
    normalized = _normalize_text(text)

    scores = score_emotions(text)
    emotion = pick_emotion(scores)

    matched = [
        k for k in EMOTION_KEYWORDS[emotion] if _normalize_text(k) in normalized
    ] if scores.get(emotion) else []

    return ClassificationResult(
        emotion=emotion,
        summary=_summarize_user_lines(lines),
        highlight=", ".join(matched) if matched else DEFAULT_HIGHLIGHT,
        source="heuristic",
    )


# ---------------------------------------------------------------------------
# Tier 1 : remote LLM
# ---------------------------------------------------------------------------

_PROMPT_TEMPLATE = """\
당신은 사용자의 하루 일상과 감정을 분석하는 전문가입니다.
아래는 사용자가 하루 동안 표현한 생각, 감정, 경험들입니다.

대화 내용:
{transcript}

분석 지침:
1. 사용자가 실제로 무엇을 했는지, 어떤 상황에 있었는지에 집중하세요.
2. 사용자의 감정 상태와 기분 변화를 파악하세요.
3. 요약은 사용자가 자신의 하루를 일기로 쓰듯 1인칭으로, 친근한 말투로 1-2문장만 작성하세요.
4. 절대로 "AI와 대화", "추천을 받았다", "대화를 나눴다" 같은 표현을 사용하지 마세요.

다음 JSON 형식으로만 응답해주세요:
{{
  "summary": "사용자의 하루 요약 (1-2문장)",
  "emotion": "{choices} 중 하나",
  "highlight": "하루 중 가장 기억에 남는 한 조각"
}}
"""


def build_prompt(lines: Sequence[TranscriptLine]) -> str:
    transcript = "\n".join(f"{l.role}: {l.content}" for l in lines)
    choices = ", ".join(e.value for e in Emotion)
    return _PROMPT_TEMPLATE.format(transcript=transcript, choices=choices)


def extract_json_block(text: str) -> Optional[str]:
    """
    Return the first balanced `{...}` block of `text`, or None.
    Braces inside JSON string literals are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from this opening brace; try the next one.
        start = text.find("{", start + 1)
    return None


def parse_llm_reply(text: str) -> LLMSummary:
    """Raise ValueError when the reply holds no usable JSON object."""
    block = extract_json_block(text)
    if block is None:
        raise ValueError("no JSON object in LLM reply")
    try:
        data = json.loads(block)
    except RecursionError as exc:
        raise ValueError("LLM JSON is nested too deeply") from exc
    if not isinstance(data, dict):
        raise ValueError("LLM JSON is not an object")
    return LLMSummary.model_validate(data)


# ---------------------------------------------------------------------------
# Public : two-tier classifier
# ---------------------------------------------------------------------------

class EmotionClassifier:
    """Tier 1 when an LLM client is configured, tier 2 otherwise or on any failure."""

    def __init__(self, llm_client: Optional[TextCompletionClient] = None):
        self.llm_client = llm_client

    def classify(self, items: Iterable[LineInput]) -> ClassificationResult:
        lines = to_transcript(items)
        if self.llm_client is not None:
            result = self._classify_remote(lines)
            if result is not None:
                return result
        return heuristic_classify(lines)

    def _classify_remote(self, lines: Sequence[TranscriptLine]) -> Optional[ClassificationResult]:
        try:
            reply = self.llm_client.complete(build_prompt(lines))
            parsed = parse_llm_reply(reply)
        except LLMError as exc:
            logger.warning("LLM call failed, using keyword fallback: %s", exc)
            return None
        except (ValueError, ValidationError, RecursionError) as exc:
            logger.warning("LLM reply unusable, using keyword fallback: %s", exc)
            return None

        return ClassificationResult(
            emotion=parsed.emotion,
            summary=parsed.summary,
            highlight=parsed.highlight,
            source="llm",
        )
