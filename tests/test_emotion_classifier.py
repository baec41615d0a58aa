"""
Tests for the two-tier emotion classifier.
"""
import pytest

from conftest import FakeLLM
from mooda.models.emotion_log import Emotion
from mooda.services.emotion_classifier import (
    DEFAULT_HIGHLIGHT,
    DEFAULT_SUMMARY,
    EmotionClassifier,
    TranscriptLine,
    extract_json_block,
    heuristic_classify,
    parse_llm_reply,
    pick_emotion,
    score_emotions,
)


# ---------------------------------------------------------------------------
# Keyword heuristic
# ---------------------------------------------------------------------------

class TestHeuristic:
    def test_happy_example(self):
        result = heuristic_classify(["user: 오늘 정말 좋았어", "ai: 다행이네요"])
        assert result.emotion == Emotion.Happy
        assert "좋" in result.highlight
        assert result.summary == "오늘 정말 좋았어"
        assert result.source == "heuristic"

    def test_deterministic(self):
        lines = ["user: 회사 일이 너무 힘들고 짜증나", "ai: 많이 힘드셨겠어요"]
        assert heuristic_classify(lines) == heuristic_classify(lines)

    def test_no_keywords_is_neutral(self):
        result = heuristic_classify(["user: 점심으로 국수를 먹었다"])
        assert result.emotion == Emotion.Neutral
        assert result.highlight == DEFAULT_HIGHLIGHT

    def test_no_user_lines_gives_default_summary(self):
        result = heuristic_classify(["ai: 안녕하세요"])
        assert result.summary == DEFAULT_SUMMARY

    def test_summary_uses_last_three_user_lines(self):
        lines = [f"user: 문장{i}" for i in range(5)]
        assert heuristic_classify(lines).summary == "문장2 문장3 문장4"

    def test_long_summary_truncated(self):
        result = heuristic_classify(["user: " + "가" * 200])
        assert result.summary == "가" * 80 + "..."

    def test_transcript_lines_and_plain_strings(self):
        result = heuristic_classify([TranscriptLine("user", "최고의 하루"), "대박 신나"])
        assert result.emotion == Emotion.VeryHappy


class TestTieBreak:
    def test_tie_goes_to_first_declared(self):
        scores = {e: 0 for e in Emotion}
        scores[Emotion.Sad] = 2
        scores[Emotion.Angry] = 2
        assert pick_emotion(scores) == Emotion.Sad

    def test_all_zero_is_neutral(self):
        assert pick_emotion({e: 0 for e in Emotion}) == Emotion.Neutral

    def test_strictly_higher_wins(self):
        scores = {e: 0 for e in Emotion}
        scores[Emotion.VeryHappy] = 1
        scores[Emotion.Angry] = 3
        assert pick_emotion(scores) == Emotion.Angry

    def test_scores_cover_every_emotion(self):
        assert set(score_emotions("아무 말")) == set(Emotion)


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------

class TestExtractJsonBlock:
    def test_plain(self):
        assert extract_json_block('{"a": 1}') == '{"a": 1}'

    def test_surrounding_prose(self):
        text = '결과입니다:\n```json\n{"summary": "x", "emotion": "Happy"}\n```'
        assert extract_json_block(text) == '{"summary": "x", "emotion": "Happy"}'

    def test_nested_and_braces_in_strings(self):
        text = 'x {"summary": "a } b", "meta": {"k": "{"}} y'
        assert extract_json_block(text) == '{"summary": "a } b", "meta": {"k": "{"}}'

    def test_none_when_missing(self):
        assert extract_json_block("no json here") is None

    def test_unbalanced_then_valid(self):
        assert extract_json_block('{ broken {"ok": true}') == '{"ok": true}'
        assert extract_json_block('oops { and later') is None


class TestParseReply:
    def test_alias_emotion_normalized(self):
        parsed = parse_llm_reply('{"summary": "산책을 했다", "emotion": "calm"}')
        assert parsed.emotion == Emotion.Neutral
        assert parsed.highlight == ""

    def test_unknown_emotion_is_neutral(self):
        parsed = parse_llm_reply('{"summary": "s", "emotion": "Ecstatic"}')
        assert parsed.emotion == Emotion.Neutral

    def test_missing_summary_rejected(self):
        with pytest.raises(ValueError):
            parse_llm_reply('{"emotion": "Happy"}')

    def test_no_json_rejected(self):
        with pytest.raises(ValueError):
            parse_llm_reply("그냥 좋은 하루였어요")

    def test_deeply_nested_json_rejected(self):
        depth = 50000
        reply = '{"a": ' * depth + "1" + "}" * depth
        with pytest.raises(ValueError):
            parse_llm_reply(reply)


# ---------------------------------------------------------------------------
# Two-tier behaviour
# ---------------------------------------------------------------------------

class TestEmotionClassifier:
    LINES = ["user: 오늘 정말 좋았어", "ai: 다행이네요"]

    def test_llm_tier_used_when_valid(self):
        llm = FakeLLM('{"summary": "친구와 맛있는 저녁을 먹었다.", "emotion": "VeryHappy", "highlight": "저녁"}')
        result = EmotionClassifier(llm).classify(self.LINES)
        assert result.source == "llm"
        assert result.emotion == Emotion.VeryHappy
        assert result.summary == "친구와 맛있는 저녁을 먹었다."
        assert "오늘 정말 좋았어" in llm.prompts[0]

    def test_llm_error_falls_back(self):
        result = EmotionClassifier(FakeLLM()).classify(self.LINES)
        assert result.source == "heuristic"
        assert result.emotion == Emotion.Happy

    def test_garbage_reply_falls_back(self):
        result = EmotionClassifier(FakeLLM("I cannot help with that")).classify(self.LINES)
        assert result.source == "heuristic"

    def test_deeply_nested_reply_falls_back(self):
        depth = 50000
        reply = '{"summary": ' * depth + '"x"' + "}" * depth
        result = EmotionClassifier(FakeLLM(reply)).classify(self.LINES)
        assert result.source == "heuristic"
        assert result.emotion == Emotion.Happy

    def test_schema_violation_falls_back(self):
        result = EmotionClassifier(FakeLLM('{"summary": "", "emotion": "Happy"}')).classify(self.LINES)
        assert result.source == "heuristic"

    def test_no_client_uses_heuristic(self):
        assert EmotionClassifier(None).classify(self.LINES).source == "heuristic"

    def test_emotion_always_in_closed_set(self):
        for reply in ('{"summary": "a", "emotion": "joyful"}', "nonsense", '{"summary": "a", "emotion": null}'):
            result = EmotionClassifier(FakeLLM(reply)).classify(self.LINES)
            assert result.emotion in set(Emotion)
