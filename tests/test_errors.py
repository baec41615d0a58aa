"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from datetime import date

from mooda.core.errors import (
    ChatGenerationError,
    EmotionLogNotFoundError,
    PersonalityNotFoundError,
    UserFetchError,
    UserNotFoundError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_user_not_found(self):
        err = UserNotFoundError("u1")
        assert err.http_status == 404
        assert err.code == "USER_NOT_FOUND"
        assert err.to_dict()["details"] == {"user_id": "u1"}

    def test_personality_not_found(self):
        err = PersonalityNotFoundError("pirate")
        assert err.http_status == 404
        assert "pirate" in err.message

    def test_emotion_log_not_found(self):
        err = EmotionLogNotFoundError("u1", date(2026, 10, 18))
        assert err.code == "EMOTION_LOG_NOT_FOUND"
        assert err.details["date"] == "2026-10-18"

    def test_user_fetch_error(self):
        err = UserFetchError("connection refused")
        assert err.http_status == 500
        assert err.code == "USER_FETCH_FAILED"
        assert err.details["reason"] == "connection refused"

    def test_chat_generation_error_has_no_details(self):
        d = ChatGenerationError("nope").to_dict()
        assert d == {"code": "CHAT_FAILED", "message": "nope"}


# ---------------------------------------------------------------------------
# Integration: error envelopes over HTTP
# ---------------------------------------------------------------------------

class TestErrorResponses:
    def test_validation_error_envelope(self, client):
        r = client.post("/chat", json={"user_id": "u1", "message": ""})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert "message" in fields

    def test_not_found_envelope(self, client):
        r = client.get("/users/ghost")
        body = r.json()
        assert set(body) == {"code", "message", "details"}

    def test_bad_date_in_path(self, client):
        r = client.get("/emotion-logs/u1/not-a-date")
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_error_envelope_documented(self, client):
        openapi = client.get("/openapi.json").json()
        assert "ErrorResponse" in openapi["components"]["schemas"]
        assert "404" in openapi["paths"]["/users/{user_id}"]["get"]["responses"]
