"""
Integration tests for API endpoints using a SQLite DB.
"""
from datetime import date

from conftest import kst
from mooda.models import MessageRole
from mooda.services.emotion_log_repository import EmotionLogRepository


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestUsers:
    def test_create_is_idempotent(self, client):
        r = client.post("/users", json={"id": "u1", "display_name": "민지"})
        assert r.status_code == 201
        assert r.json()["display_name"] == "민지"

        r = client.post("/users", json={"id": "u1", "display_name": "다른 이름"})
        assert r.status_code == 200
        assert r.json()["display_name"] == "민지"

    def test_default_display_name_and_personality(self, client):
        client.post("/users", json={"id": "u1"})
        body = client.get("/users/u1").json()
        assert body["display_name"] == "사용자"
        assert body["selected_personality_id"] == "friendly"

    def test_select_personality(self, client):
        client.post("/users", json={"id": "u1"})
        r = client.put("/users/u1", json={"selected_personality_id": "wise"})
        assert r.status_code == 200
        assert r.json()["selected_personality_id"] == "wise"

    def test_select_unknown_personality(self, client):
        client.post("/users", json={"id": "u1"})
        r = client.put("/users/u1", json={"selected_personality_id": "pirate"})
        assert r.status_code == 404
        assert r.json()["code"] == "PERSONALITY_NOT_FOUND"

    def test_missing_user(self, client):
        r = client.get("/users/ghost")
        assert r.status_code == 404
        assert r.json()["code"] == "USER_NOT_FOUND"


class TestPersonalities:
    MBTI = {"energy": "E", "information": "N", "decisions": "F", "lifestyle": "P"}

    def test_builtins(self, client):
        body = client.get("/personalities").json()
        assert [p["id"] for p in body] == ["friendly", "calm", "wise", "energetic"]
        assert [p["name"] for p in body] == ["무니", "무무", "무리", "무크"]
        assert "system_prompt" not in body[0]

    def test_create_list_delete_custom(self, client):
        client.post("/users", json={"id": "u1"})
        r = client.post("/personalities/custom", json={
            "user_id": "u1", "name": "별이", "description": "밤하늘 친구", "mbti": self.MBTI,
        })
        assert r.status_code == 201
        custom = r.json()
        assert custom["id"].startswith("custom_")
        assert custom["icon_type"] == "ENFP"
        assert custom["is_custom"] is True

        ids = [p["id"] for p in client.get("/personalities", params={"user_id": "u1"}).json()]
        assert ids[-1] == custom["id"]
        assert len(ids) == 5

        r = client.delete(f"/personalities/custom/{custom['id']}", params={"user_id": "u1"})
        assert r.status_code == 200
        ids = [p["id"] for p in client.get("/personalities", params={"user_id": "u1"}).json()]
        assert custom["id"] not in ids

    def test_custom_personality_can_be_selected(self, client):
        client.post("/users", json={"id": "u1"})
        custom = client.post("/personalities/custom", json={
            "user_id": "u1", "name": "별이", "mbti": self.MBTI,
        }).json()
        r = client.put("/users/u1", json={"selected_personality_id": custom["id"]})
        assert r.json()["selected_personality_id"] == custom["id"]

    def test_invalid_mbti_letter(self, client):
        client.post("/users", json={"id": "u1"})
        r = client.post("/personalities/custom", json={
            "user_id": "u1", "name": "x", "mbti": {**self.MBTI, "energy": "X"},
        })
        assert r.status_code == 422

    def test_custom_for_missing_user(self, client):
        r = client.post("/personalities/custom", json={
            "user_id": "ghost", "name": "x", "mbti": self.MBTI,
        })
        assert r.status_code == 404

    def test_delete_unknown(self, client):
        r = client.delete("/personalities/custom/custom_nope", params={"user_id": "u1"})
        assert r.status_code == 404


class TestConversations:
    def test_day_and_dates(self, client, make_user, add_message):
        make_user("u1")
        add_message("u1", "어제 밤", kst(2026, 10, 17, 23, 59, 59))
        add_message("u1", "아침", kst(2026, 10, 18, 8, 0))
        add_message("u1", "좋은 아침", kst(2026, 10, 18, 8, 0, 1), role=MessageRole.ai)

        day = client.get("/conversations/u1/2026-10-18").json()
        assert [m["content"] for m in day["messages"]] == ["아침", "좋은 아침"]

        dates = client.get("/conversations/u1/dates").json()["dates"]
        assert dates == ["2026-10-17", "2026-10-18"]

    def test_filter_by_personality(self, client, make_user, add_message):
        make_user("u1")
        add_message("u1", "무니에게", kst(2026, 10, 18, 8, 0), personality_id="friendly")
        add_message("u1", "무무에게", kst(2026, 10, 18, 9, 0), personality_id="calm")
        day = client.get("/conversations/u1/2026-10-18", params={"personality_id": "calm"}).json()
        assert [m["content"] for m in day["messages"]] == ["무무에게"]

    def test_empty_day(self, client):
        assert client.get("/conversations/u1/2026-10-18").json()["messages"] == []


class TestEmotionLogs:
    def test_month_and_day(self, client, db, make_user):
        make_user("u1")
        repo = EmotionLogRepository(db)
        repo.upsert_daily_log("u1", date(2026, 10, 3), "산책", "Happy")
        repo.upsert_daily_log("u1", date(2026, 10, 1), "비", "Sad")

        body = client.get("/emotion-logs", params={"user_id": "u1", "year": 2026, "month": 10}).json()
        assert [i["date"] for i in body["items"]] == ["2026-10-01", "2026-10-03"]

        log = client.get("/emotion-logs/u1/2026-10-03").json()
        assert log["emotion"] == "Happy"
        assert log["short_summary"] == "산책"
        assert log["character_icon_ref"] == "/images/emotion/happy.svg"
        assert log["summary"].startswith("행복 ")

    def test_missing_day_is_404(self, client):
        r = client.get("/emotion-logs/u1/2026-10-03")
        assert r.status_code == 404
        assert r.json()["code"] == "EMOTION_LOG_NOT_FOUND"

    def test_bad_month_rejected(self, client):
        r = client.get("/emotion-logs", params={"user_id": "u1", "year": 2026, "month": 13})
        assert r.status_code == 422
