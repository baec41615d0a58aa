"""
Tests for POST /admin/run-daily-emotion-analysis.
"""
from datetime import datetime, timedelta

from conftest import CRON_SECRET, KST
from mooda.core.config import settings
from mooda.core.errors import UserFetchError
from mooda.routers import admin as admin_router
from mooda.services import daily_summary

URL = "/admin/run-daily-emotion-analysis"


class TestAuth:
    def test_missing_secret_is_401(self, client):
        r = client.post(URL)
        assert r.status_code == 401
        assert r.json() == {"success": False, "error": "unauthorized"}

    def test_wrong_header_is_401(self, client):
        r = client.post(URL, headers={"X-Cron-Secret": "nope"})
        assert r.status_code == 401

    def test_unconfigured_secret_rejects_everything(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "")
        r = client.post(URL, json={"token": ""}, headers={"X-Cron-Secret": ""})
        assert r.status_code == 401

    def test_header_secret_accepted(self, client):
        r = client.post(URL, headers={"X-Cron-Secret": CRON_SECRET})
        assert r.status_code == 200
        assert r.json()["success"] is True

    def test_body_token_accepted(self, client):
        r = client.post(URL, json={"token": CRON_SECRET})
        assert r.status_code == 200


class TestRun:
    def test_counts_and_mode(self, client, make_user, add_message):
        now = datetime.now(KST)
        make_user("u1")
        make_user("u2")
        add_message("u1", "오늘 정말 좋았어", now)

        r = client.post(URL, json={"token": CRON_SECRET, "test_today": True})

        assert r.status_code == 200
        body = r.json()
        assert body["mode"] == "today"
        assert body["target_day"] == now.date().isoformat()
        assert (body["processed"], body["skipped"], body["failed"]) == (1, 1, 0)

        logs = client.get(
            "/emotion-logs", params={"user_id": "u1", "year": now.year, "month": now.month}
        ).json()["items"]
        assert [l["emotion"] for l in logs] == ["Happy"]

    def test_default_mode_is_yesterday(self, client, make_user):
        make_user("u1")
        r = client.post(URL, headers={"X-Cron-Secret": CRON_SECRET})
        body = r.json()
        assert body["mode"] == "yesterday"
        expected = (datetime.now(KST) - timedelta(days=1)).date().isoformat()
        assert body["target_day"] == expected
        assert body["skipped"] == 1

    def test_user_fetch_failure_is_500(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise UserFetchError("database is down")

        monkeypatch.setattr(admin_router, "run_daily_summary", broken)
        r = client.post(URL, json={"token": CRON_SECRET})
        assert r.status_code == 500
        assert r.json() == {"success": False, "error": "database is down"}

    def test_injected_client_is_not_rebuilt(self, client, make_user, monkeypatch):
        def must_not_build(*args, **kwargs):
            raise AssertionError("client must not be rebuilt from settings")

        monkeypatch.setattr(daily_summary.GeminiClient, "from_settings", must_not_build)
        make_user("u1")
        r = client.post(URL, json={"token": CRON_SECRET})
        assert r.status_code == 200
        assert r.json()["skipped"] == 1
