"""
Tests for today's attendance status endpoint
"""
from zoneinfo import ZoneInfo

from fastapi import status

from app.tests.conftest import TEST_TZ
from app.utils.datetime_utils import local_date_key


def test_today_before_checkin(client, user_headers):
    response = client.get("/api/v1/attendance/today", headers=user_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["attendance"] is None
    assert data["hasCheckedIn"] is False
    assert data["date"] == local_date_key(tz=ZoneInfo(TEST_TZ))


def test_today_after_checkin(client, user_headers):
    checkin = client.post("/api/v1/attendance/checkin", headers=user_headers).json()

    data = client.get("/api/v1/attendance/today", headers=user_headers).json()

    assert data["hasCheckedIn"] is True
    assert data["attendance"]["id"] == checkin["id"]
    assert data["attendance"]["check_out_time"] is None
    assert data["date"] == checkin["date"]


def test_today_after_checkout_still_checked_in(client, user_headers):
    client.post("/api/v1/attendance/checkin", headers=user_headers)
    client.post("/api/v1/attendance/checkout", headers=user_headers)

    data = client.get("/api/v1/attendance/today", headers=user_headers).json()

    assert data["hasCheckedIn"] is True
    assert data["attendance"]["check_out_time"] is not None


def test_today_only_sees_own_record(client, user_headers, other_headers):
    client.post("/api/v1/attendance/checkin", headers=user_headers)

    data = client.get("/api/v1/attendance/today", headers=other_headers).json()

    assert data["hasCheckedIn"] is False
    assert data["attendance"] is None


def test_today_is_never_cached(client, user_headers):
    first = client.get("/api/v1/attendance/today", headers=user_headers)
    second = client.get("/api/v1/attendance/today", headers=user_headers)

    assert "no-store" in first.headers["Cache-Control"]
    assert first.headers["Expires"] == "0"
    assert first.headers["ETag"] != second.headers["ETag"]
