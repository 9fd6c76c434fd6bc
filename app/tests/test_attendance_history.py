"""
Tests for attendance history endpoint
"""
from datetime import datetime, timezone

import pytest
from fastapi import status

from app.services import attendance_ledger


@pytest.fixture
def five_days(db, test_user):
    """Records for 2024-01-01 .. 2024-01-05, inserted out of order"""
    for day in (3, 1, 5, 2, 4):
        result = attendance_ledger.insert(
            db,
            test_user.id,
            f"2024-01-0{day}",
            check_in_time=datetime(2024, 1, day, 3, 30, tzinfo=timezone.utc),
        )
        assert result.ok
    return test_user


def dates(response):
    return [r["date"] for r in response.json()["attendance"]]


def test_history_default_page(client, user_headers, five_days):
    response = client.get("/api/v1/attendance/history", headers=user_headers)

    assert response.status_code == status.HTTP_200_OK
    assert dates(response) == ["2024-01-05", "2024-01-04", "2024-01-03", "2024-01-02", "2024-01-01"]
    assert response.json()["pagination"] == {"total": 5, "limit": 30, "offset": 0}
    assert response.headers["Cache-Control"] == "private, max-age=60"


def test_history_limit_and_offset(client, user_headers, five_days):
    response = client.get("/api/v1/attendance/history?limit=2&offset=1", headers=user_headers)

    assert dates(response) == ["2024-01-04", "2024-01-03"]
    assert response.json()["pagination"] == {"total": 5, "limit": 2, "offset": 1}


def test_history_pages_are_disjoint(client, user_headers, five_days):
    first = client.get("/api/v1/attendance/history?limit=2&offset=0", headers=user_headers)
    second = client.get("/api/v1/attendance/history?limit=2&offset=2", headers=user_headers)

    assert not set(dates(first)) & set(dates(second))
    assert dates(first) + dates(second) == ["2024-01-05", "2024-01-04", "2024-01-03", "2024-01-02"]
    assert first.json()["pagination"]["total"] == 5
    assert second.json()["pagination"]["total"] == 5


def test_history_offset_past_end(client, user_headers, five_days):
    response = client.get("/api/v1/attendance/history?offset=10", headers=user_headers)

    assert response.json()["attendance"] == []
    assert response.json()["pagination"]["total"] == 5


@pytest.mark.parametrize("query,expected_limit,expected_offset", [
    ("limit=abc", 30, 0),
    ("limit=0", 30, 0),
    ("limit=-3", 30, 0),
    ("limit=500", 100, 0),
    ("offset=-2", 30, 0),
    ("offset=xyz", 30, 0),
])
def test_history_lenient_pagination(client, user_headers, five_days, query, expected_limit, expected_offset):
    response = client.get(f"/api/v1/attendance/history?{query}", headers=user_headers)

    assert response.status_code == status.HTTP_200_OK
    pagination = response.json()["pagination"]
    assert pagination["limit"] == expected_limit
    assert pagination["offset"] == expected_offset


def test_history_is_owner_scoped(client, other_headers, five_days):
    response = client.get("/api/v1/attendance/history", headers=other_headers)

    assert response.json()["attendance"] == []
    assert response.json()["pagination"]["total"] == 0


def test_history_timestamps_are_utc(client, user_headers, five_days):
    records = client.get("/api/v1/attendance/history?limit=1", headers=user_headers).json()["attendance"]

    assert records[0]["check_in_time"] == "2024-01-05T03:30:00Z"
