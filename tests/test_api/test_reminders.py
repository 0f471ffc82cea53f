"""
Tests for Reminders API
=======================

Tests triggering a daily run and reading back the notification log.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from models import Medication, User


class TestRunReminders:

    @pytest.mark.api
    def test_run_schedules_day(self, client: TestClient, test_medication: Medication):
        response = client.post(f"/api/v1/reminders/run/{test_medication.user_id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["date"] == "2024-01-01"
        assert data["scheduled"] == 4
        assert [e["kind"] for e in data["events"]] == ["test", "before", "onTime", "after"]
        assert data["events"][1]["instant"] == "2024-01-01T08:45:00"
        assert data["events"][1]["medicine_name"] == "Metformin"

    @pytest.mark.api
    def test_second_run_schedules_nothing(self, client: TestClient, test_medication: Medication):
        client.post(f"/api/v1/reminders/run/{test_medication.user_id}")
        response = client.post(f"/api/v1/reminders/run/{test_medication.user_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["scheduled"] == 0

    @pytest.mark.api
    def test_run_for_other_day(self, client: TestClient, test_medication: Medication):
        response = client.post(
            f"/api/v1/reminders/run/{test_medication.user_id}",
            params={"day": "2024-01-02"}
        )

        data = response.json()
        assert data["date"] == "2024-01-02"
        assert [e["kind"] for e in data["events"]] == ["test"]

    @pytest.mark.api
    def test_past_day_rejected(self, client: TestClient, test_medication: Medication):
        response = client.post(
            f"/api/v1/reminders/run/{test_medication.user_id}",
            params={"day": "2023-12-31"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "already over" in response.json()["message"]

        logs = client.get(
            f"/api/v1/reminders/log/{test_medication.user_id}",
            params={"log_date": "2023-12-31"}
        )
        assert logs.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_unknown_user(self, client: TestClient):
        response = client.post("/api/v1/reminders/run/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["error"] is True
        assert data["message"] == "User 999 not found"


class TestNotificationLog:

    @pytest.mark.api
    def test_log_after_run(self, client: TestClient, test_medication: Medication):
        client.post(f"/api/v1/reminders/run/{test_medication.user_id}")

        response = client.get(f"/api/v1/reminders/log/{test_medication.user_id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["userId"] == test_medication.user_id
        assert data["date"] == "2024-01-01"
        assert data["dayName"] == "Monday"

        notifications = data["notifications"]
        assert [n["type"] for n in notifications] == ["test", "before", "onTime", "after"]
        assert [n["time"] for n in notifications] == [
            "2024-01-01T08:00:10",
            "2024-01-01T08:45:00",
            "2024-01-01T09:00:00",
            "2024-01-01T09:30:00",
        ]
        assert "medicineId" not in notifications[0]
        assert notifications[2]["medicineId"] == test_medication.id
        assert notifications[2]["message"] == "Take Metformin now"

    @pytest.mark.api
    def test_log_for_explicit_date(self, client: TestClient, test_medication: Medication):
        client.post(f"/api/v1/reminders/run/{test_medication.user_id}", params={"day": "2024-01-03"})

        response = client.get(
            f"/api/v1/reminders/log/{test_medication.user_id}",
            params={"log_date": "2024-01-03"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["dayName"] == "Wednesday"
        notifications = response.json()["notifications"]
        assert [n["type"] for n in notifications] == ["before", "onTime", "after"]

    @pytest.mark.api
    def test_missing_log(self, client: TestClient, test_user: User):
        response = client.get(f"/api/v1/reminders/log/{test_user.id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestScheduledReminders:

    @pytest.mark.api
    def test_pending_after_run(self, client: TestClient, test_medication: Medication):
        user_id = test_medication.user_id
        client.post(f"/api/v1/reminders/run/{user_id}")

        response = client.get(f"/api/v1/reminders/scheduled/{user_id}")

        data = response.json()
        assert data["total"] == 4
        assert f"{user_id}:2024-01-01:{test_medication.id}:onTime:09:00" in data["pending"]
        assert f"{user_id}:2024-01-01:-:test:-" in data["pending"]

    @pytest.mark.api
    def test_cancel(self, client: TestClient, test_medication: Medication):
        user_id = test_medication.user_id
        client.post(f"/api/v1/reminders/run/{user_id}")

        response = client.delete(f"/api/v1/reminders/scheduled/{user_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"user_id": user_id, "cancelled": 4}

    @pytest.mark.api
    def test_cancel_nothing_pending(self, client: TestClient):
        response = client.delete("/api/v1/reminders/scheduled/42")

        assert response.json() == {"user_id": 42, "cancelled": 0}
