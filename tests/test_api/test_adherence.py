"""
Tests for Adherence API
========================

Tests streak and window statistics endpoints.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from models import User


class TestStreak:

    @pytest.mark.api
    def test_streak(self, client: TestClient, adherence_history, test_user: User):
        response = client.get(f"/api/v1/adherence/streak/{test_user.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "user_id": test_user.id,
            "streak_days": 5,
            "message": "Streak calculated successfully: 5 days"
        }

    @pytest.mark.api
    def test_streak_without_medications(self, client: TestClient, test_user: User):
        response = client.get(f"/api/v1/adherence/streak/{test_user.id}")

        data = response.json()
        assert data["streak_days"] == 0
        assert data["message"] == "No medications found"

    @pytest.mark.api
    def test_streak_unknown_user(self, client: TestClient):
        response = client.get("/api/v1/adherence/streak/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestStats:

    @pytest.mark.api
    def test_stats_default_window(self, client: TestClient, adherence_history, test_user: User):
        response = client.get(f"/api/v1/adherence/stats/{test_user.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["days"] == 30
        assert data["stats"] == {
            "total_days": 5,
            "perfect_days": 5,
            "average_adherence_percent": 100,
            "total_doses": 5,
            "taken_doses": 5,
            "missed_doses": 0
        }

    @pytest.mark.api
    def test_stats_narrow_window(self, client: TestClient, adherence_history, test_user: User):
        response = client.get(f"/api/v1/adherence/stats/{test_user.id}", params={"days": 1})

        data = response.json()
        assert data["days"] == 1
        assert data["stats"]["total_days"] == 2

    @pytest.mark.api
    @pytest.mark.parametrize("days", [0, 366])
    def test_stats_window_bounds(self, client: TestClient, test_user: User, days):
        response = client.get(f"/api/v1/adherence/stats/{test_user.id}", params={"days": days})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
