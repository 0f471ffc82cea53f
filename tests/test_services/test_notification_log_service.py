"""
Tests for Notification Log Service
Upsert-and-append semantics with idempotency keys
"""

import pytest
from datetime import datetime

from sqlalchemy.orm import Session

from models import NotificationEntry, NotificationLog, ReminderKind, User
from services.notification_log_service import NotificationLogService
from tools.scheduler import ReminderEvent, ReminderPlanner


LOG_DATE = "2024-01-01"


@pytest.fixture
def log_service():
    return NotificationLogService()


def medication_event(kind=ReminderKind.ON_TIME, hour=9, minute=0, medicine_id=1):
    return ReminderEvent(
        kind=kind,
        instant=datetime(2024, 1, 1, hour, minute),
        title="Time to Take Medicine 💊",
        message="Take Metformin now",
        medicine_id=medicine_id,
        medicine_name="Metformin"
    )


class TestUpsertAppend:

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_creates_log_on_first_append(self, log_service, db_session: Session, test_user: User):
        appended = await log_service.upsert_append(
            test_user.id, LOG_DATE, "Monday", medication_event(), db=db_session
        )

        log = db_session.query(NotificationLog).one()
        assert appended is True
        assert log.user_id == test_user.id
        assert log.day_name == "Monday"
        assert len(log.entries) == 1

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_same_event_appended_once(self, log_service, db_session: Session, test_user: User):
        event = medication_event()

        first = await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", event, db=db_session)
        second = await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", event, db=db_session)

        assert (first, second) == (True, False)
        assert db_session.query(NotificationEntry).count() == 1

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_distinct_doses_share_one_log(self, log_service, db_session: Session, test_user: User):
        events = [
            medication_event(hour=9),
            medication_event(hour=21),
            medication_event(hour=9, medicine_id=2),
            medication_event(kind=ReminderKind.AFTER, hour=9, minute=30),
        ]

        for event in events:
            assert await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", event, db=db_session)

        assert db_session.query(NotificationLog).count() == 1
        assert db_session.query(NotificationEntry).count() == 4

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_test_event_once_per_day(self, log_service, db_session: Session, test_user: User):
        planner = ReminderPlanner()

        morning = planner.test_event(datetime(2024, 1, 1, 8, 0))
        evening = planner.test_event(datetime(2024, 1, 1, 18, 0))

        assert await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", morning, db=db_session)
        assert not await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", evening, db=db_session)

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_separate_days_get_separate_logs(self, log_service, db_session: Session, test_user: User):
        await log_service.upsert_append(test_user.id, "2024-01-01", "Monday", medication_event(), db=db_session)
        await log_service.upsert_append(test_user.id, "2024-01-03", "Wednesday", medication_event(), db=db_session)

        assert db_session.query(NotificationLog).count() == 2


class TestGetLog:

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_document_sorted_by_time(self, log_service, db_session: Session, test_user: User):
        planner = ReminderPlanner()
        for event in [
            medication_event(kind=ReminderKind.AFTER, hour=9, minute=30),
            medication_event(hour=9),
            planner.test_event(datetime(2024, 1, 1, 8, 0)),
        ]:
            await log_service.upsert_append(test_user.id, LOG_DATE, "Monday", event, db=db_session)

        log = await log_service.get_log(test_user.id, LOG_DATE, db=db_session)

        assert log["userId"] == test_user.id
        assert log["date"] == LOG_DATE
        assert log["dayName"] == "Monday"
        assert [n["type"] for n in log["notifications"]] == ["test", "onTime", "after"]
        assert "medicineId" not in log["notifications"][0]
        assert log["notifications"][1]["medicineName"] == "Metformin"

    @pytest.mark.database
    @pytest.mark.asyncio
    async def test_missing_log(self, log_service, db_session: Session, test_user: User):
        assert await log_service.get_log(test_user.id, LOG_DATE, db=db_session) is None
