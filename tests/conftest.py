"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all MedReminder tests.
Fixtures include database sessions, test clients, sample data, and a
reminder scheduler with a fixed clock.
"""

import os
import sys
from datetime import datetime, date, timedelta
from typing import Generator, List, Optional, Tuple

# Keep the app's own engine off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import create_db_engine, drop_db, init_db
from models import User, Medication, DosageTime, AdherenceRecord, AdherenceStatus
from actions.reminder_engine import ReminderScheduler
from tools.notification_service import NotificationChannel
from api.deps import get_db
from app import app


# Monday
SCHEDULE_DAY = date(2024, 1, 1)
SCHEDULE_NOW = datetime(2024, 1, 1, 8, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)

    yield engine

    drop_db(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==================== SCHEDULER FIXTURES ====================

class RecordingNotificationChannel(NotificationChannel):
    """Keeps delivered notifications in memory"""

    name = "memory"

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    async def notify(self, title: str, message: str) -> None:
        self.sent.append((title, message))


def pinned_clock(now: datetime):
    """Scheduler clock that reports `now` whatever the user's timezone"""
    def clock(zone: Optional[str] = None) -> datetime:
        return now
    return clock


@pytest.fixture
def recording_channel() -> RecordingNotificationChannel:
    return RecordingNotificationChannel()


@pytest.fixture
def fixed_clock():
    """Scheduler clock pinned to 08:00 on SCHEDULE_DAY"""
    return pinned_clock(SCHEDULE_NOW)


@pytest.fixture
def clock_at():
    """Factory for scheduler clocks pinned to a given instant"""
    return pinned_clock


@pytest.fixture
def scheduler(recording_channel, fixed_clock) -> ReminderScheduler:
    """Reminder scheduler delivering into memory"""
    return ReminderScheduler(channel=recording_channel, clock=fixed_clock)


@pytest.fixture(scope="function")
def client(db_session: Session, scheduler: ReminderScheduler) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and scheduler overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.reminder_scheduler = scheduler

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.reminder_scheduler = None


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def test_user(db_session: Session) -> User:
    """Create and return a test user"""
    user = User(name="Ada Lovelace", email="ada@example.com", timezone="UTC")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_medication(db_session: Session, test_user: User) -> Medication:
    """Metformin at 09:00 on Mondays and Wednesdays, 15m before / 30m after"""
    medication = Medication(
        user_id=test_user.id,
        name="Metformin",
        active_days=["Monday", "Wednesday"],
        active=True,
        dosage_times=[
            DosageTime(time="09:00", remind_before="15m", remind_after="30m")
        ]
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def adherence_history(db_session: Session, test_medication: Medication) -> List[AdherenceRecord]:
    """One taken dose per day for the last 5 days, today included (UTC)"""
    noon = datetime.utcnow().replace(hour=12, minute=0, second=0, microsecond=0)

    records = []
    for days_ago in range(5):
        record = AdherenceRecord(
            medication_id=test_medication.id,
            date=noon - timedelta(days=days_ago),
            status=AdherenceStatus.TAKEN
        )
        db_session.add(record)
        records.append(record)

    db_session.commit()
    return records


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
