"""
Database Models
SQLAlchemy ORM models for MedReminder
"""

import logging
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Enum, Index, UniqueConstraint, JSON
from sqlalchemy.orm import relationship
from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Any, Dict, Set, Union

from config import TableNames
from database import Base


logger = logging.getLogger(__name__)


# ==================== ENUMS ====================

class AdherenceStatus(str, PyEnum):
    """Logged outcome of a dose occurrence"""
    TAKEN = "taken"
    MISSED = "missed"
    DELAYED = "delayed"


class ReminderKind(str, PyEnum):
    """Kind of planned reminder notification"""
    BEFORE = "before"
    ON_TIME = "onTime"
    AFTER = "after"
    TEST = "test"


class Weekday(str, PyEnum):
    """Day of the week, ordered Monday first like date.weekday()"""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_date(cls, value: Union[date, datetime]) -> "Weekday":
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, value: Union[str, "Weekday"]) -> "Weekday":
        """Accept 'Monday', 'monday', 'MONDAY' or 'Mon'"""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for day in cls:
            if text in (day.value.lower(), day.value[:3].lower()):
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


# ==================== MODELS ====================

class User(Base):
    """Owner of medications and notification logs"""
    __tablename__ = TableNames.USERS

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    timezone = Column(String(50), default="UTC")

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="user", cascade="all, delete-orphan")
    notification_logs = relationship("NotificationLog", back_populates="user", cascade="all, delete-orphan")


class Medication(Base):
    """Medication regimen: dose times plus the weekdays it applies to"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text)

    # Weekday names, e.g. ["Monday", "Thursday"]
    active_days = Column(JSON, default=list)

    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="medications")
    dosage_times = relationship(
        "DosageTime",
        back_populates="medication",
        cascade="all, delete-orphan",
        order_by="DosageTime.time"
    )
    adherence_history = relationship(
        "AdherenceRecord",
        back_populates="medication",
        cascade="all, delete-orphan",
        order_by="AdherenceRecord.date"
    )

    __table_args__ = (
        Index("ix_medications_user_active", "user_id", "active"),
    )

    @property
    def weekdays(self) -> Set[Weekday]:
        """Parsed active days; unknown names are skipped"""
        days = set()
        for raw in self.active_days or []:
            try:
                days.add(Weekday.parse(raw))
            except ValueError:
                logger.warning(f"Ignoring unknown weekday {raw!r} on medication {self.id}")
        return days

    def is_active_on(self, weekday: Weekday) -> bool:
        return weekday in self.weekdays


class DosageTime(Base):
    """One time-of-day dose with its own reminder offsets"""
    __tablename__ = TableNames.DOSAGE_TIMES

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)

    time = Column(String(5), nullable=False)  # "HH:MM"
    remind_before = Column(String(10), default="")  # "15m", "1h"
    remind_after = Column(String(10), default="")

    medication = relationship("Medication", back_populates="dosage_times")


class AdherenceRecord(Base):
    """Logged outcome for one dose occurrence. Append-only."""
    __tablename__ = TableNames.ADHERENCE_RECORDS

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)

    date = Column(DateTime, nullable=False)
    status = Column(Enum(AdherenceStatus), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    medication = relationship("Medication", back_populates="adherence_history")

    __table_args__ = (
        Index("ix_adherence_records_medication_date", "medication_id", "date"),
    )


class NotificationLog(Base):
    """Per-user, per-day log of planned reminders"""
    __tablename__ = TableNames.NOTIFICATION_LOGS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    date = Column(String(10), nullable=False)  # "YYYY-MM-DD"
    day_name = Column(String(10), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="notification_logs")
    entries = relationship(
        "NotificationEntry",
        back_populates="log",
        cascade="all, delete-orphan",
        order_by="NotificationEntry.id"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_notification_log_user_date"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Stored document shape; notifications sorted by instant"""
        entries = sorted(self.entries, key=lambda e: (e.time, e.id))
        return {
            "userId": self.user_id,
            "date": self.date,
            "dayName": self.day_name,
            "notifications": [e.to_dict() for e in entries]
        }


class NotificationEntry(Base):
    """A single reminder appended to a NotificationLog"""
    __tablename__ = TableNames.NOTIFICATION_ENTRIES

    id = Column(Integer, primary_key=True, index=True)
    log_id = Column(Integer, ForeignKey("notification_logs.id"), nullable=False)

    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(ReminderKind), nullable=False)
    medicine_id = Column(Integer)
    medicine_name = Column(String(255))
    time = Column(DateTime, nullable=False)

    # Idempotency key, see ReminderEvent.key
    dedup_key = Column(String(255), unique=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    log = relationship("NotificationLog", back_populates="entries")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "time": self.time.isoformat()
        }
        if self.medicine_id is not None:
            data["medicineId"] = self.medicine_id
            data["medicineName"] = self.medicine_name
        return data
