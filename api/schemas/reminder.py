"""
Reminder Schemas
Pydantic models for reminder scheduling and notification log responses
"""

from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, Field, ConfigDict

from models import ReminderKind


class ReminderEventResponse(BaseModel):
    """A planned reminder armed by a scheduler run"""
    kind: ReminderKind
    instant: datetime
    title: str
    message: str
    medicine_id: Optional[int] = None
    medicine_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReminderRunResponse(BaseModel):
    user_id: int
    date: date
    scheduled: int
    events: List[ReminderEventResponse]


class NotificationEntryResponse(BaseModel):
    """Notification as stored in the day's log"""
    title: str
    message: str
    type: ReminderKind
    time: datetime
    medicine_id: Optional[int] = Field(None, alias="medicineId")
    medicine_name: Optional[str] = Field(None, alias="medicineName")

    model_config = ConfigDict(populate_by_name=True)


class NotificationLogResponse(BaseModel):
    user_id: int = Field(..., alias="userId")
    date: str
    day_name: str = Field(..., alias="dayName")
    notifications: List[NotificationEntryResponse]

    model_config = ConfigDict(populate_by_name=True)


class PendingRemindersResponse(BaseModel):
    user_id: int
    pending: List[str]
    total: int


class CancelRemindersResponse(BaseModel):
    user_id: int
    cancelled: int
