"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import AdherenceStatus, Weekday


TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
OFFSET_PATTERN = r"^(\d+[mh])?$"


# ==================== BASE SCHEMAS ====================

class DosageTimeBase(BaseModel):
    """One dose time with its reminder offsets"""
    time: str = Field(..., pattern=TIME_OF_DAY_PATTERN, examples=["09:00"])
    remind_before: str = Field(default="", pattern=OFFSET_PATTERN, examples=["15m"])
    remind_after: str = Field(default="", pattern=OFFSET_PATTERN, examples=["1h"])


class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


# ==================== REQUEST SCHEMAS ====================

class DosageTimeCreate(DosageTimeBase):
    pass


class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    user_id: int
    dosage_times: List[DosageTimeCreate] = Field(..., min_length=1)
    active_days: List[str] = Field(..., min_length=1)

    @field_validator("active_days")
    @classmethod
    def _normalize_days(cls, v: List[str]) -> List[str]:
        days = []
        for raw in v:
            day = Weekday.parse(raw).value
            if day not in days:
                days.append(day)
        return days


class AdherenceRecordCreate(BaseModel):
    """Schema for logging a dose outcome"""
    status: AdherenceStatus
    date: Optional[datetime] = None


# ==================== RESPONSE SCHEMAS ====================

class DosageTimeResponse(DosageTimeBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: int
    user_id: int
    active_days: List[str]
    active: bool = True
    dosage_times: List[DosageTimeResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """List of medications"""
    medications: List[MedicationResponse]
    total: int


class AdherenceRecordResponse(BaseModel):
    id: int
    medication_id: int
    date: datetime
    status: AdherenceStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
