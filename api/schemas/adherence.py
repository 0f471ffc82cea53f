"""
Adherence Schemas
Pydantic models for adherence analytics responses
"""

from pydantic import BaseModel


class AdherenceStreak(BaseModel):
    """Current consecutive-day streak"""
    user_id: int
    streak_days: int
    message: str


class AdherenceStats(BaseModel):
    """Statistics over a trailing window of days"""
    total_days: int = 0
    perfect_days: int = 0
    average_adherence_percent: int = 0
    total_doses: int = 0
    taken_doses: int = 0
    missed_doses: int = 0


class AdherenceStatsResponse(BaseModel):
    user_id: int
    days: int
    stats: AdherenceStats
    message: str
