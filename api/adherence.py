"""
Adherence API Router
Endpoints for adherence streak and statistics
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.adherence import AdherenceStreak, AdherenceStatsResponse
from config import reminder_config


router = APIRouter(prefix="/adherence", tags=["adherence"])


@router.get("/streak/{user_id}", response_model=AdherenceStreak)
async def get_adherence_streak(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get current adherence streak

    A day counts toward the streak when at least 80% of its logged doses
    were taken.
    """
    adherence_service = services.get_adherence_service()
    return await adherence_service.get_streak(user_id, db=db)


@router.get("/stats/{user_id}", response_model=AdherenceStatsResponse)
async def get_adherence_stats(
    user_id: int = Depends(get_current_user_id),
    days: int = Query(
        reminder_config.DEFAULT_STATS_WINDOW_DAYS,
        ge=1,
        le=reminder_config.MAX_STATS_WINDOW_DAYS
    ),
    db: Session = Depends(get_db)
):
    """
    Get adherence statistics over the last `days` days
    """
    adherence_service = services.get_adherence_service()
    return await adherence_service.get_adherence_stats(user_id, days=days, db=db)
