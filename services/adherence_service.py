"""
Adherence Service
Streak and window statistics over a user's persisted adherence records
"""

import logging
from typing import Dict, Optional, Any
from datetime import date
from sqlalchemy.orm import Session

from config import reminder_config
from services.medication_service import medication_service
from tools.adherence_metrics import (
    AdherenceSnapshot,
    streak_calculator,
    stats_aggregator,
)


logger = logging.getLogger(__name__)


class AdherenceService:
    """
    Read-side analytics for adherence records
    """

    async def get_streak(
        self,
        user_id: int,
        today: Optional[date] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Current consecutive-day adherence streak

        Returns:
            {"user_id", "streak_days", "message"}
        """
        if await medication_service.count_user_medications(user_id, db=db) == 0:
            return {
                "user_id": user_id,
                "streak_days": 0,
                "message": "No medications found"
            }

        records = await medication_service.get_adherence_records(user_id, db=db)
        streak = streak_calculator.streak_days(records, today=today)

        logger.info(f"Calculated streak of {streak} days for user {user_id}")
        return {
            "user_id": user_id,
            "streak_days": streak,
            "message": f"Streak calculated successfully: {streak} days"
        }

    async def get_adherence_stats(
        self,
        user_id: int,
        days: int = reminder_config.DEFAULT_STATS_WINDOW_DAYS,
        today: Optional[date] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Adherence statistics over the last `days` days

        Returns:
            {"user_id", "days", "stats", "message"}
        """
        if await medication_service.count_user_medications(user_id, db=db) == 0:
            snapshot = AdherenceSnapshot()
        else:
            records = await medication_service.get_adherence_records(user_id, db=db)
            snapshot = stats_aggregator.stats(records, days, today=today)

        return {
            "user_id": user_id,
            "days": days,
            "stats": snapshot.to_dict(),
            "message": f"Adherence stats calculated for last {days} days"
        }


# Singleton instance
adherence_service = AdherenceService()
