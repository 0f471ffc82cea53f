"""
Adherence Metrics Tool
Consecutive-day streak and rolling-window statistics over adherence records
"""

from typing import Dict, List, Optional, Any, Iterable
from dataclasses import dataclass, asdict
from datetime import datetime, date, timedelta, timezone
from collections import defaultdict

from config import reminder_config
from models import AdherenceStatus


@dataclass
class DayTally:
    """Dose counts for one calendar date"""
    total: int = 0
    taken: int = 0

    @property
    def rate(self) -> float:
        return self.taken / self.total if self.total else 0.0


@dataclass
class AdherenceSnapshot:
    """Adherence statistics over a trailing window"""
    total_days: int = 0
    perfect_days: int = 0
    average_adherence_percent: int = 0
    total_doses: int = 0
    taken_doses: int = 0
    missed_doses: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def record_day(value: Any) -> date:
    """Calendar date of a record timestamp, truncated in UTC"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def tally_by_day(records: Iterable[Any]) -> Dict[date, DayTally]:
    """Group records by calendar date, counting total and taken doses"""
    days: Dict[date, DayTally] = defaultdict(DayTally)
    for record in records:
        tally = days[record_day(record.date)]
        tally.total += 1
        if record.status == AdherenceStatus.TAKEN:
            tally.taken += 1
    return days


class AdherenceStreakCalculator:
    """
    Current streak of consecutive qualifying days

    Walks dates from most recent backwards. Future dates are ignored. A
    day qualifies at or above the threshold rate. The walk stops at the
    first gap or the first failing day; a failing today resets the streak
    to zero.
    """

    def __init__(self, threshold: Optional[float] = None):
        self.threshold = (
            reminder_config.STREAK_ADHERENCE_THRESHOLD if threshold is None else threshold
        )

    def streak_days(self, records: Iterable[Any], today: Optional[date] = None) -> int:
        today = today or utc_today()
        daily = tally_by_day(records)
        if not daily:
            return 0

        streak = 0
        evaluated = False

        for day in sorted(daily, reverse=True):
            days_diff = (today - day).days
            if days_diff < 0:
                continue

            if evaluated and days_diff > streak:
                break
            evaluated = True

            if daily[day].rate >= self.threshold:
                streak = days_diff + 1
            else:
                if days_diff == 0:
                    streak = 0
                break

        return streak


class AdherenceStatsAggregator:
    """Totals over records dated within [today - window_days, today]"""

    def stats(
        self,
        records: Iterable[Any],
        window_days: int,
        today: Optional[date] = None
    ) -> AdherenceSnapshot:
        today = today or utc_today()
        start = today - timedelta(days=window_days)

        in_window = [r for r in records if start <= record_day(r.date) <= today]
        daily = tally_by_day(in_window)

        total_doses = sum(t.total for t in daily.values())
        taken_doses = sum(t.taken for t in daily.values())

        return AdherenceSnapshot(
            total_days=len(daily),
            perfect_days=sum(1 for t in daily.values() if t.total > 0 and t.taken == t.total),
            average_adherence_percent=round(100 * taken_doses / total_doses) if total_doses else 0,
            total_doses=total_doses,
            taken_doses=taken_doses,
            missed_doses=total_doses - taken_doses
        )


# Singleton instances
streak_calculator = AdherenceStreakCalculator()
stats_aggregator = AdherenceStatsAggregator()


def calculate_streak(records: List[Any], today: Optional[date] = None) -> int:
    """Convenience function for the current streak"""
    return streak_calculator.streak_days(records, today)


def calculate_stats(records: List[Any], window_days: int, today: Optional[date] = None) -> AdherenceSnapshot:
    """Convenience function for window statistics"""
    return stats_aggregator.stats(records, window_days, today)
