"""
Reminder Planner Tool
Turns a medication's dosage times into concrete reminder events for one day
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Any, Iterable
from dataclasses import dataclass
from datetime import datetime, date, timedelta

from config import reminder_config
from models import ReminderKind, Weekday
from tools.time_utils import (
    InvalidDurationError,
    format_time_of_day,
    parse_duration,
    resolve_time,
)


logger = logging.getLogger(__name__)


class ReminderKey(NamedTuple):
    """Identity of a planned reminder within a user's day"""
    user_id: int
    date: str
    medicine_id: Optional[int]
    kind: str
    dose_time: Optional[str]

    def as_string(self) -> str:
        parts = [self.user_id, self.date, self.medicine_id, self.kind, self.dose_time]
        return ":".join("-" if p is None else str(p) for p in parts)


@dataclass(frozen=True)
class ReminderEvent:
    """A planned notification tied to a dose occurrence"""
    kind: ReminderKind
    instant: datetime
    title: str
    message: str
    medicine_id: Optional[int] = None
    medicine_name: Optional[str] = None
    dose_time: Optional[str] = None

    def key(self, user_id: int, log_date: Optional[str] = None) -> ReminderKey:
        """
        Idempotency key for persistence and delivery

        Medication events are unique per (user, date, medicine, kind, dose
        time); the liveness test event once per user per day.
        """
        day = log_date or self.instant.date().isoformat()
        if self.kind == ReminderKind.TEST:
            return ReminderKey(user_id, day, None, self.kind.value, None)
        dose_time = self.dose_time or format_time_of_day(self.instant)
        return ReminderKey(user_id, day, self.medicine_id, self.kind.value, dose_time)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "message": self.message,
            "type": self.kind.value,
            "time": self.instant.isoformat()
        }
        if self.medicine_id is not None:
            data["medicineId"] = self.medicine_id
            data["medicineName"] = self.medicine_name
        return data


def render_message(kind: ReminderKind, **kwargs) -> tuple:
    """Format title and message for a reminder kind"""
    template = reminder_config.TEMPLATES[kind.value]
    return template["title"].format(**kwargs), template["message"].format(**kwargs)


class ReminderPlanner:
    """
    Plans before / on-time / after reminders for each dose of a medication

    Only instants strictly after `now` are emitted. A zero offset means the
    corresponding before/after reminder is not wanted.
    """

    def plan(
        self,
        medication: Any,
        day: date,
        now: datetime
    ) -> List[ReminderEvent]:
        """
        Plan reminders for one medication on one calendar day

        Args:
            medication: Object with id, name, dosage_times and active_days
            day: Calendar day to plan for
            now: Scheduling instant; only later events are kept

        Returns:
            Events sorted by instant ascending
        """
        weekday = Weekday.from_date(day)
        if not self._is_active_on(medication, weekday):
            return []

        events: List[ReminderEvent] = []
        for dose in medication.dosage_times or []:
            events.extend(self._plan_dose(medication, dose, day, now))

        events.sort(key=lambda e: e.instant)
        return events

    def plan_many(
        self,
        medications: Iterable[Any],
        day: date,
        now: datetime
    ) -> List[ReminderEvent]:
        """Plan several medications, merged in instant order"""
        events = [e for med in medications for e in self.plan(med, day, now)]
        events.sort(key=lambda e: e.instant)
        return events

    def test_event(self, now: datetime) -> ReminderEvent:
        """Liveness notification fired shortly after a scheduler run"""
        title, message = render_message(ReminderKind.TEST)
        return ReminderEvent(
            kind=ReminderKind.TEST,
            instant=now + timedelta(seconds=reminder_config.TEST_NOTIFICATION_DELAY_SECONDS),
            title=title,
            message=message
        )

    def _is_active_on(self, medication: Any, weekday: Weekday) -> bool:
        for raw in medication.active_days or []:
            try:
                if Weekday.parse(raw) == weekday:
                    return True
            except ValueError:
                logger.warning(f"Ignoring unknown weekday {raw!r} on medication {medication.id}")
        return False

    def _plan_dose(
        self,
        medication: Any,
        dose: Any,
        day: date,
        now: datetime
    ) -> List[ReminderEvent]:
        try:
            on_time = resolve_time(dose.time, day)
        except ValueError as e:
            logger.warning(f"Skipping dose of medication {medication.id}: {e}")
            return []

        names = {
            "medicine_name": medication.name,
            "remind_before": dose.remind_before,
        }
        dose_time = format_time_of_day(on_time)
        events = []

        before_offset = self._offset(medication, dose.remind_before)
        if before_offset:
            before = on_time - before_offset
            if before > now:
                events.append(self._event(ReminderKind.BEFORE, before, medication, dose_time, names))

        if on_time > now:
            events.append(self._event(ReminderKind.ON_TIME, on_time, medication, dose_time, names))

        after_offset = self._offset(medication, dose.remind_after)
        if after_offset:
            after = on_time + after_offset
            if after > now:
                events.append(self._event(ReminderKind.AFTER, after, medication, dose_time, names))

        return events

    def _offset(self, medication: Any, value: Optional[str]) -> timedelta:
        try:
            return parse_duration(value)
        except InvalidDurationError as e:
            logger.warning(f"Dropping offset reminder for medication {medication.id}: {e}")
            return timedelta(0)

    def _event(
        self,
        kind: ReminderKind,
        instant: datetime,
        medication: Any,
        dose_time: str,
        names: Dict[str, Any]
    ) -> ReminderEvent:
        title, message = render_message(kind, **names)
        return ReminderEvent(
            kind=kind,
            instant=instant,
            title=title,
            message=message,
            medicine_id=medication.id,
            medicine_name=medication.name,
            dose_time=dose_time
        )


# Singleton instance
reminder_planner = ReminderPlanner()


def plan_reminders(medication: Any, day: date, now: Optional[datetime] = None) -> List[ReminderEvent]:
    """Convenience function to plan reminders for one medication"""
    return reminder_planner.plan(medication, day, now or datetime.now())
