"""
Reminder Engine
Plans a user's reminders for a day, persists them and arms their delivery
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Callable
from datetime import datetime, date
from collections import defaultdict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from sqlalchemy.orm import Session

from config import settings
from database import get_db_context
from models import ReminderKind, Weekday
from services.medication_service import MedicationService, medication_service
from services.notification_log_service import NotificationLogService, notification_log_service
from services.user_service import UserService, user_service
from tools.notification_service import NotificationChannel, get_notification_channel
from tools.scheduler import ReminderEvent, ReminderKey, ReminderPlanner, reminder_planner


logger = logging.getLogger(__name__)


def local_now(zone: Optional[str] = None) -> datetime:
    """Naive wall-clock time in `zone`, or the configured timezone"""
    return datetime.now(ZoneInfo(zone or settings.TIMEZONE)).replace(tzinfo=None)


class ReminderScheduler:
    """
    Orchestrates daily reminder scheduling for a user

    Responsibilities:
    - Fetch the medications active on the day's weekday
    - Plan before / on-time / after reminders per dose
    - Persist each planned reminder to the day's notification log
    - Arm one delayed delivery task per reminder

    Delivery tasks live in a per-user arena keyed by ReminderKey, so a
    repeated run for the same day does not arm a reminder twice and
    pending deliveries can be cancelled.
    """

    def __init__(
        self,
        channel: Optional[NotificationChannel] = None,
        planner: Optional[ReminderPlanner] = None,
        log_store: Optional[NotificationLogService] = None,
        medications: Optional[MedicationService] = None,
        users: Optional[UserService] = None,
        clock: Optional[Callable[[Optional[str]], datetime]] = None
    ):
        self.channel = channel or get_notification_channel()
        self.planner = planner or reminder_planner
        self.log_store = log_store or notification_log_service
        self.medications = medications or medication_service
        self.users = users or user_service
        self.clock = clock or local_now
        self._tasks: Dict[int, Dict[ReminderKey, asyncio.Task]] = defaultdict(dict)

    async def run(
        self,
        user_id: Optional[int],
        day: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[ReminderEvent]:
        """
        Schedule a user's reminders for one day

        Args:
            user_id: User to schedule for
            day: Calendar day (default: today in the user's timezone).
                Days already over are skipped.
            db: Database session

        Returns:
            Events armed by this run. Reminders already pending from an
            earlier run are not returned again.
        """
        if db:
            return await self._run(user_id, day, db)

        with get_db_context() as session:
            return await self._run(user_id, day, session)

    def now_for(self, user: Any) -> datetime:
        """Wall-clock time in the user's timezone"""
        zone = getattr(user, "timezone", None) or settings.TIMEZONE
        try:
            ZoneInfo(zone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {zone!r} for user {user.id}, using {settings.TIMEZONE}")
            zone = settings.TIMEZONE
        return self.clock(zone)

    async def today_for(self, user_id: int, db: Optional[Session] = None) -> date:
        """The user's current calendar day"""
        user = await self.users.get_user(user_id, db=db)
        return self.now_for(user).date()

    async def _run(
        self,
        user_id: Optional[int],
        day: Optional[date],
        session: Session
    ) -> List[ReminderEvent]:
        armed: List[ReminderEvent] = []

        try:
            user = await self.users.get_user(user_id, db=session)
            if not user:
                logger.warning(f"Reminder run skipped: user {user_id!r} not found")
                return armed

            now = self.now_for(user)
            today = now.date()
            day = day or today
            if day < today:
                logger.warning(f"Reminder run skipped: {day.isoformat()} is already over for user {user_id}")
                return armed

            weekday = Weekday.from_date(day)
            log_date = day.isoformat()

            logger.info(f"Scheduling reminders for user {user_id} on {weekday.value} {log_date}")

            # The test alert belongs to the day the run happens on
            test_event = self.planner.test_event(now)
            if await self._schedule(user_id, today.isoformat(), Weekday.from_date(today), test_event, now, session):
                armed.append(test_event)

            medications = await self.medications.find_active_for_user_and_weekday(
                user_id, weekday, db=session
            )

            for medication in medications:
                for event in self.planner.plan(medication, day, now):
                    if await self._schedule(user_id, log_date, weekday, event, now, session):
                        armed.append(event)

            logger.info(
                f"Armed {len(armed)} reminders for user {user_id} "
                f"from {len(medications)} medications"
            )
        except Exception:
            session.rollback()
            logger.exception(
                f"Reminder run for user {user_id} aborted after arming {len(armed)} reminders"
            )

        return armed

    async def _schedule(
        self,
        user_id: int,
        log_date: str,
        weekday: Weekday,
        event: ReminderEvent,
        now: datetime,
        session: Session
    ) -> bool:
        """Persist then arm one event; False if it was already pending"""
        appended = await self.log_store.upsert_append(user_id, log_date, weekday.value, event, db=session)

        # The test alert fires once per user per day, even across restarts
        if event.kind == ReminderKind.TEST and not appended:
            return False

        return self._arm(event.key(user_id, log_date), event, now)

    def _arm(self, key: ReminderKey, event: ReminderEvent, now: datetime) -> bool:
        tasks = self._tasks[key.user_id]
        existing = tasks.get(key)
        if existing and not existing.done():
            return False

        delay = max((event.instant - now).total_seconds(), 0.0)
        task = asyncio.create_task(self._deliver(event, delay), name=f"reminder:{key.as_string()}")
        tasks[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        return True

    async def _deliver(self, event: ReminderEvent, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            await self.channel.notify(event.title, event.message)
        except Exception as e:
            logger.error(f"Delivery of {event.kind.value} reminder failed: {e}")

    def _forget(self, key: ReminderKey, task: asyncio.Task) -> None:
        tasks = self._tasks.get(key.user_id)
        if tasks is None or tasks.get(key) is not task:
            return
        del tasks[key]
        if not tasks:
            del self._tasks[key.user_id]

    def pending(self, user_id: int) -> List[ReminderKey]:
        """Keys of deliveries that have not fired yet"""
        return [k for k, t in self._tasks.get(user_id, {}).items() if not t.done()]

    def pending_tasks(self, user_id: int) -> List[asyncio.Task]:
        return [t for t in self._tasks.get(user_id, {}).values() if not t.done()]

    def cancel(self, user_id: int, day: Optional[date] = None) -> int:
        """Cancel a user's pending deliveries, optionally for one day only"""
        cancelled = 0
        for key, task in list(self._tasks.get(user_id, {}).items()):
            if day and key.date != day.isoformat():
                continue
            if not task.done():
                task.cancel()
                cancelled += 1

        logger.info(f"Cancelled {cancelled} pending reminders for user {user_id}")
        return cancelled

    def cancel_all(self) -> int:
        return sum(self.cancel(user_id) for user_id in list(self._tasks))

    async def shutdown(self) -> None:
        """Cancel every pending delivery and wait for the tasks to finish"""
        tasks = [t for user_tasks in self._tasks.values() for t in user_tasks.values()]
        self.cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        await self.channel.close()


# Singleton instance
reminder_scheduler = ReminderScheduler()


async def run_scheduler(user_id: int, db: Optional[Session] = None) -> List[ReminderEvent]:
    """Convenience function to schedule today's reminders"""
    return await reminder_scheduler.run(user_id, db=db)
