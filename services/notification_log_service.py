"""
Notification Log Service
Durable per-user, per-day append log of planned reminders
"""

import logging
from typing import Dict, Optional, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from database import get_db_context
import models
from tools.scheduler import ReminderEvent


logger = logging.getLogger(__name__)


class NotificationLogService:
    """
    Upsert-and-append store for NotificationLog documents

    Each appended entry carries an idempotency key; appending an event
    whose key already exists is a no-op.
    """

    async def upsert_append(
        self,
        user_id: int,
        log_date: str,
        day_name: str,
        event: ReminderEvent,
        db: Optional[Session] = None
    ) -> bool:
        """
        Append an event to the (user_id, log_date) log, creating it if needed

        Args:
            user_id: Owner user ID
            log_date: "YYYY-MM-DD"
            day_name: Weekday label for the date
            event: Planned reminder
            db: Database session

        Returns:
            True if appended, False if the event was already logged
        """
        def _append(session: Session) -> bool:
            key = event.key(user_id, log_date).as_string()

            existing = session.query(models.NotificationEntry.id).filter(
                models.NotificationEntry.dedup_key == key
            ).first()
            if existing:
                logger.debug(f"Notification {key} already logged")
                return False

            log = self._get_or_create_log(session, user_id, log_date, day_name)

            entry = models.NotificationEntry(
                title=event.title,
                message=event.message,
                type=event.kind,
                medicine_id=event.medicine_id,
                medicine_name=event.medicine_name,
                time=event.instant,
                dedup_key=key
            )
            log.entries.append(entry)

            try:
                session.commit()
            except IntegrityError:
                # Concurrent append of the same key
                session.rollback()
                logger.info(f"Notification {key} logged concurrently, skipping")
                return False

            logger.info(f"Logged {event.kind.value} notification for user {user_id} on {log_date}")
            return True

        if db:
            return _append(db)

        with get_db_context() as session:
            return _append(session)

    def _get_or_create_log(
        self,
        session: Session,
        user_id: int,
        log_date: str,
        day_name: str
    ) -> models.NotificationLog:
        log = session.query(models.NotificationLog).filter(
            models.NotificationLog.user_id == user_id,
            models.NotificationLog.date == log_date
        ).first()

        if log:
            return log

        log = models.NotificationLog(user_id=user_id, date=log_date, day_name=day_name)
        session.add(log)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            log = session.query(models.NotificationLog).filter(
                models.NotificationLog.user_id == user_id,
                models.NotificationLog.date == log_date
            ).one()
        return log

    async def get_log(
        self,
        user_id: int,
        log_date: str,
        db: Optional[Session] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a day's log as a document, entries sorted by instant"""
        def _get(session: Session) -> Optional[Dict[str, Any]]:
            log = session.query(models.NotificationLog).filter(
                models.NotificationLog.user_id == user_id,
                models.NotificationLog.date == log_date
            ).first()
            return log.to_dict() if log else None

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
notification_log_service = NotificationLogService()
