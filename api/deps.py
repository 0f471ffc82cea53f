"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Generator
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from database import SessionLocal
from actions.reminder_engine import ReminderScheduler, reminder_scheduler


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency
    Yields a SQLAlchemy session and ensures cleanup
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    """The scheduler owned by the running app"""
    return getattr(request.app.state, "reminder_scheduler", None) or reminder_scheduler


async def get_current_user_id(
    user_id: int,
    db: Session = Depends(get_db)
) -> int:
    """
    Validate user exists and return user ID
    """
    from services.user_service import user_service

    user = await user_service.get_user(user_id, db=db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found"
        )

    return user_id


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_user_service():
        from services.user_service import user_service
        return user_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service

    @staticmethod
    def get_notification_log_service():
        from services.notification_log_service import notification_log_service
        return notification_log_service


# Service dependency instances
services = ServiceDependency()
