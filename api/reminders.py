"""
Reminders API Router
Trigger daily reminder scheduling and inspect notification logs
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from actions.reminder_engine import ReminderScheduler
from api.deps import get_db, get_current_user_id, get_reminder_scheduler, services
from api.schemas.reminder import (
    ReminderEventResponse,
    ReminderRunResponse,
    NotificationLogResponse,
    PendingRemindersResponse,
    CancelRemindersResponse,
)


router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("/run/{user_id}", response_model=ReminderRunResponse)
async def run_reminders(
    user_id: int = Depends(get_current_user_id),
    day: Optional[date] = Query(None, description="Day to schedule (default: today)"),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    db: Session = Depends(get_db)
):
    """
    Schedule a user's reminders for the day

    Plans before / on-time / after reminders for every medication active
    on the day's weekday, logs them and arms their delivery. Reminders
    already pending from an earlier run are not scheduled again. Days are
    in the user's timezone; days already over are rejected.
    """
    today = await scheduler.today_for(user_id, db=db)
    day = day or today
    if day < today:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Cannot schedule reminders for {day}: the day is already over"
        )

    events = await scheduler.run(user_id, day=day, db=db)

    return ReminderRunResponse(
        user_id=user_id,
        date=day,
        scheduled=len(events),
        events=[ReminderEventResponse.model_validate(e) for e in events]
    )


@router.get(
    "/log/{user_id}",
    response_model=NotificationLogResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True
)
async def get_notification_log(
    user_id: int = Depends(get_current_user_id),
    log_date: Optional[date] = Query(None, description="Log date (default: today)"),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    db: Session = Depends(get_db)
):
    """
    Get the notification log for a user's day, sorted by time
    """
    log_service = services.get_notification_log_service()

    log_date = log_date or await scheduler.today_for(user_id, db=db)
    log = await log_service.get_log(user_id, log_date.isoformat(), db=db)

    if not log:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No notifications logged for user {user_id} on {log_date}"
        )

    return log


@router.get("/scheduled/{user_id}", response_model=PendingRemindersResponse)
async def get_pending_reminders(
    user_id: int,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler)
):
    """
    List deliveries armed for a user that have not fired yet
    """
    pending = [key.as_string() for key in scheduler.pending(user_id)]
    return PendingRemindersResponse(user_id=user_id, pending=pending, total=len(pending))


@router.delete("/scheduled/{user_id}", response_model=CancelRemindersResponse)
async def cancel_reminders(
    user_id: int,
    day: Optional[date] = Query(None, description="Only cancel reminders for this day"),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler)
):
    """
    Cancel a user's pending deliveries
    """
    cancelled = scheduler.cancel(user_id, day=day)
    return CancelRemindersResponse(user_id=user_id, cancelled=cancelled)
