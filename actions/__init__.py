"""
Actions Module
Engines that act on planned reminders
"""

from .reminder_engine import (
    ReminderScheduler,
    reminder_scheduler,
    run_scheduler,
    local_now
)


__all__ = [
    # Reminder Engine
    "ReminderScheduler",
    "reminder_scheduler",
    "run_scheduler",
    "local_now"
]
