"""
Tools Package
Planning, delivery and analytics utilities for the MedReminder system
"""

from .time_utils import (
    InvalidDurationError,
    parse_duration,
    parse_duration_ms,
    resolve_time,
    format_time_of_day
)

from .scheduler import (
    ReminderPlanner,
    ReminderEvent,
    ReminderKey,
    reminder_planner,
    plan_reminders,
    render_message
)

from .notification_service import (
    NotificationChannel,
    LoggingNotificationChannel,
    WebhookNotificationChannel,
    get_notification_channel
)

from .adherence_metrics import (
    AdherenceStreakCalculator,
    AdherenceStatsAggregator,
    AdherenceSnapshot,
    DayTally,
    streak_calculator,
    stats_aggregator,
    calculate_streak,
    calculate_stats
)

__all__ = [
    # Time Utilities
    "InvalidDurationError",
    "parse_duration",
    "parse_duration_ms",
    "resolve_time",
    "format_time_of_day",

    # Reminder Planner
    "ReminderPlanner",
    "ReminderEvent",
    "ReminderKey",
    "reminder_planner",
    "plan_reminders",
    "render_message",

    # Notification Channels
    "NotificationChannel",
    "LoggingNotificationChannel",
    "WebhookNotificationChannel",
    "get_notification_channel",

    # Adherence Metrics
    "AdherenceStreakCalculator",
    "AdherenceStatsAggregator",
    "AdherenceSnapshot",
    "DayTally",
    "streak_calculator",
    "stats_aggregator",
    "calculate_streak",
    "calculate_stats"
]
