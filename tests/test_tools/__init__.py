"""
Test Tools Package
Tests for the tools module (time utilities, planner, channels, metrics)
"""

__all__ = [
    "test_time_utils",
    "test_scheduler",
    "test_notification_service",
    "test_adherence_metrics",
]
