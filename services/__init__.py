"""
Services Module
Business logic layer for the MedReminder application
"""

from services.user_service import UserService, user_service
from services.medication_service import MedicationService, medication_service
from services.notification_log_service import NotificationLogService, notification_log_service
from services.adherence_service import AdherenceService, adherence_service


__all__ = [
    # Service classes
    "UserService",
    "MedicationService",
    "NotificationLogService",
    "AdherenceService",
    # Singleton instances
    "user_service",
    "medication_service",
    "notification_log_service",
    "adherence_service",
]
