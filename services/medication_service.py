"""
Medication Service
Medication repository: regimen lookups, regimen edits and dose outcomes
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, timezone
from sqlalchemy.orm import Session, selectinload

from database import get_db_context
import models
from models import AdherenceStatus, Weekday


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related operations
    """

    async def add_medication(
        self,
        user_id: int,
        name: str,
        dosage_times: List[Dict[str, Any]],
        active_days: List[str],
        description: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication for a user

        Args:
            user_id: Owner user ID
            name: Display name
            dosage_times: [{"time": "HH:MM", "remind_before": "15m", "remind_after": "30m"}]
            active_days: Weekday names the medication applies to
            description: Optional description
            db: Database session

        Returns:
            Created Medication object
        """
        def _add(session: Session) -> models.Medication:
            user = session.query(models.User).filter(
                models.User.id == user_id
            ).first()

            if not user:
                raise ValueError(f"User {user_id} not found")

            medication = models.Medication(
                user_id=user_id,
                name=name,
                description=description,
                active_days=[Weekday.parse(d).value for d in active_days],
                active=True,
                dosage_times=[
                    models.DosageTime(
                        time=d["time"],
                        remind_before=d.get("remind_before") or "",
                        remind_after=d.get("remind_after") or ""
                    )
                    for d in dosage_times
                ]
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {name} for user {user_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Get medication by ID"""
        def _get(session: Session) -> Optional[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_user_medications(
        self,
        user_id: int,
        active_only: bool = True,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Get all medications owned by a user"""
        def _get(session: Session) -> List[models.Medication]:
            query = session.query(models.Medication).options(
                selectinload(models.Medication.dosage_times)
            ).filter(models.Medication.user_id == user_id)

            if active_only:
                query = query.filter(models.Medication.active == True)  # noqa: E712

            return query.order_by(models.Medication.id).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def find_active_for_user_and_weekday(
        self,
        user_id: int,
        weekday: Weekday,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """
        Medications of a user scheduled on the given weekday

        Weekday membership is checked in Python since active_days is a
        JSON list.
        """
        medications = await self.get_user_medications(user_id, active_only=True, db=db)
        return [m for m in medications if m.is_active_on(weekday)]

    async def log_adherence(
        self,
        medication_id: int,
        status: AdherenceStatus,
        recorded_at: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.AdherenceRecord:
        """
        Append an adherence record for a dose occurrence

        Args:
            medication_id: Medication ID
            status: taken, missed or delayed
            recorded_at: Dose date (default: now, UTC)
            db: Database session

        Returns:
            Created AdherenceRecord
        """
        def _log(session: Session) -> models.AdherenceRecord:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                raise ValueError(f"Medication {medication_id} not found")

            recorded = recorded_at or datetime.utcnow()
            if recorded.tzinfo is not None:
                recorded = recorded.astimezone(timezone.utc).replace(tzinfo=None)

            record = models.AdherenceRecord(
                medication_id=medication_id,
                date=recorded,
                status=status
            )

            session.add(record)
            session.commit()
            session.refresh(record)

            logger.info(f"Logged {status.value} dose for medication {medication_id}")
            return record

        if db:
            return _log(db)

        with get_db_context() as session:
            return _log(session)

    async def get_adherence_records(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> List[models.AdherenceRecord]:
        """All adherence records across every medication of a user"""
        def _get(session: Session) -> List[models.AdherenceRecord]:
            return session.query(models.AdherenceRecord).join(
                models.Medication
            ).filter(
                models.Medication.user_id == user_id
            ).order_by(models.AdherenceRecord.date).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def count_user_medications(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> int:
        def _count(session: Session) -> int:
            return session.query(models.Medication).filter(
                models.Medication.user_id == user_id
            ).count()

        if db:
            return _count(db)

        with get_db_context() as session:
            return _count(session)


# Singleton instance
medication_service = MedicationService()
