"""
Medications API Router
Endpoints for medication regimens and dose outcomes
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationResponse,
    MedicationList,
    AdherenceRecordCreate,
    AdherenceRecordResponse,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medication for a user

    - **user_id**: Owner user ID
    - **name**: Medication name
    - **dosage_times**: Dose times ("HH:MM") with optional "15m" / "1h" offsets
    - **active_days**: Weekday names the medication is taken on
    """
    medication_service = services.get_medication_service()

    try:
        return await medication_service.add_medication(
            user_id=medication_data.user_id,
            name=medication_data.name,
            description=medication_data.description,
            dosage_times=[d.model_dump() for d in medication_data.dosage_times],
            active_days=medication_data.active_days,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/user/{user_id}", response_model=MedicationList)
async def get_user_medications(
    user_id: int = Depends(get_current_user_id),
    active_only: bool = Query(True, description="Only return active medications"),
    db: Session = Depends(get_db)
):
    """
    Get all medications for a user
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.get_user_medications(
        user_id,
        active_only=active_only,
        db=db
    )

    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications)
    )


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: int,
    db: Session = Depends(get_db)
):
    """
    Get a medication with its dose times
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.get_medication(medication_id, db=db)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )

    return medication


@router.post(
    "/{medication_id}/adherence",
    response_model=AdherenceRecordResponse,
    status_code=status.HTTP_201_CREATED
)
async def log_adherence(
    medication_id: int,
    record: AdherenceRecordCreate,
    db: Session = Depends(get_db)
):
    """
    Record the outcome of a dose (taken, missed or delayed)
    """
    medication_service = services.get_medication_service()

    try:
        return await medication_service.log_adherence(
            medication_id,
            record.status,
            recorded_at=record.date,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
