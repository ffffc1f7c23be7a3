from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Principal
from ...api.deps import RecordId, get_current_user, get_doctor_user, get_staff_user
from ...services.prescription_service import PrescriptionService
from ...schemas.prescription import (
    PrescriptionCreate, PrescriptionUpdate,
    PrescriptionResponse, PrescriptionDetail
)
from ...schemas.common import MessageResponse

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])

@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
def create_prescription(
    prescription_data: PrescriptionCreate,
    current_user: Principal = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    """Issue a prescription for an appointment (assigned doctor only)."""
    return PrescriptionService(db).create_prescription(
        current_user,
        prescription_data.appointment_id,
        prescription_data.medications,
        prescription_data.instructions,
    )

@router.get("/user/{user_id}", response_model=List[PrescriptionDetail])
def list_patient_prescriptions(
    user_id: RecordId,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List a patient's prescriptions. Patients may only read their own."""
    return PrescriptionService(db).list_for_patient(current_user, user_id)

@router.put("/{prescription_id}", response_model=PrescriptionResponse)
def update_prescription(
    prescription_id: RecordId,
    prescription_data: PrescriptionUpdate,
    current_user: Principal = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    """Update medications and/or instructions (assigned doctor only)."""
    return PrescriptionService(db).update_prescription(
        current_user,
        prescription_id,
        medications=prescription_data.medications,
        instructions=prescription_data.instructions,
        instructions_provided="instructions" in prescription_data.model_fields_set,
    )

@router.delete("/{prescription_id}", response_model=MessageResponse)
def delete_prescription(
    prescription_id: RecordId,
    current_user: Principal = Depends(get_staff_user),
    db: Session = Depends(get_db)
):
    """Delete a prescription (assigned doctor or admin)."""
    PrescriptionService(db).delete_prescription(current_user, prescription_id)
    return MessageResponse(message="Prescription deleted")
