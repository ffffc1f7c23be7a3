from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Principal
from ...api.deps import RecordId, get_current_user, get_patient_user, get_staff_user
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentStatusUpdate,
    AppointmentResponse, AppointmentDetail
)
from ...schemas.common import MessageResponse

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    appointment_data: AppointmentCreate,
    current_user: Principal = Depends(get_patient_user),
    db: Session = Depends(get_db)
):
    """Book an appointment with a doctor (patients only)."""
    return AppointmentService(db).create_appointment(
        current_user,
        appointment_data.doctor_id,
        appointment_data.appointment_date,
        appointment_data.notes,
    )

@router.get("", response_model=List[AppointmentDetail])
def list_appointments(
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List appointments visible to the current user."""
    return AppointmentService(db).list_appointments(current_user)

@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: RecordId,
    status_data: AppointmentStatusUpdate,
    current_user: Principal = Depends(get_staff_user),
    db: Session = Depends(get_db)
):
    """Update appointment status (assigned doctor or admin)."""
    return AppointmentService(db).update_status(
        current_user, appointment_id, status_data.status
    )

@router.delete("/{appointment_id}", response_model=MessageResponse)
def cancel_appointment(
    appointment_id: RecordId,
    current_user: Principal = Depends(get_patient_user),
    db: Session = Depends(get_db)
):
    """Cancel an appointment. The record is kept with status cancelled."""
    AppointmentService(db).cancel_appointment(current_user, appointment_id)
    return MessageResponse(message="Appointment cancelled")
