"""
Read-side projections.

Related records are joined into responses here at read time; the
denormalized shapes are never persisted.
"""
from typing import Optional

from sqlalchemy.orm import Session

from ..models.user import User
from ..models.appointment import Appointment
from ..models.prescription import Prescription
from ..schemas.user import UserSummary
from ..schemas.appointment import AppointmentResponse, AppointmentDetail
from ..schemas.prescription import PrescriptionResponse, PrescriptionDetail


def reduce_user(user: Optional[User]) -> Optional[UserSummary]:
    """Project a user to {id, name, email}; deleted users become None."""
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email)


def appointment_detail(db: Session, appointment: Appointment) -> AppointmentDetail:
    """Embed reduced patient and doctor views into an appointment."""
    base = AppointmentResponse.model_validate(appointment)
    return AppointmentDetail(
        **base.model_dump(),
        patient=reduce_user(db.get(User, appointment.patient_id)),
        doctor=reduce_user(db.get(User, appointment.doctor_id)),
    )


def prescription_detail(
    db: Session, prescription: Prescription, appointment: Appointment
) -> PrescriptionDetail:
    """Embed the resolved appointment (with its users) into a prescription."""
    base = PrescriptionResponse.model_validate(prescription)
    return PrescriptionDetail(
        **base.model_dump(),
        appointment=appointment_detail(db, appointment),
    )
