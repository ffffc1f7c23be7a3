from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import List, Optional, Union
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
import logging

from ..models.user import User
from ..models.appointment import Appointment, AppointmentStatus
from ..core.database import get_record
from ..core.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from ..core.security import Principal, UserRole, authorize
from ..schemas.appointment import AppointmentResponse, AppointmentDetail
from .projections import appointment_detail

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)

def parse_datetime(value: Union[str, datetime]) -> datetime:
    """Parse a datetime and normalize it to naive UTC."""
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValidationError("Invalid appointment date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def create_appointment(
        self,
        principal: Principal,
        doctor_id: Optional[int],
        appointment_date: Optional[Union[str, datetime]],
        notes: Optional[str] = None,
    ) -> AppointmentResponse:
        """Book an appointment for the calling patient."""
        authorize(principal, UserRole.PATIENT)

        if not doctor_id or not appointment_date:
            raise ValidationError("Doctor and appointment date are required")

        when = parse_datetime(appointment_date)
        if when <= datetime.utcnow():
            raise ValidationError("Appointment date must be in the future")

        doctor = get_record(self.db, User, doctor_id)
        if not doctor or doctor.role != UserRole.DOCTOR:
            raise ValidationError("Doctor not found")

        appointment = Appointment(
            patient_id=principal.id,
            doctor_id=doctor.id,
            appointment_date=when,
            notes=notes or "",
            status=AppointmentStatus.SCHEDULED,
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} booked by patient {principal.id} "
            f"with doctor {doctor.id}"
        )
        return AppointmentResponse.model_validate(appointment)

    def list_appointments(self, principal: Principal) -> List[AppointmentDetail]:
        """Appointments visible to the principal, earliest first."""
        query = self.db.query(Appointment)
        if principal.role == UserRole.PATIENT:
            query = query.filter(Appointment.patient_id == principal.id)
        elif principal.role == UserRole.DOCTOR:
            query = query.filter(Appointment.doctor_id == principal.id)

        appointments = query.order_by(
            Appointment.appointment_date.asc(), Appointment.id.asc()
        ).all()
        return [appointment_detail(self.db, appointment) for appointment in appointments]

    def update_status(
        self,
        principal: Principal,
        appointment_id: int,
        status: Optional[str],
    ) -> AppointmentResponse:
        """Set any valid status. Transitions between statuses are unrestricted."""
        appointment = self._get_appointment(appointment_id)

        is_assigned_doctor = (
            principal.role == UserRole.DOCTOR
            and principal.id == appointment.doctor_id
        )
        if principal.role != UserRole.ADMIN and not is_assigned_doctor:
            raise AuthorizationError("Not authorized to update appointment status")

        try:
            new_status = AppointmentStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

        appointment.status = new_status
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} set to {new_status.value} by user {principal.id}")
        return AppointmentResponse.model_validate(appointment)

    def cancel_appointment(self, principal: Principal, appointment_id: int) -> None:
        """Cancel the caller's own appointment. The record is kept."""
        appointment = self._get_appointment(appointment_id)

        if principal.id != appointment.patient_id:
            raise AuthorizationError("Not authorized to cancel this appointment")

        if appointment.status == AppointmentStatus.CANCELLED:
            raise ConflictError("Appointment is already cancelled")

        appointment.status = AppointmentStatus.CANCELLED
        self.db.commit()
        logger.info(f"Appointment {appointment.id} cancelled by patient {principal.id}")

    def _get_appointment(self, appointment_id: int) -> Appointment:
        appointment = get_record(self.db, Appointment, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment
