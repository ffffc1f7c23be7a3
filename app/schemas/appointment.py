from datetime import datetime
from typing import Optional

from .common import CamelModel, RecordRef
from .user import UserSummary
from ..models.appointment import AppointmentStatus

class AppointmentCreate(CamelModel):
    doctor_id: RecordRef = None
    # Kept as text so AppointmentService reports unparsable dates itself
    appointment_date: Optional[str] = None
    notes: Optional[str] = None

class AppointmentStatusUpdate(CamelModel):
    status: Optional[str] = None

class AppointmentResponse(CamelModel):
    id: int
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    status: AppointmentStatus
    notes: str
    created_at: datetime
    updated_at: datetime

class AppointmentDetail(AppointmentResponse):
    patient: Optional[UserSummary] = None
    doctor: Optional[UserSummary] = None
