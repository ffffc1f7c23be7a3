from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from .common import CamelModel, RecordRef
from .appointment import AppointmentDetail

class Medication(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1)

class PrescriptionCreate(CamelModel):
    appointment_id: RecordRef = None
    medications: Optional[List[Medication]] = None
    instructions: Optional[str] = None

class PrescriptionUpdate(CamelModel):
    medications: Optional[List[Medication]] = None
    instructions: Optional[str] = None

class PrescriptionResponse(CamelModel):
    id: int
    appointment_id: int
    medications: List[Medication]
    instructions: str
    issued_date: datetime
    created_at: datetime
    updated_at: datetime

class PrescriptionDetail(PrescriptionResponse):
    appointment: Optional[AppointmentDetail] = None
