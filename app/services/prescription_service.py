from sqlalchemy.orm import Session
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union
from pydantic import BaseModel
import logging

from ..models.appointment import Appointment
from ..models.prescription import Prescription
from ..core.database import get_record
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.security import Principal, UserRole
from ..schemas.prescription import PrescriptionResponse, PrescriptionDetail
from .projections import prescription_detail

logger = logging.getLogger(__name__)

MEDICATION_FIELDS = ("name", "dosage", "frequency")

MedicationInput = Union[BaseModel, Dict[str, Any]]

def normalize_medications(medications: Sequence[MedicationInput]) -> List[Dict[str, str]]:
    """Convert medications to plain dicts, requiring every field on each."""
    normalized = []
    for medication in medications:
        data = medication.model_dump() if isinstance(medication, BaseModel) else dict(medication)
        values = {field: str(data.get(field) or "").strip() for field in MEDICATION_FIELDS}
        missing = [field for field, value in values.items() if not value]
        if missing:
            raise ValidationError(f"Medication is missing required fields: {', '.join(missing)}")
        normalized.append(values)
    return normalized

def is_assigned_doctor(principal: Principal, appointment: Optional[Appointment]) -> bool:
    return (
        appointment is not None
        and principal.role == UserRole.DOCTOR
        and principal.id == appointment.doctor_id
    )

class PrescriptionService:
    def __init__(self, db: Session):
        self.db = db

    def create_prescription(
        self,
        principal: Principal,
        appointment_id: Optional[int],
        medications: Optional[Sequence[MedicationInput]],
        instructions: Optional[str] = None,
    ) -> PrescriptionResponse:
        """Issue a prescription for an appointment the doctor is assigned to."""
        if not appointment_id or not medications:
            raise ValidationError("Appointment ID and at least one medication are required")
        items = normalize_medications(medications)

        appointment = get_record(self.db, Appointment, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        if not is_assigned_doctor(principal, appointment):
            raise AuthorizationError("Not authorized to create prescription for this appointment")

        prescription = Prescription(
            appointment_id=appointment.id,
            medications=items,
            instructions=instructions or "",
            issued_date=datetime.utcnow(),
        )
        self.db.add(prescription)
        self.db.commit()
        self.db.refresh(prescription)

        logger.info(
            f"Prescription {prescription.id} issued for appointment {appointment.id} "
            f"by doctor {principal.id}"
        )
        return PrescriptionResponse.model_validate(prescription)

    def list_for_patient(self, principal: Principal, patient_id: int) -> List[PrescriptionDetail]:
        """Prescriptions whose appointment belongs to the patient, newest first."""
        if principal.role == UserRole.PATIENT and principal.id != patient_id:
            raise AuthorizationError("Not authorized to access these prescriptions")

        results = []
        for prescription in self.db.query(Prescription).all():
            appointment = get_record(self.db, Appointment, prescription.appointment_id)
            if appointment and appointment.patient_id == patient_id:
                results.append(prescription_detail(self.db, prescription, appointment))

        results.sort(key=lambda item: (item.issued_date, item.id), reverse=True)
        return results

    def update_prescription(
        self,
        principal: Principal,
        prescription_id: int,
        medications: Optional[Sequence[MedicationInput]] = None,
        instructions: Optional[str] = None,
        instructions_provided: bool = False,
    ) -> PrescriptionResponse:
        """Partially update a prescription.

        Medications are replaced only when a non-empty list is given.
        Instructions are replaced whenever ``instructions_provided`` is set,
        an empty string included.
        """
        prescription = self._get_prescription(prescription_id)
        appointment = get_record(self.db, Appointment, prescription.appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        if not is_assigned_doctor(principal, appointment):
            raise AuthorizationError("Not authorized to update this prescription")

        if medications:
            prescription.medications = normalize_medications(medications)
        if instructions_provided or instructions is not None:
            prescription.instructions = instructions or ""

        self.db.commit()
        self.db.refresh(prescription)

        logger.info(f"Prescription {prescription.id} updated by doctor {principal.id}")
        return PrescriptionResponse.model_validate(prescription)

    def delete_prescription(self, principal: Principal, prescription_id: int) -> None:
        prescription = self._get_prescription(prescription_id)
        appointment = get_record(self.db, Appointment, prescription.appointment_id)

        if principal.role != UserRole.ADMIN and not is_assigned_doctor(principal, appointment):
            raise AuthorizationError("Not authorized to delete this prescription")

        self.db.delete(prescription)
        self.db.commit()
        logger.info(f"Prescription {prescription_id} deleted by user {principal.id}")

    def _get_prescription(self, prescription_id: int) -> Prescription:
        prescription = get_record(self.db, Prescription, prescription_id)
        if not prescription:
            raise NotFoundError("Prescription not found")
        return prescription
