"""Discharge use cases: close a visit and compile its discharge summary."""

import logging
from typing import Any, Dict

from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.domain.entities.visit import Visit
from clinicvoice.domain.errors import PatientNotFoundError, VisitNotFoundError
from clinicvoice.domain.value_objects.visit_id import VisitId

logger = logging.getLogger(__name__)


async def _load_visit(visit_repository: VisitRepository, visit_id: str) -> Visit:
    if not VisitId.is_valid(visit_id):
        raise VisitNotFoundError(visit_id)
    visit = await visit_repository.find_by_id(VisitId(visit_id))
    if not visit:
        raise VisitNotFoundError(visit_id)
    return visit


class GetVisitUseCase:
    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, visit_id: str) -> Visit:
        return await _load_visit(self._visit_repository, visit_id)


class DischargeVisitUseCase:
    """Mark a visit as discharged and stamp the discharge date."""

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, visit_id: str) -> Visit:
        visit = await _load_visit(self._visit_repository, visit_id)
        visit.discharge()
        saved = await self._visit_repository.save(visit)
        logger.info(f"Visit {visit_id} discharged")
        return saved


class GenerateDischargeSummaryUseCase:
    """Compile patient info, visit info, forms and notes into a stored summary."""

    def __init__(self, patient_repository: PatientRepository, visit_repository: VisitRepository):
        self._patient_repository = patient_repository
        self._visit_repository = visit_repository

    async def execute(self, visit_id: str) -> Dict[str, Any]:
        visit = await _load_visit(self._visit_repository, visit_id)
        patient = await self._patient_repository.find_by_id(visit.patient_id)
        if not patient:
            raise PatientNotFoundError(visit.patient_id)

        summary = {
            "patientInfo": {
                "medicalId": patient.medical_id.value,
                "name": patient.full_name,
                "dateOfBirth": patient.date_of_birth.isoformat() if patient.date_of_birth else None,
            },
            "visitInfo": {
                "visitNumber": visit.visit_number,
                "admissionDate": visit.admission_date.isoformat(),
                "dischargeDate": visit.discharge_date.isoformat() if visit.discharge_date else None,
                "doctorId": visit.doctor_id,
                "chiefComplaint": visit.chief_complaint,
            },
            "forms": {
                key.value: {
                    "status": slot.status.value,
                    "data": slot.data,
                    "lastUpdated": slot.last_updated.isoformat() if slot.last_updated else None,
                }
                for key, slot in visit.forms.items()
            },
            "notes": visit.notes,
        }

        visit.attach_discharge_summary(summary)
        await self._visit_repository.save(visit)
        logger.info(f"Discharge summary generated for visit {visit_id}")
        return summary
