"""
MongoDB implementation of VisitRepository.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.domain.entities.visit import FormSlot, Visit, VisitForms
from clinicvoice.domain.enums.forms import FormStatus, VisitStatus
from clinicvoice.domain.errors import DuplicateVisitNumberError
from clinicvoice.domain.value_objects.visit_id import VisitId

from ..models.visit_m import FormSlotMongo, VisitFormsMongo, VisitMongo

logger = logging.getLogger(__name__)


class MongoVisitRepository(VisitRepository):
    """MongoDB implementation of VisitRepository."""

    async def save(self, visit: Visit) -> Visit:
        """Insert or update a visit."""
        visit_mongo = await self._domain_to_mongo(visit)
        try:
            await visit_mongo.save()
        except DuplicateKeyError as e:
            raise DuplicateVisitNumberError(visit.patient_id, visit.visit_number) from e

        logger.info(f"Visit {visit.visit_id.value} saved (patient={visit.patient_id}, number={visit.visit_number})")
        return self._mongo_to_domain(visit_mongo)

    async def find_by_id(self, visit_id: VisitId) -> Optional[Visit]:
        """Find a visit by ID."""
        visit_mongo = await VisitMongo.find_one(VisitMongo.visit_id == visit_id.value)
        if not visit_mongo:
            return None
        return self._mongo_to_domain(visit_mongo)

    async def find_by_patient_id(self, patient_id: str) -> List[Visit]:
        """Find all visits for a specific patient, newest first."""
        visits_mongo = await VisitMongo.find(
            VisitMongo.patient_id == patient_id
        ).sort([("created_at", -1)]).to_list()
        return [self._mongo_to_domain(v) for v in visits_mongo]

    async def count_by_patient_id(self, patient_id: str) -> int:
        return await VisitMongo.find(VisitMongo.patient_id == patient_id).count()

    async def delete_by_patient_id(self, patient_id: str) -> int:
        result = await VisitMongo.find(VisitMongo.patient_id == patient_id).delete()
        return result.deleted_count if result else 0

    @staticmethod
    def _slot_to_mongo(slot: FormSlot) -> FormSlotMongo:
        return FormSlotMongo(status=slot.status.value, data=slot.data, last_updated=slot.last_updated)

    @staticmethod
    def _slot_to_domain(slot_mongo: FormSlotMongo) -> FormSlot:
        return FormSlot(
            status=FormStatus(slot_mongo.status),
            data=slot_mongo.data,
            last_updated=slot_mongo.last_updated,
        )

    async def _domain_to_mongo(self, visit: Visit) -> VisitMongo:
        """Convert domain entity to MongoDB model."""
        forms_mongo = VisitFormsMongo(
            medical_history=self._slot_to_mongo(visit.forms.medical_history),
            clinical_examination=self._slot_to_mongo(visit.forms.clinical_examination),
            diagnosis_treatment=self._slot_to_mongo(visit.forms.diagnosis_treatment),
            discharge_form=self._slot_to_mongo(visit.forms.discharge_form),
        )

        existing_visit = await VisitMongo.find_one(VisitMongo.visit_id == visit.visit_id.value)
        if existing_visit:
            existing_visit.status = visit.status.value
            existing_visit.chief_complaint = visit.chief_complaint
            existing_visit.discharge_date = visit.discharge_date
            existing_visit.diagnosis = visit.diagnosis
            existing_visit.notes = visit.notes
            existing_visit.forms = forms_mongo
            existing_visit.discharge_summary = visit.discharge_summary
            existing_visit.discharge_summary_generated_at = visit.discharge_summary_generated_at
            existing_visit.updated_at = datetime.utcnow()
            return existing_visit

        return VisitMongo(
            visit_id=visit.visit_id.value,
            patient_id=visit.patient_id,
            visit_number=visit.visit_number,
            doctor_id=visit.doctor_id,
            chief_complaint=visit.chief_complaint,
            status=visit.status.value,
            admission_date=visit.admission_date,
            discharge_date=visit.discharge_date,
            diagnosis=visit.diagnosis,
            notes=visit.notes,
            forms=forms_mongo,
            discharge_summary=visit.discharge_summary,
            discharge_summary_generated_at=visit.discharge_summary_generated_at,
            created_at=visit.created_at,
            updated_at=visit.updated_at,
        )

    def _mongo_to_domain(self, visit_mongo: VisitMongo) -> Visit:
        """Convert MongoDB model to domain entity."""
        return Visit(
            visit_id=VisitId(visit_mongo.visit_id),
            patient_id=visit_mongo.patient_id,
            visit_number=visit_mongo.visit_number,
            doctor_id=visit_mongo.doctor_id,
            chief_complaint=visit_mongo.chief_complaint,
            status=VisitStatus(visit_mongo.status),
            admission_date=visit_mongo.admission_date,
            discharge_date=visit_mongo.discharge_date,
            diagnosis=visit_mongo.diagnosis,
            notes=visit_mongo.notes,
            forms=VisitForms(
                medical_history=self._slot_to_domain(visit_mongo.forms.medical_history),
                clinical_examination=self._slot_to_domain(visit_mongo.forms.clinical_examination),
                diagnosis_treatment=self._slot_to_domain(visit_mongo.forms.diagnosis_treatment),
                discharge_form=self._slot_to_domain(visit_mongo.forms.discharge_form),
            ),
            discharge_summary=visit_mongo.discharge_summary,
            discharge_summary_generated_at=visit_mongo.discharge_summary_generated_at,
            created_at=visit_mongo.created_at,
            updated_at=visit_mongo.updated_at,
        )
