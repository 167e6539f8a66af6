"""
MongoDB implementation of PatientRepository.
"""

import logging
import re
from typing import Optional

from pymongo.errors import DuplicateKeyError

from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.domain.entities.patient import Patient
from clinicvoice.domain.errors import DuplicateMedicalIdError
from clinicvoice.domain.value_objects.medical_id import MedicalId

from ..models.visit_m import PatientMongo

logger = logging.getLogger(__name__)


class MongoPatientRepository(PatientRepository):
    """MongoDB implementation of PatientRepository."""

    async def save(self, patient: Patient) -> Patient:
        patient_mongo = PatientMongo(
            patient_id=patient.patient_id,
            medical_id=patient.medical_id.value,
            doctor_id=patient.doctor_id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            created_at=patient.created_at,
        )
        try:
            await patient_mongo.insert()
        except DuplicateKeyError as e:
            raise DuplicateMedicalIdError(patient.medical_id.value) from e

        logger.info(f"Patient {patient.patient_id} saved (medical_id={patient.medical_id.value})")
        return self._mongo_to_domain(patient_mongo)

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        patient_mongo = await PatientMongo.find_one(PatientMongo.patient_id == patient_id)
        if not patient_mongo:
            return None
        return self._mongo_to_domain(patient_mongo)

    async def exists_by_id(self, patient_id: str) -> bool:
        count = await PatientMongo.find(PatientMongo.patient_id == patient_id).count()
        return count > 0

    async def count_by_medical_id_prefix(self, prefix: str) -> int:
        return await PatientMongo.find(
            {"medical_id": {"$regex": f"^{re.escape(prefix)}"}}
        ).count()

    async def delete(self, patient_id: str) -> bool:
        result = await PatientMongo.find_one(PatientMongo.patient_id == patient_id).delete()
        return bool(result and result.deleted_count)

    def _mongo_to_domain(self, patient_mongo: PatientMongo) -> Patient:
        return Patient(
            patient_id=patient_mongo.patient_id,
            medical_id=MedicalId(patient_mongo.medical_id),
            doctor_id=patient_mongo.doctor_id,
            first_name=patient_mongo.first_name,
            last_name=patient_mongo.last_name,
            date_of_birth=patient_mongo.date_of_birth,
            created_at=patient_mongo.created_at,
        )
