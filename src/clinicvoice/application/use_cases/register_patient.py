"""Register Patient use case: store a patient under the next medical ID of the year."""

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Optional

from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.application.use_cases.keyed_locks import KeyedLocks
from clinicvoice.domain.entities.patient import Patient
from clinicvoice.domain.errors import DuplicateMedicalIdError
from clinicvoice.domain.value_objects.medical_id import MedicalId

logger = logging.getLogger(__name__)

MAX_MEDICAL_ID_ATTEMPTS = 3

_year_locks = KeyedLocks()


class RegisterPatientRequest:
    """Request for registering a patient."""
    def __init__(
        self,
        doctor_id: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[date] = None,
    ):
        self.doctor_id = doctor_id
        self.first_name = first_name
        self.last_name = last_name
        self.date_of_birth = date_of_birth


class RegisterPatientUseCase:
    """Use case for registering patients.

    The medical ID is ``{year}{count of that year's IDs + 1, six digits}``.
    The count runs under a per-year lock; the repository's unique medical ID
    constraint catches cross-process races and the ID is recomputed.
    """

    def __init__(
        self,
        patient_repository: PatientRepository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._patient_repository = patient_repository
        self._clock = clock

    async def execute(self, request: RegisterPatientRequest) -> Patient:
        now = self._clock()
        prefix = MedicalId.year_prefix(now)

        async with _year_locks.hold(prefix):
            for attempt in range(1, MAX_MEDICAL_ID_ATTEMPTS + 1):
                issued = await self._patient_repository.count_by_medical_id_prefix(prefix)
                patient = Patient(
                    patient_id=str(uuid.uuid4()),
                    medical_id=MedicalId.generate(issued, now),
                    doctor_id=request.doctor_id,
                    first_name=request.first_name,
                    last_name=request.last_name,
                    date_of_birth=request.date_of_birth,
                    created_at=now,
                )
                try:
                    saved = await self._patient_repository.save(patient)
                except DuplicateMedicalIdError:
                    logger.warning(
                        f"Medical ID collision on {patient.medical_id} "
                        f"(attempt {attempt}/{MAX_MEDICAL_ID_ATTEMPTS})"
                    )
                    if attempt == MAX_MEDICAL_ID_ATTEMPTS:
                        raise
                    continue
                logger.info(f"Registered patient {saved.patient_id} as {saved.medical_id}")
                return saved
