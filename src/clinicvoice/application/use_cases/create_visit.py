"""Create Visit use case: open the next sequentially numbered visit for a patient."""

import logging
from typing import Optional

from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.application.use_cases.keyed_locks import KeyedLocks
from clinicvoice.domain.entities.visit import Visit
from clinicvoice.domain.errors import DuplicateVisitNumberError, PatientNotFoundError

logger = logging.getLogger(__name__)

MAX_NUMBERING_ATTEMPTS = 3


class CreateVisitRequest:
    """Request for creating a visit."""
    def __init__(self, patient_id: str, chief_complaint: Optional[str] = None, doctor_id: Optional[str] = None):
        self.patient_id = patient_id
        self.chief_complaint = chief_complaint
        self.doctor_id = doctor_id


_patient_locks = KeyedLocks()


class CreateVisitUseCase:
    """Use case for creating visits.

    Numbering is count + 1 under a per-patient lock; across processes the
    repository's unique (patient_id, visit_number) constraint catches races
    and the number is recomputed.
    """

    def __init__(self, patient_repository: PatientRepository, visit_repository: VisitRepository):
        self._patient_repository = patient_repository
        self._visit_repository = visit_repository

    async def execute(self, request: CreateVisitRequest) -> Visit:
        """Execute the create visit use case."""
        if not await self._patient_repository.exists_by_id(request.patient_id):
            raise PatientNotFoundError(request.patient_id)

        async with _patient_locks.hold(request.patient_id):
            for attempt in range(1, MAX_NUMBERING_ATTEMPTS + 1):
                existing = await self._visit_repository.count_by_patient_id(request.patient_id)
                visit = Visit.create(
                    patient_id=request.patient_id,
                    visit_number=existing + 1,
                    chief_complaint=request.chief_complaint,
                    doctor_id=request.doctor_id,
                )
                try:
                    saved = await self._visit_repository.save(visit)
                except DuplicateVisitNumberError:
                    logger.warning(
                        f"Visit number collision for patient {request.patient_id} "
                        f"(attempt {attempt}/{MAX_NUMBERING_ATTEMPTS})"
                    )
                    if attempt == MAX_NUMBERING_ATTEMPTS:
                        raise
                    continue
                logger.info(
                    f"Created visit {saved.visit_id.value} #{saved.visit_number} for patient {request.patient_id}"
                )
                return saved
