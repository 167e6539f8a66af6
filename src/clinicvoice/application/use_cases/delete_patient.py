"""Delete Patient use case: the only path by which visits are removed."""

import logging

from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.domain.errors import PatientNotFoundError

logger = logging.getLogger(__name__)


class DeletePatientUseCase:
    """Delete a patient together with all of their visits."""

    def __init__(self, patient_repository: PatientRepository, visit_repository: VisitRepository):
        self._patient_repository = patient_repository
        self._visit_repository = visit_repository

    async def execute(self, patient_id: str) -> int:
        """Returns the number of visits removed."""
        if not await self._patient_repository.exists_by_id(patient_id):
            raise PatientNotFoundError(patient_id)

        removed = await self._visit_repository.delete_by_patient_id(patient_id)
        await self._patient_repository.delete(patient_id)
        logger.info(f"Deleted patient {patient_id} and {removed} visit(s)")
        return removed
