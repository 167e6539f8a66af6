"""Resolve Current Visit use case: which visit should a form page write into."""

from typing import List, Optional

from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.domain.entities.visit import Visit, select_current_visit


class ListPatientVisitsUseCase:
    """All visits of a patient, most recently created first."""

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, patient_id: str) -> List[Visit]:
        visits = await self._visit_repository.find_by_patient_id(patient_id)
        return sorted(visits, key=lambda v: v.created_at, reverse=True)


class ResolveCurrentVisitUseCase:
    """Most recent Active visit, else most recent visit, else None.

    Evaluated fresh on every call; nothing is cached.
    """

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, patient_id: str) -> Optional[Visit]:
        visits = await self._visit_repository.find_by_patient_id(patient_id)
        return select_current_visit(visits)
