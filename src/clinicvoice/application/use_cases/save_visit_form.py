"""Save Visit Form use case: upsert one form slot of a visit."""

import logging
from typing import Any, Dict, Optional

from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.domain.entities.visit import Visit
from clinicvoice.domain.enums.forms import FormSlotKey
from clinicvoice.domain.errors import InvalidFormTypeError, VisitNotFoundError
from clinicvoice.domain.value_objects.visit_id import VisitId

logger = logging.getLogger(__name__)


class SaveVisitFormUseCase:
    """Use case for saving a form into its visit slot (last write wins)."""

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, visit_id: str, form_type: str, data: Optional[Dict[str, Any]]) -> Visit:
        if FormSlotKey.parse(form_type) is None:
            raise InvalidFormTypeError(form_type)
        if not VisitId.is_valid(visit_id):
            raise VisitNotFoundError(visit_id)

        visit = await self._visit_repository.find_by_id(VisitId(visit_id))
        if not visit:
            raise VisitNotFoundError(visit_id)

        visit.save_form(form_type, data)
        saved = await self._visit_repository.save(visit)
        logger.info(f"Saved {form_type} for visit {visit_id}")
        return saved
