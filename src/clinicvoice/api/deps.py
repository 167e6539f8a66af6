"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ..adapters.db.mongo.repositories.patient_repository import MongoPatientRepository
from ..adapters.db.mongo.repositories.visit_repository import MongoVisitRepository
from ..application.ports.repositories.patient_repo import PatientRepository
from ..application.ports.repositories.visit_repo import VisitRepository
from ..application.ports.services.extraction_service import MedicalExtractionService
from ..core.exceptions import ConfigurationError
from .errors import ServiceUnavailableError


@lru_cache()
def get_visit_repository() -> VisitRepository:
    """Get visit repository instance."""
    return MongoVisitRepository()


@lru_cache()
def get_patient_repository() -> PatientRepository:
    """Get patient repository instance."""
    return MongoPatientRepository()


@lru_cache()
def _build_extraction_service() -> MedicalExtractionService:
    from ..adapters.external.medical_extraction_openai import OpenAIMedicalExtractionService

    return OpenAIMedicalExtractionService()


def get_extraction_service() -> MedicalExtractionService:
    """Get the extraction service; 503 when no AI provider is configured."""
    try:
        return _build_extraction_service()
    except ConfigurationError as e:
        raise ServiceUnavailableError(e.message) from e


VisitRepositoryDep = Annotated[VisitRepository, Depends(get_visit_repository)]
PatientRepositoryDep = Annotated[PatientRepository, Depends(get_patient_repository)]
ExtractionServiceDep = Annotated[MedicalExtractionService, Depends(get_extraction_service)]
