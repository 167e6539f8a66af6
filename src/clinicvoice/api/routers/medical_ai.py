"""Structured extraction endpoint: clinician dictation in, form JSON out.

Unlike the other endpoints the success body is the bare extraction object,
because clients feed it straight into their form populators.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ...application.use_cases.extract_medical_data import ExtractMedicalDataUseCase
from ...core.exceptions import ExternalServiceError
from ...core.structured_logger import get_logger
from ..deps import ExtractionServiceDep
from ..errors import DownstreamError, ValidationError
from ..schemas.common import ErrorResponse
from ..schemas.medical_ai import MedicalAIRequest

router = APIRouter(prefix="/api", tags=["medical-ai"])
logger = get_logger(__name__)


@router.post(
    "/medical-ai",
    response_model=Dict[str, Any],
    responses={
        422: {"model": ErrorResponse, "description": "Empty transcript"},
        502: {"model": ErrorResponse, "description": "Extraction model failed"},
        503: {"model": ErrorResponse, "description": "No AI provider configured"},
    },
)
async def medical_ai(request: MedicalAIRequest, extraction_service: ExtractionServiceDep):
    use_case = ExtractMedicalDataUseCase(extraction_service)
    try:
        return await use_case.execute(request.transcript, request.form_type)
    except ValueError as e:
        raise ValidationError(str(e), {"field": "transcript"}) from e
    except ExternalServiceError as e:
        logger.error("Extraction failed", form_type=request.form_type, error=e.message)
        raise DownstreamError("AI processing failed", {"form_type": request.form_type}) from e
