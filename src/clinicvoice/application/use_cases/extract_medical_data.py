"""Extract Medical Data use case: structure a dictation for one form type."""

from typing import Any, Dict

from clinicvoice.application.ports.services.extraction_service import MedicalExtractionService
from clinicvoice.core.structured_logger import get_logger

logger = get_logger(__name__)


class ExtractMedicalDataUseCase:
    """Validate the dictation and delegate to the extraction service."""

    def __init__(self, extraction_service: MedicalExtractionService):
        self._extraction_service = extraction_service

    async def execute(self, transcript: str, form_type: str) -> Dict[str, Any]:
        text = (transcript or "").strip()
        if not text:
            raise ValueError("Transcript cannot be empty")

        logger.info(
            "Extracting structured form data",
            form_type=form_type,
            transcript_chars=len(text),
        )
        result = await self._extraction_service.extract(text, form_type)
        logger.info(
            "Extraction completed",
            form_type=form_type,
            keys=sorted(result.keys()),
        )
        return result
