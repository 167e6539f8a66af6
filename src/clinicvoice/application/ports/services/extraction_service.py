"""
Structured extraction service interface: dictation → form fields.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class MedicalExtractionService(ABC):
    """Abstract service turning clinician dictation into structured JSON."""

    @abstractmethod
    async def extract(self, transcript: str, form_type: str) -> Dict[str, Any]:
        """
        Structure a dictation for a given form type.

        Args:
            transcript: Finalized, trimmed dictation text
            form_type: Extraction tag (e.g. "medical-history"); unknown tags
                get a best-effort generic extraction

        Returns:
            JSON object whose keys depend on the form type
        """
        pass
