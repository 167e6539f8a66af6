"""
OpenAI-based structured extraction service implementation.
"""

import json
import logging
from typing import Any, Dict, Optional

from clinicvoice.application.ports.services.extraction_service import MedicalExtractionService
from clinicvoice.core.ai_client import AIClient, get_ai_client
from clinicvoice.core.config import Settings, get_settings
from clinicvoice.core.exceptions import OpenAIError

from .prompt_templates import build_extraction_messages

logger = logging.getLogger(__name__)


class OpenAIMedicalExtractionService(MedicalExtractionService):
    """OpenAI implementation of MedicalExtractionService."""

    def __init__(self, client: Optional[AIClient] = None, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._client = client or get_ai_client()

    async def extract(self, transcript: str, form_type: str) -> Dict[str, Any]:
        messages = build_extraction_messages(transcript, form_type)
        try:
            response = await self._client.chat(
                messages,
                temperature=self._settings.openai.temperature,
                max_tokens=self._settings.openai.max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"Extraction call failed for form_type={form_type}: {e}")
            raise OpenAIError(str(e), {"form_type": form_type}) from e

        content = (response.choices[0].message.content or "").strip()
        return self._parse_json_object(content, form_type)

    @staticmethod
    def _parse_json_object(content: str, form_type: str) -> Dict[str, Any]:
        """Parse the model output, tolerating a fenced code block around the JSON."""
        if content.startswith("```"):
            content = content.strip("`")
            if content.lower().startswith("json"):
                content = content[4:]
            content = content.strip()
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Model returned non-JSON content for form_type={form_type}")
            raise OpenAIError("Model response was not valid JSON", {"form_type": form_type}) from e
        if not isinstance(data, dict):
            raise OpenAIError("Model response was not a JSON object", {"form_type": form_type})
        return data
