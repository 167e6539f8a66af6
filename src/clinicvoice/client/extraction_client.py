"""
HTTP client for the structured-extraction endpoint.
"""

import asyncio
from typing import Optional

import aiohttp

from ..core.config import ApiClientSettings, get_settings
from ..core.structured_logger import get_logger
from ..forms.extraction_schema import ExtractionResult, parse_extraction
from ..voice.errors import ExtractionFailed

logger = get_logger(__name__)


class ExtractionClient:
    """POSTs dictation to ``/api/medical-ai`` and returns a typed result.

    Every failure (network, non-2xx, malformed body) is an ExtractionFailed;
    nothing is retried here.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 60.0) -> None:
        self._url = f"{base_url.rstrip('/')}/api/medical-ai"
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Optional[ApiClientSettings] = None) -> "ExtractionClient":
        settings = settings or get_settings().api_client
        return cls(settings.base_url, settings.timeout_seconds)

    async def extract(self, transcript: str, form_type: str) -> ExtractionResult:
        text = (transcript or "").strip()
        if not text:
            raise ValueError("Transcript cannot be empty")

        logger.info("Sending dictation for extraction", form_type=form_type, transcript_chars=len(text))
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self._url, json={"transcript": text, "formType": form_type}) as response:
                    if not 200 <= response.status < 300:
                        body = await response.text()
                        logger.error(
                            "Extraction request rejected",
                            form_type=form_type,
                            status=response.status,
                            body=body[:200],
                        )
                        raise ExtractionFailed(f"HTTP {response.status}", form_type=form_type, status=response.status)
                    try:
                        payload = await response.json(content_type=None)
                    except ValueError as e:
                        raise ExtractionFailed("response body is not valid JSON", form_type=form_type) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Extraction request failed", form_type=form_type, error=str(e))
            raise ExtractionFailed(f"network error: {type(e).__name__}", form_type=form_type) from e

        return parse_extraction(form_type, payload)
