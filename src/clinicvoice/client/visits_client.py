"""
HTTP client for the visit endpoints.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.config import ApiClientSettings, get_settings
from ..core.exceptions import ClinicVoiceException
from ..domain.entities.visit import select_current_visit

logger = logging.getLogger(__name__)


class VisitsApiError(ClinicVoiceException):
    """A visit endpoint failed or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.status = status
        super().__init__(message, "VISITS_API_ERROR", details)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class FormSlotView(_CamelModel):
    status: str = "Not Started"
    data: Optional[Dict[str, Any]] = None
    last_updated: Optional[datetime] = None


class VisitView(_CamelModel):
    """A visit as returned by the API."""

    visit_id: str
    patient_id: str
    visit_number: int
    status: str
    chief_complaint: str = "Visit"
    created_at: datetime
    forms: Dict[str, FormSlotView] = Field(default_factory=dict)

    def slot(self, form_type: str) -> FormSlotView:
        return self.forms.get(form_type) or FormSlotView()


class VisitsClient:
    def __init__(self, base_url: str, timeout_seconds: float = 60.0) -> None:
        self._base_url = f"{base_url.rstrip('/')}/api/visits"
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Optional[ApiClientSettings] = None) -> "VisitsClient":
        settings = settings or get_settings().api_client
        return cls(settings.base_url, settings.timeout_seconds)

    async def list_patient_visits(self, patient_id: str) -> List[VisitView]:
        data = await self._request("GET", f"/patient/{patient_id}")
        return [VisitView.model_validate(v) for v in data or []]

    async def resolve_current_visit(self, patient_id: str) -> Optional[VisitView]:
        """Newest Active visit, else newest of any status, else None. Never cached."""
        return select_current_visit(await self.list_patient_visits(patient_id))

    async def create_visit(self, patient_id: str, chief_complaint: Optional[str] = None) -> VisitView:
        data = await self._request("POST", f"/create/{patient_id}", {"chiefComplaint": chief_complaint})
        return VisitView.model_validate(data)

    async def save_form(self, visit_id: str, form_type: str, data: Dict[str, Any]) -> FormSlotView:
        slot = await self._request("PUT", f"/{visit_id}/forms/{form_type}", {"data": data})
        return FormSlotView.model_validate(slot)

    async def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(method, url, json=body) as response:
                    payload = await response.json(content_type=None)
                    if not 200 <= response.status < 300:
                        message = payload.get("message") if isinstance(payload, dict) else None
                        logger.warning(f"{method} {url} failed: {response.status} {message}")
                        raise VisitsApiError(
                            message or f"HTTP {response.status}",
                            response.status,
                            payload if isinstance(payload, dict) else None,
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"{method} {url} failed: {type(e).__name__}: {e}")
            raise VisitsApiError(f"Request failed: {type(e).__name__}") from e
        return payload.get("data") if isinstance(payload, dict) else payload
