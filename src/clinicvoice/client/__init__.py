"""HTTP clients for the ClinicVoice API and the visit form workflow."""

from .extraction_client import ExtractionClient
from .form_workflow import FormSaveFailed, VisitFormWorkflow
from .visits_client import FormSlotView, VisitsApiError, VisitsClient, VisitView

__all__ = [
    "ExtractionClient",
    "FormSaveFailed",
    "FormSlotView",
    "VisitFormWorkflow",
    "VisitView",
    "VisitsApiError",
    "VisitsClient",
]
