"""
Visit form workflow: one form page bound to the patient's current visit.

Loading resolves the current visit and fills the form from its slot;
dictation fills the form through the focus router (Raw mode) or the
populator (AI mode); saving writes the cleaned-up form into the slot,
creating a visit first when the patient has none.
"""

from typing import Any, Dict, List, Optional

from ..core.config import VoiceSettings, get_settings
from ..core.exceptions import ClinicVoiceException
from ..core.structured_logger import get_logger
from ..domain.enums.forms import FormStatus
from ..domain.entities.visit import FormSlot
from ..forms.definitions import FormDefinition
from ..forms.extraction_schema import ExtractionResult
from ..forms.focus import FocusRouter
from ..forms.state import FormState
from ..voice.capture_session import CaptureMode, CaptureSession
from ..voice.engine import RecognitionEngine
from ..voice.notifications import Notification, NotificationLevel, Notifier, log_notification
from .extraction_client import ExtractionClient
from .visits_client import FormSlotView, VisitsApiError, VisitsClient, VisitView

logger = get_logger(__name__)


class FormSaveFailed(ClinicVoiceException):
    """Saving the form failed; the form's values are untouched."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message, "FORM_SAVE_FAILED", {"status": status})


class VisitFormWorkflow:
    def __init__(
        self,
        patient_id: str,
        definition: FormDefinition,
        visits_client: VisitsClient,
        extraction_client: Optional[ExtractionClient] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        if definition.slot is None:
            raise ValueError(f"{definition.name} is not stored on a visit")
        self.patient_id = patient_id
        self.definition = definition
        self.form: FormState = definition.new_state()
        self.focus = FocusRouter(self.form)
        self.visit: Optional[VisitView] = None
        self._visits_client = visits_client
        self._extraction_client = extraction_client
        self._notify = notifier or log_notification
        self._populator = definition.populator()

    @property
    def slot_key(self) -> str:
        return self.definition.slot.value

    async def load(self) -> Optional[VisitView]:
        """Resolve the current visit and load this form's saved data, if any."""
        self.visit = await self._visits_client.resolve_current_visit(self.patient_id)
        if self.visit is not None:
            saved = self.visit.slot(self.slot_key).data
            if saved:
                self.form.replace(self.definition.merge_saved(saved))
            logger.info(
                "Loaded visit form",
                patient_id=self.patient_id,
                visit_id=self.visit.visit_id,
                form=self.slot_key,
                has_saved_data=bool(saved),
            )
        return self.visit

    def status(self) -> FormStatus:
        slot = None
        if self.visit is not None:
            view = self.visit.slot(self.slot_key)
            slot = FormSlot(status=FormStatus(view.status), data=view.data, last_updated=view.last_updated)
        return self.definition.display_status(slot, self.form)

    def apply_extraction(self, result: ExtractionResult) -> List[str]:
        return self._populator.populate(self.form, result)

    def apply_field_extraction(self, field_path: str, result: ExtractionResult) -> bool:
        binding = self.definition.field_extractions[field_path]
        return self._populator.populate_derived(self.form, result, binding.derived)

    def capture_session(
        self,
        engine: Optional[RecognitionEngine],
        mode: CaptureMode = CaptureMode.AI_EXTRACT,
        *,
        field_path: Optional[str] = None,
        settings: Optional[VoiceSettings] = None,
        **kwargs: Any,
    ) -> CaptureSession:
        """A capture session wired into this form.

        Raw sessions write into the focused field. AI sessions extract with
        this form's prompt, or with the prompt bound to ``field_path`` when
        one is given.
        """
        settings = settings or get_settings().voice
        if mode == CaptureMode.RAW:
            return CaptureSession.from_settings(
                engine,
                settings,
                mode=mode,
                on_transcript=self.focus.route_text,
                notifier=self._notify,
                **kwargs,
            )
        if self._extraction_client is None:
            raise ValueError("AI capture needs an extraction client")
        if field_path is None:
            form_type = self.definition.extraction_tag.value
            on_extraction = self.apply_extraction
        else:
            form_type = self.definition.field_extractions[field_path].form_type.value

            def on_extraction(result: ExtractionResult) -> None:
                self.apply_field_extraction(field_path, result)

        return CaptureSession.from_settings(
            engine,
            settings,
            mode=mode,
            form_type=form_type,
            extractor=self._extraction_client,
            on_extraction=on_extraction,
            notifier=self._notify,
            **kwargs,
        )

    async def save(self) -> FormSlotView:
        """Write the form into its slot; raises FormSaveFailed and keeps the form as is."""
        submission: Dict[str, Any] = self.definition.build_submission(self.form)
        created = False
        try:
            if self.visit is None:
                self.visit = await self._visits_client.create_visit(
                    self.patient_id, f"{self.definition.name} visit"
                )
                created = True
            slot = await self._visits_client.save_form(self.visit.visit_id, self.slot_key, submission)
        except VisitsApiError as e:
            message = e.message if e.status else f"Failed to save {self.definition.name.lower()}"
            logger.error("Form save failed", form=self.slot_key, patient_id=self.patient_id, status=e.status)
            self._notify(Notification(NotificationLevel.ERROR, "FORM_SAVE_FAILED", message))
            raise FormSaveFailed(message, e.status) from e

        self.visit.forms[self.slot_key] = slot
        if created:
            message = f"New visit created and {self.definition.name.lower()} saved"
        else:
            message = f"{self.definition.name} saved successfully"
        self._notify(Notification(NotificationLevel.SUCCESS, "FORM_SAVED", message))
        return slot
