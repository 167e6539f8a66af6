"""Visit domain entity representing a single clinical encounter.

A visit holds exactly four form slots (medical history, clinical
examination, diagnosis/treatment, discharge). Slots are independent and
last-write-wins: saving a form replaces the slot's data wholesale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Protocol, Sequence, Tuple, TypeVar

from ..enums.forms import FormSlotKey, FormStatus, VisitStatus
from ..errors import InvalidFormTypeError
from ..value_objects.visit_id import VisitId


def has_content(value: Any) -> bool:
    """True when ``value`` holds at least one non-blank leaf."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, dict):
        return any(has_content(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(has_content(v) for v in value)
    return True


@dataclass
class FormSlot:
    """Per-form storage unit on a visit."""

    status: FormStatus = FormStatus.NOT_STARTED
    data: Optional[Dict[str, Any]] = None
    last_updated: Optional[datetime] = None

    def has_content(self) -> bool:
        return has_content(self.data)

    def save(self, data: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> None:
        """Replace the slot's data and mark it completed."""
        self.data = data
        self.status = FormStatus.COMPLETED
        self.last_updated = now or datetime.utcnow()

    def display_status(self, draft: Optional[Dict[str, Any]] = None) -> FormStatus:
        """Status to show in the UI.

        The server only ever persists Completed; In Progress is inferred from
        unsaved draft content (or stored content without a completed flag).
        """
        if self.status == FormStatus.COMPLETED:
            return FormStatus.COMPLETED
        if has_content(draft) or self.has_content():
            return FormStatus.IN_PROGRESS
        return FormStatus.NOT_STARTED


@dataclass
class VisitForms:
    """The fixed four-slot form map of a visit."""

    medical_history: FormSlot = field(default_factory=FormSlot)
    clinical_examination: FormSlot = field(default_factory=FormSlot)
    diagnosis_treatment: FormSlot = field(default_factory=FormSlot)
    discharge_form: FormSlot = field(default_factory=FormSlot)

    _ATTRS = {
        FormSlotKey.MEDICAL_HISTORY: "medical_history",
        FormSlotKey.CLINICAL_EXAMINATION: "clinical_examination",
        FormSlotKey.DIAGNOSIS_TREATMENT: "diagnosis_treatment",
        FormSlotKey.DISCHARGE_FORM: "discharge_form",
    }

    def get(self, key: FormSlotKey) -> FormSlot:
        return getattr(self, self._ATTRS[key])

    def items(self) -> Iterator[Tuple[FormSlotKey, FormSlot]]:
        for key in FormSlotKey:
            yield key, self.get(key)


@dataclass
class Visit:
    """Visit domain entity."""

    visit_id: VisitId
    patient_id: str
    visit_number: int
    doctor_id: Optional[str] = None
    chief_complaint: str = "Visit"
    status: VisitStatus = VisitStatus.ACTIVE
    admission_date: datetime = field(default_factory=datetime.utcnow)
    discharge_date: Optional[datetime] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    forms: VisitForms = field(default_factory=VisitForms)
    discharge_summary: Optional[Dict[str, Any]] = None
    discharge_summary_generated_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.visit_number < 1:
            raise ValueError("Visit number must be 1 or greater")

    @classmethod
    def create(
        cls,
        patient_id: str,
        visit_number: int,
        chief_complaint: Optional[str] = None,
        doctor_id: Optional[str] = None,
    ) -> "Visit":
        """Open a new active visit with all four slots not started."""
        return cls(
            visit_id=VisitId.generate(),
            patient_id=patient_id,
            visit_number=visit_number,
            doctor_id=doctor_id,
            chief_complaint=(chief_complaint or "").strip() or "Visit",
        )

    @property
    def is_active(self) -> bool:
        return self.status == VisitStatus.ACTIVE

    def slot(self, form_type: str) -> FormSlot:
        key = FormSlotKey.parse(form_type)
        if key is None:
            raise InvalidFormTypeError(form_type)
        return self.forms.get(key)

    def save_form(self, form_type: str, data: Optional[Dict[str, Any]]) -> FormSlot:
        """Upsert a slot's data; the slot becomes Completed."""
        slot = self.slot(form_type)
        now = datetime.utcnow()
        slot.save(data, now)
        self.updated_at = now
        return slot

    def discharge(self) -> None:
        """Mark the visit discharged."""
        now = datetime.utcnow()
        self.status = VisitStatus.DISCHARGED
        self.discharge_date = now
        self.updated_at = now

    def attach_discharge_summary(self, summary: Dict[str, Any]) -> None:
        now = datetime.utcnow()
        self.discharge_summary = summary
        self.discharge_summary_generated_at = now
        self.updated_at = now


class _VisitLike(Protocol):
    status: Any
    created_at: datetime


V = TypeVar("V", bound=_VisitLike)


def select_current_visit(visits: Sequence[V]) -> Optional[V]:
    """Pick the visit forms should write into.

    Prefers the most recently created Active visit, falls back to the most
    recently created visit of any status, and returns None when there are none.
    """
    if not visits:
        return None
    newest_first = sorted(visits, key=lambda v: v.created_at, reverse=True)
    for visit in newest_first:
        if VisitStatus(visit.status) == VisitStatus.ACTIVE:
            return visit
    return newest_first[0]
