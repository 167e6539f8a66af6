"""
Form slot, form status and visit status enums.
"""

from enum import Enum
from typing import Optional


class VisitStatus(str, Enum):
    """Lifecycle status of a visit."""
    ACTIVE = "Active"
    DISCHARGED = "Discharged"


class FormStatus(str, Enum):
    """Per-slot form status."""
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"  # Display-only; never persisted by the server
    COMPLETED = "Completed"


class FormSlotKey(str, Enum):
    """The four form slots every visit carries."""
    MEDICAL_HISTORY = "medicalHistory"
    CLINICAL_EXAMINATION = "clinicalExamination"
    DIAGNOSIS_TREATMENT = "diagnosisTreatment"
    DISCHARGE_FORM = "dischargeForm"

    @classmethod
    def parse(cls, value: str) -> Optional["FormSlotKey"]:
        """Return the slot for ``value`` or None when it is not a slot key."""
        try:
            return cls(value)
        except ValueError:
            return None


class ExtractionFormType(str, Enum):
    """Form-type tags understood by the structured-extraction endpoint."""
    PATIENT_REGISTRATION = "patient-registration"
    MEDICAL_HISTORY = "medical-history"
    CLINICAL_EXAMINATION = "clinical-examination"
    DIAGNOSIS_TREATMENT = "diagnosis-treatment"
    DISCHARGE_FORM = "discharge-form"

    @classmethod
    def parse(cls, value: str) -> Optional["ExtractionFormType"]:
        try:
            return cls(value)
        except ValueError:
            return None
