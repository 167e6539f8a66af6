"""Form state, focus routing, extraction results and form definitions."""

from .definitions import (
    CLINICAL_EXAMINATION,
    DIAGNOSIS_TREATMENT,
    DISCHARGE_FORM,
    MEDICAL_HISTORY,
    PATIENT_REGISTRATION,
    VISIT_FORMS,
    FieldExtraction,
    FormDefinition,
    definition_for_slot,
)
from .extraction_schema import ExtractionResult, parse_extraction
from .focus import FocusRouter, FocusTarget, FormField, ListItem, TableCell
from .populator import DerivedField, FormPopulator, split_comma_list
from .state import FormState

__all__ = [
    "CLINICAL_EXAMINATION",
    "DIAGNOSIS_TREATMENT",
    "DISCHARGE_FORM",
    "DerivedField",
    "ExtractionResult",
    "FieldExtraction",
    "FocusRouter",
    "FocusTarget",
    "FormDefinition",
    "FormField",
    "FormPopulator",
    "FormState",
    "ListItem",
    "MEDICAL_HISTORY",
    "PATIENT_REGISTRATION",
    "TableCell",
    "VISIT_FORMS",
    "definition_for_slot",
    "parse_extraction",
    "split_comma_list",
]
