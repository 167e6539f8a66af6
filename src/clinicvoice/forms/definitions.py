"""
Form definitions for the four visit forms and patient registration.

A definition ties a form to its visit slot and extraction tag, gives the
initial field layout (dynamic lists seeded with one blank row), the
mapping from extraction keys to form paths, and the rules used to clean
the form up for submission.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from ..domain.entities.visit import FormSlot, has_content
from ..domain.enums.forms import ExtractionFormType, FormSlotKey, FormStatus
from .populator import DerivedField, FormPopulator
from .state import FormState


@dataclass(frozen=True)
class FieldExtraction:
    """A single field filled from an extraction run with another form type's prompt."""

    form_type: ExtractionFormType
    derived: DerivedField


@dataclass(frozen=True)
class FormDefinition:
    name: str
    slot: Optional[FormSlotKey]
    extraction_tag: ExtractionFormType
    initial: Mapping[str, Any]
    key_map: Mapping[str, str] = field(default_factory=dict)
    comma_split_keys: FrozenSet[str] = frozenset()
    derived: Tuple[DerivedField, ...] = ()
    field_extractions: Mapping[str, FieldExtraction] = field(default_factory=dict)
    # Table name -> column that must be filled for a row to be submitted;
    # None keeps any row with at least one filled column.
    table_key_columns: Mapping[str, Optional[str]] = field(default_factory=dict)

    @property
    def flat_lists(self) -> FrozenSet[str]:
        return frozenset(
            name
            for name, value in self.initial.items()
            if isinstance(value, list) and name not in self.table_key_columns
        )

    def new_state(self, saved: Optional[Mapping[str, Any]] = None) -> FormState:
        return FormState(self.merge_saved(saved) if saved else self.initial)

    def merge_saved(self, saved: Mapping[str, Any]) -> Dict[str, Any]:
        """Overlay saved slot data on the initial layout; empty lists get their blank row back."""
        merged = _deep_merge(copy.deepcopy(dict(self.initial)), saved)
        for name, value in self.initial.items():
            if isinstance(value, list) and not merged.get(name):
                merged[name] = copy.deepcopy(value)
        return merged

    def populator(self) -> FormPopulator:
        return FormPopulator(self.key_map, self.comma_split_keys, self.derived)

    def build_submission(self, form: FormState) -> Dict[str, Any]:
        """Snapshot of the form without blank list entries or blank table rows."""
        data = form.snapshot()
        for name in self.flat_lists:
            rows = data.get(name)
            if isinstance(rows, list):
                data[name] = [r.strip() if isinstance(r, str) else r for r in rows if has_content(r)]
        for name, key_column in self.table_key_columns.items():
            rows = data.get(name)
            if not isinstance(rows, list):
                continue
            if key_column is None:
                data[name] = [r for r in rows if has_content(r)]
            else:
                data[name] = [r for r in rows if isinstance(r, dict) and has_content(r.get(key_column))]
        return data

    def display_status(self, slot: Optional[FormSlot], form: Optional[FormState] = None) -> FormStatus:
        """Status badge: Completed from the server, In Progress inferred from the draft."""
        draft = self._typed_values(form) if form is not None else None
        return (slot or FormSlot()).display_status(draft)

    def _typed_values(self, form: FormState) -> Dict[str, Any]:
        # Seed rows and preset values are not the clinician's input
        data = form.snapshot()
        return {k: v for k, v in data.items() if v != self.initial.get(k)}


def _deep_merge(base: Dict[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


_SURGERY_ROW = {"year": "", "procedure": "", "complications": ""}
_FAMILY_ROW = {"condition": "", "relationship": ""}
_DISCHARGE_MEDICATION_ROW = {"medication": "", "dosage": "", "amount": "", "frequency": "", "endDate": ""}


MEDICAL_HISTORY = FormDefinition(
    name="Medical History",
    slot=FormSlotKey.MEDICAL_HISTORY,
    extraction_tag=ExtractionFormType.MEDICAL_HISTORY,
    initial={
        "chiefComplaint": "",
        "historyOfPresentIllness": "",
        "pastMedicalHistory": "",
        "presentIllness": {"onset": "", "duration": "", "progression": ""},
        "socialHistory": {"tobacco": "", "alcohol": "", "occupation": ""},
        "allergies": [""],
        "medications": [""],
        "medicalConditions": [""],
        "surgeries": [dict(_SURGERY_ROW)],
        "familyHistory": [dict(_FAMILY_ROW)],
    },
    key_map={
        "chief_complaint": "chiefComplaint",
        "history_of_present_illness": "historyOfPresentIllness",
        "past_medical_history": "pastMedicalHistory",
        "allergies": "allergies",
        "current_medications": "medications",
    },
    comma_split_keys=frozenset({"allergies", "current_medications"}),
    table_key_columns={"surgeries": "procedure", "familyHistory": "condition"},
)

CLINICAL_EXAMINATION = FormDefinition(
    name="Clinical Examination",
    slot=FormSlotKey.CLINICAL_EXAMINATION,
    extraction_tag=ExtractionFormType.CLINICAL_EXAMINATION,
    initial={
        "vitalSigns": {
            "bloodPressure": "",
            "heartRate": "",
            "respiratoryRate": "",
            "temperature": "",
            "oxygenSaturation": "",
            "height": "",
            "weight": "",
            "bmi": "",
        },
        "generalAppearance": {"consciousness": "", "distress": "", "notes": ""},
        "systemicExamination": {},
        "assessment": "",
        "plan": "",
    },
    key_map={
        "general_examination": "generalAppearance.notes",
        "vital_signs": "vitalSigns",
        "systemic_examination": "systemicExamination",
    },
    field_extractions={
        "assessment": FieldExtraction(
            ExtractionFormType.DIAGNOSIS_TREATMENT,
            DerivedField("assessment", (("diagnosis", ""),)),
        ),
        "plan": FieldExtraction(
            ExtractionFormType.DIAGNOSIS_TREATMENT,
            DerivedField(
                "plan",
                (("treatment_given", ""), ("medications_prescribed", ""), ("advice_and_follow_up", "")),
            ),
        ),
    },
)

DIAGNOSIS_TREATMENT = FormDefinition(
    name="Diagnosis & Treatment",
    slot=FormSlotKey.DIAGNOSIS_TREATMENT,
    extraction_tag=ExtractionFormType.DIAGNOSIS_TREATMENT,
    initial={
        key: ""
        for key in (
            "primaryDiagnosis",
            "diagnosisCode",
            "severity",
            "differentialDiagnoses",
            "diagnosticPlan",
            "treatmentPlan",
            "treatmentSetting",
            "treatmentUrgency",
            "medications",
            "procedures",
            "therapyInterventions",
            "followUpPlan",
            "followupTimeline",
            "followupType",
            "followupInstructions",
            "redFlagSymptoms",
            "patientEducation",
            "lifestyleModifications",
            "assessmentSummary",
            "treatmentRationale",
        )
    },
    key_map={
        "diagnosis": "primaryDiagnosis",
        "treatment_given": "treatmentPlan",
        "medications_prescribed": "medications",
        "advice_and_follow_up": "followUpPlan",
    },
)

DISCHARGE_FORM = FormDefinition(
    name="Discharge Form",
    slot=FormSlotKey.DISCHARGE_FORM,
    extraction_tag=ExtractionFormType.DISCHARGE_FORM,
    initial={
        "patientName": "",
        "reasonForAdmission": "",
        "diagnosisAtDischarge": "",
        "treatmentSummary": "",
        "furtherTreatmentPlan": "",
        "patientContactInfo": {"address": "", "phone": "", "email": ""},
        "physicianApproval": "",
        "signature": "",
        "medications": [dict(_DISCHARGE_MEDICATION_ROW)],
    },
    key_map={
        "admission_reason": "reasonForAdmission",
        "final_diagnosis": "diagnosisAtDischarge",
        "treatment_summary": "treatmentSummary",
    },
    derived=(
        DerivedField(
            "furtherTreatmentPlan",
            (("discharge_medications", "Medications: "), ("follow_up_instructions", "Follow-up: ")),
        ),
    ),
    table_key_columns={"medications": None},
)

PATIENT_REGISTRATION = FormDefinition(
    name="Patient Registration",
    slot=None,
    extraction_tag=ExtractionFormType.PATIENT_REGISTRATION,
    initial={
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "dateOfBirth": "",
        "gender": "",
        "address": "",
    },
)

VISIT_FORMS: Dict[FormSlotKey, FormDefinition] = {
    d.slot: d for d in (MEDICAL_HISTORY, CLINICAL_EXAMINATION, DIAGNOSIS_TREATMENT, DISCHARGE_FORM)
}


def definition_for_slot(slot: str) -> FormDefinition:
    key = FormSlotKey.parse(slot)
    if key is None:
        raise KeyError(f"Unknown form slot: {slot}")
    return VISIT_FORMS[key]
