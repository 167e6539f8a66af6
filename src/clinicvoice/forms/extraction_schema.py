"""
Typed extraction results, one model per extraction form type.

Each model lists the keys the extraction prompt for its form type asks
for. Unknown keys are ignored and ``null`` values dropped, so populating
a form from a result never blanks a field. Unknown form types fall back
to ``GenericExtractionResult``, which keeps every key.
"""

from typing import Annotated, Any, ClassVar, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError, field_validator

from ..domain.enums.forms import ExtractionFormType
from ..voice.errors import ExtractionFailed


def _to_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return ", ".join(str(v) for v in value if v not in (None, ""))
    if isinstance(value, dict):
        return "; ".join(f"{k}: {v}" for k, v in value.items() if v not in (None, ""))
    return str(value)


def _to_text_or_list(value: Any) -> Any:
    if isinstance(value, list):
        return [str(v).strip() for v in value if v not in (None, "")]
    return _to_text(value)


Text = Annotated[Optional[str], BeforeValidator(_to_text)]
TextOrList = Annotated[Optional[Union[List[str], str]], BeforeValidator(_to_text_or_list)]


def expand_dotted_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """``{"a.b": 1}`` -> ``{"a": {"b": 1}}``, recursively; explicit nesting wins on conflict."""
    expanded: Dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, Mapping):
            value = expand_dotted_keys(value)
        parts = [p for p in str(key).split(".") if p]
        if not parts:
            continue
        node = expanded
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        leaf = parts[-1]
        if isinstance(value, dict) and isinstance(node.get(leaf), dict):
            node[leaf].update(value)
        else:
            node[leaf] = value
    return expanded


class ExtractionResult(BaseModel):
    """Base class for typed extraction results."""

    model_config = ConfigDict(extra="ignore")

    form_type: ClassVar[Optional[ExtractionFormType]] = None

    def to_payload(self) -> Dict[str, Any]:
        """The result as a plain dict without null values, ready for the populator."""
        return self.model_dump(exclude_none=True)


class PatientRegistrationResult(ExtractionResult):
    form_type: ClassVar[Optional[ExtractionFormType]] = ExtractionFormType.PATIENT_REGISTRATION

    firstName: Text = None
    lastName: Text = None
    email: Text = None
    phone: Text = None
    dateOfBirth: Text = None
    gender: Text = None
    address: Text = None


class MedicalHistoryResult(ExtractionResult):
    form_type: ClassVar[Optional[ExtractionFormType]] = ExtractionFormType.MEDICAL_HISTORY

    chief_complaint: Text = None
    history_of_present_illness: Text = None
    past_medical_history: Text = None
    allergies: TextOrList = None
    current_medications: TextOrList = None


class VitalSignsExtract(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bloodPressure: Text = None
    heartRate: Text = None
    respiratoryRate: Text = None
    temperature: Text = None
    oxygenSaturation: Text = None
    height: Text = None
    weight: Text = None
    bmi: Text = None


class ClinicalExaminationResult(ExtractionResult):
    form_type: ClassVar[Optional[ExtractionFormType]] = ExtractionFormType.CLINICAL_EXAMINATION

    general_examination: Text = None
    vital_signs: Optional[VitalSignsExtract] = None
    systemic_examination: Optional[Dict[str, Text]] = None

    @field_validator("vital_signs", "systemic_examination", mode="before")
    @classmethod
    def drop_non_objects(cls, v: Any) -> Any:
        # Only per-key objects can be spread over the form's nested fields
        return v if isinstance(v, Mapping) else None


class DiagnosisTreatmentResult(ExtractionResult):
    form_type: ClassVar[Optional[ExtractionFormType]] = ExtractionFormType.DIAGNOSIS_TREATMENT

    diagnosis: Text = None
    treatment_given: Text = None
    medications_prescribed: Text = None
    advice_and_follow_up: Text = None


class DischargeFormResult(ExtractionResult):
    form_type: ClassVar[Optional[ExtractionFormType]] = ExtractionFormType.DISCHARGE_FORM

    admission_reason: Text = None
    final_diagnosis: Text = None
    treatment_summary: Text = None
    discharge_medications: Text = None
    follow_up_instructions: Text = None


class GenericExtractionResult(ExtractionResult):
    """Result for form types without a dedicated model: every key is kept."""

    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> Dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if v is not None}


RESULT_MODELS: Dict[ExtractionFormType, Type[ExtractionResult]] = {
    model.form_type: model
    for model in (
        PatientRegistrationResult,
        MedicalHistoryResult,
        ClinicalExaminationResult,
        DiagnosisTreatmentResult,
        DischargeFormResult,
    )
}


def result_model_for(form_type: str) -> Type[ExtractionResult]:
    tag = ExtractionFormType.parse(form_type)
    if tag is None:
        return GenericExtractionResult
    return RESULT_MODELS[tag]


def parse_extraction(form_type: str, payload: Any) -> ExtractionResult:
    """Validate a decoded response body into the result model for ``form_type``.

    Raises ExtractionFailed when the body is not a JSON object or does not
    fit the model.
    """
    if not isinstance(payload, Mapping):
        raise ExtractionFailed("response body is not a JSON object", form_type=form_type)
    model = result_model_for(form_type)
    try:
        return model.model_validate(expand_dotted_keys(payload))
    except ValidationError as e:
        raise ExtractionFailed(
            f"response does not match {model.__name__}: {e.error_count()} error(s)",
            form_type=form_type,
        ) from e
