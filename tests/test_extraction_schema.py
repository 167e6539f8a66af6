"""
Typed extraction result tests.
"""

import pytest

from clinicvoice.forms.extraction_schema import (
    ClinicalExaminationResult,
    DischargeFormResult,
    GenericExtractionResult,
    MedicalHistoryResult,
    expand_dotted_keys,
    parse_extraction,
    result_model_for,
)
from clinicvoice.voice.errors import ExtractionFailed


@pytest.mark.parametrize(
    "form_type, model",
    [
        ("medical-history", MedicalHistoryResult),
        ("clinical-examination", ClinicalExaminationResult),
        ("discharge-form", DischargeFormResult),
        ("progress-note", GenericExtractionResult),
    ],
)
def test_result_model_per_form_type(form_type, model):
    assert result_model_for(form_type) is model


def test_unknown_keys_ignored_and_nulls_dropped():
    result = parse_extraction(
        "medical-history",
        {"chief_complaint": "Fever", "past_medical_history": None, "mood": "anxious"},
    )

    assert result.to_payload() == {"chief_complaint": "Fever"}


def test_scalars_are_coerced_to_text():
    result = parse_extraction("diagnosis-treatment", {"diagnosis": ["Flu", "Dehydration"], "treatment_given": 5})

    assert result.to_payload() == {"diagnosis": "Flu, Dehydration", "treatment_given": "5"}


def test_allergy_list_kept_as_list():
    result = parse_extraction("medical-history", {"allergies": ["penicillin", "", None, " peanuts "]})

    assert result.to_payload() == {"allergies": ["penicillin", "peanuts"]}


def test_dotted_keys_are_expanded():
    result = parse_extraction(
        "clinical-examination",
        {"vital_signs.bloodPressure": "120/80", "vital_signs": {"heartRate": "72"}},
    )

    assert result.to_payload() == {"vital_signs": {"bloodPressure": "120/80", "heartRate": "72"}}


def test_non_object_vitals_are_dropped():
    result = parse_extraction("clinical-examination", {"vital_signs": "stable", "general_examination": "Well"})

    assert result.to_payload() == {"general_examination": "Well"}


def test_generic_result_keeps_every_key():
    result = parse_extraction("progress-note", {"summary": "Improving", "extra": None})

    assert result.to_payload() == {"summary": "Improving"}


@pytest.mark.parametrize("payload", [["not", "an", "object"], "text", None])
def test_non_object_body_is_extraction_failure(payload):
    with pytest.raises(ExtractionFailed) as exc_info:
        parse_extraction("medical-history", payload)

    assert exc_info.value.form_type == "medical-history"
    assert exc_info.value.user_message == "AI processing failed"


def test_expand_dotted_keys():
    assert expand_dotted_keys({"a.b": 1, "a": {"c": 2}, "d": 3}) == {"a": {"b": 1, "c": 2}, "d": 3}
