"""
Form definition tests: initial layout, loading saved data, submission
clean-up and the display status badge.
"""

import pytest

from clinicvoice.domain.entities.visit import FormSlot
from clinicvoice.domain.enums.forms import FormStatus
from clinicvoice.forms.definitions import (
    CLINICAL_EXAMINATION,
    DISCHARGE_FORM,
    MEDICAL_HISTORY,
    VISIT_FORMS,
    definition_for_slot,
)


def test_visit_forms_cover_every_slot():
    assert [d.slot.value for d in VISIT_FORMS.values()] == [
        "medicalHistory",
        "clinicalExamination",
        "diagnosisTreatment",
        "dischargeForm",
    ]
    assert definition_for_slot("dischargeForm") is DISCHARGE_FORM
    with pytest.raises(KeyError):
        definition_for_slot("discharge-form")


def test_dynamic_lists_start_with_one_blank_row():
    form = MEDICAL_HISTORY.new_state()

    assert form.get("allergies") == [""]
    assert form.get("surgeries") == [{"year": "", "procedure": "", "complications": ""}]


def test_saved_data_overlays_initial_layout():
    merged = MEDICAL_HISTORY.merge_saved(
        {"chiefComplaint": "Fever", "presentIllness": {"onset": "Monday"}, "allergies": []}
    )

    assert merged["chiefComplaint"] == "Fever"
    assert merged["presentIllness"] == {"onset": "Monday", "duration": "", "progression": ""}
    # Empty lists get their blank row back so the UI has something to focus
    assert merged["allergies"] == [""]
    assert MEDICAL_HISTORY.initial["chiefComplaint"] == ""


def test_submission_drops_blank_list_entries_and_rows():
    form = MEDICAL_HISTORY.new_state()
    form.set_list_item("allergies", 0, " penicillin ")
    form.add_row("allergies")
    form.set_table_cell("surgeries", 0, "year", "2019")
    form.add_row("surgeries")
    form.set_table_cell("surgeries", 1, "procedure", "Appendectomy")

    submission = MEDICAL_HISTORY.build_submission(form)

    assert submission["allergies"] == ["penicillin"]
    assert submission["surgeries"] == [{"year": "", "procedure": "Appendectomy", "complications": ""}]
    assert submission["familyHistory"] == []


def test_discharge_medication_rows_kept_when_any_column_filled():
    form = DISCHARGE_FORM.new_state()
    form.set_table_cell("medications", 0, "dosage", "500 mg")
    form.add_row("medications")

    submission = DISCHARGE_FORM.build_submission(form)

    assert len(submission["medications"]) == 1
    assert submission["medications"][0]["dosage"] == "500 mg"


def test_display_status_uses_draft_content_only():
    form = CLINICAL_EXAMINATION.new_state()

    assert CLINICAL_EXAMINATION.display_status(None, form) == FormStatus.NOT_STARTED

    form.set("vitalSigns.heartRate", "72")
    assert CLINICAL_EXAMINATION.display_status(None, form) == FormStatus.IN_PROGRESS

    completed = FormSlot(status=FormStatus.COMPLETED, data={"plan": "Rest"})
    assert CLINICAL_EXAMINATION.display_status(completed, form) == FormStatus.COMPLETED


def test_field_extractions_for_assessment_and_plan():
    plan = CLINICAL_EXAMINATION.field_extractions["plan"]

    assert plan.form_type.value == "diagnosis-treatment"
    assert plan.derived.compute({"treatment_given": "Rest", "medications_prescribed": "Paracetamol"}) == (
        "Rest\nParacetamol"
    )
