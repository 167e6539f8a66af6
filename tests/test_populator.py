"""
Form populator tests.
"""

from clinicvoice.forms.definitions import CLINICAL_EXAMINATION, DISCHARGE_FORM, MEDICAL_HISTORY
from clinicvoice.forms.extraction_schema import parse_extraction
from clinicvoice.forms.populator import DerivedField, FormPopulator, split_comma_list
from clinicvoice.forms.state import FormState


def test_populate_is_idempotent():
    form = MEDICAL_HISTORY.new_state()
    populator = MEDICAL_HISTORY.populator()
    payload = {"chief_complaint": "Fever", "allergies": "penicillin, peanuts", "current_medications": ["aspirin"]}

    populator.populate(form, payload)
    once = form.snapshot()
    populator.populate(form, payload)

    assert form.snapshot() == once
    assert form.get("allergies") == ["penicillin", "peanuts"]
    assert form.get("medications") == ["aspirin"]


def test_dotted_and_nested_keys_produce_the_same_structure():
    dotted = FormState()
    nested = FormState()
    populator = FormPopulator()

    populator.populate(dotted, {"a.b.c": "x"})
    populator.populate(nested, {"a": {"b": {"c": "x"}}})

    assert dotted.snapshot() == nested.snapshot() == {"a": {"b": {"c": "x"}}}


def test_comma_split_trims_entries():
    form = MEDICAL_HISTORY.new_state()

    MEDICAL_HISTORY.populator().populate(form, {"allergies": " penicillin ,peanuts ,, "})

    assert form.get("allergies") == ["penicillin", "peanuts"]


def test_blank_and_missing_values_never_clear_fields():
    form = MEDICAL_HISTORY.new_state()
    form.set("chiefComplaint", "Typed by hand")
    form.set("pastMedicalHistory", "Asthma")

    written = MEDICAL_HISTORY.populator().populate(
        form, {"chief_complaint": "  ", "past_medical_history": None, "allergies": []}
    )

    assert written == []
    assert form.get("chiefComplaint") == "Typed by hand"
    assert form.get("pastMedicalHistory") == "Asthma"
    assert form.get("allergies") == [""]


def test_nested_objects_merge_into_existing_fields():
    form = CLINICAL_EXAMINATION.new_state()
    form.set("vitalSigns.height", "170 cm")

    written = CLINICAL_EXAMINATION.populator().populate(
        form, {"vital_signs": {"bloodPressure": "120/80", "heartRate": "72"}}
    )

    assert sorted(written) == ["vitalSigns.bloodPressure", "vitalSigns.heartRate"]
    assert form.get("vitalSigns.bloodPressure") == "120/80"
    assert form.get("vitalSigns.height") == "170 cm"


def test_key_map_renames_first_segment_only():
    populator = FormPopulator({"vital_signs": "vitalSigns", "general_examination": "generalAppearance.notes"})

    assert populator.map_key("vital_signs.bloodPressure") == "vitalSigns.bloodPressure"
    assert populator.map_key("general_examination") == "generalAppearance.notes"
    assert populator.map_key("unmapped.key") == "unmapped.key"


def test_typed_result_is_accepted():
    form = CLINICAL_EXAMINATION.new_state()
    result = parse_extraction(
        "clinical-examination",
        {"general_examination": "Alert and oriented", "vital_signs.temperature": 38.5},
    )

    CLINICAL_EXAMINATION.populator().populate(form, result)

    assert form.get("generalAppearance.notes") == "Alert and oriented"
    assert form.get("vitalSigns.temperature") == "38.5"


def test_discharge_further_treatment_plan_is_composed():
    form = DISCHARGE_FORM.new_state()

    DISCHARGE_FORM.populator().populate(
        form,
        {
            "admission_reason": "Dehydration",
            "discharge_medications": "ORS sachets",
            "follow_up_instructions": "Review in one week",
        },
    )

    assert form.get("reasonForAdmission") == "Dehydration"
    assert form.get("furtherTreatmentPlan") == "Medications: ORS sachets\nFollow-up: Review in one week"
    assert form.get("discharge_medications") is None


def test_derived_field_skips_blank_sources():
    derived = DerivedField("plan", (("treatment_given", ""), ("medications_prescribed", ""), ("advice_and_follow_up", "")))

    assert derived.compute({"treatment_given": "Rest", "advice_and_follow_up": "Return if worse"}) == (
        "Rest\nReturn if worse"
    )
    assert derived.compute({"treatment_given": " "}) is None


def test_split_comma_list():
    assert split_comma_list("a, b ,c") == ["a", "b", "c"]
    assert split_comma_list(" , ") == []
