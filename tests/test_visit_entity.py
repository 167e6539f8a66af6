"""
Visit entity, value object and current-visit selection tests.
"""

from datetime import datetime

import pytest

from clinicvoice.domain.entities.visit import FormSlot, Visit, has_content, select_current_visit
from clinicvoice.domain.enums.forms import FormSlotKey, FormStatus, VisitStatus
from clinicvoice.domain.errors import InvalidFormTypeError
from clinicvoice.domain.value_objects.medical_id import MedicalId
from clinicvoice.domain.value_objects.visit_id import VisitId

from conftest import make_visit


def test_new_visit_has_four_not_started_slots():
    visit = Visit.create("patient-1", 1)
    slots = dict(visit.forms.items())
    assert set(slots) == set(FormSlotKey)
    assert all(slot.status == FormStatus.NOT_STARTED for slot in slots.values())
    assert all(slot.data is None for slot in slots.values())
    assert visit.status == VisitStatus.ACTIVE
    assert visit.chief_complaint == "Visit"


def test_visit_number_must_be_positive():
    with pytest.raises(ValueError):
        Visit.create("patient-1", 0)


def test_save_form_replaces_data_and_completes_slot():
    visit = Visit.create("patient-1", 1)
    visit.save_form("medicalHistory", {"chiefComplaint": "Fever", "allergies": ["penicillin"]})
    visit.save_form("medicalHistory", {"chiefComplaint": "Cough"})

    slot = visit.slot("medicalHistory")
    assert slot.status == FormStatus.COMPLETED
    assert slot.data == {"chiefComplaint": "Cough"}
    assert slot.last_updated is not None
    # Other slots are independent
    assert visit.slot("dischargeForm").status == FormStatus.NOT_STARTED


def test_save_form_rejects_unknown_slot():
    visit = Visit.create("patient-1", 1)
    with pytest.raises(InvalidFormTypeError):
        visit.save_form("medical-history", {})


def test_discharge_sets_status_and_date():
    visit = Visit.create("patient-1", 1)
    visit.discharge()
    assert visit.status == VisitStatus.DISCHARGED
    assert isinstance(visit.discharge_date, datetime)
    assert not visit.is_active


def test_select_current_visit_prefers_active_over_newer_discharged():
    active = make_visit("p", 1, created_offset_minutes=0)
    discharged = make_visit("p", 2, created_offset_minutes=30, discharged=True)
    assert select_current_visit([discharged, active]) is active


def test_select_current_visit_falls_back_to_newest_of_any_status():
    older = make_visit("p", 1, created_offset_minutes=0, discharged=True)
    newer = make_visit("p", 2, created_offset_minutes=30, discharged=True)
    assert select_current_visit([older, newer]) is newer


def test_select_current_visit_empty():
    assert select_current_visit([]) is None


def test_display_status_heuristic():
    slot = FormSlot()
    assert slot.display_status() == FormStatus.NOT_STARTED
    assert slot.display_status({"allergies": ["", ""]}) == FormStatus.NOT_STARTED
    assert slot.display_status({"chiefComplaint": "Fever"}) == FormStatus.IN_PROGRESS
    slot.save({"chiefComplaint": "Fever"})
    assert slot.display_status() == FormStatus.COMPLETED


def test_has_content_walks_nested_values():
    assert not has_content({"a": {"b": "  "}, "c": [{"d": ""}]})
    assert has_content({"a": {"b": "x"}})
    assert has_content({"count": 0})


def test_visit_id_format():
    visit_id = VisitId.generate()
    assert visit_id.value.startswith("VISIT-")
    assert VisitId.is_valid(visit_id.value)
    assert not VisitId.is_valid("VISIT-123")
    with pytest.raises(ValueError):
        VisitId("not-a-visit")


def test_medical_id_generation():
    medical_id = MedicalId.generate(41, datetime(2026, 5, 1))
    assert medical_id.value == "2026000042"
    assert medical_id.year == 2026
    assert medical_id.sequence == 42
    with pytest.raises(ValueError):
        MedicalId("26-42")
    with pytest.raises(ValueError):
        MedicalId.generate(-1)
