"""
Focus router tests: live dictation into fields, list items and table cells.
"""

import pytest

from clinicvoice.forms.definitions import MEDICAL_HISTORY
from clinicvoice.forms.focus import FocusRouter, FormField, ListItem, TableCell


@pytest.fixture
def form():
    state = MEDICAL_HISTORY.new_state()
    state.add_row("allergies")
    return state


@pytest.fixture
def router(form):
    return FocusRouter(form)


def test_route_to_plain_field(form, router):
    router.set_focus(FormField("chiefComplaint"))

    assert router.route_text("fever for 3 days")

    assert form.get("chiefComplaint") == "fever for 3 days"


def test_route_to_nested_field(form, router):
    router.set_focus(FormField("presentIllness.onset"))
    router.route_text("two days ago")

    assert form.get("presentIllness") == {"onset": "two days ago", "duration": "", "progression": ""}


def test_route_to_list_item(form, router):
    form.set_list_item("allergies", 0, "latex")
    router.set_focus(ListItem("allergies", 1))

    router.route_text("penicillin")

    assert form.get_list("allergies") == ["latex", "penicillin"]


def test_route_to_table_cell(form, router):
    form.set_table_cell("surgeries", 0, "year", "2019")
    router.set_focus(TableCell("surgeries", 0, "procedure"))

    router.route_text("appendectomy")

    row = form.get_list("surgeries")[0]
    assert row["procedure"] == "appendectomy"
    assert row["year"] == "2019"


def test_live_updates_overwrite_the_field(form, router):
    router.set_focus(FormField("chiefComplaint"))
    router.route_text("chest")
    router.route_text("chest pain")

    assert form.get("chiefComplaint") == "chest pain"


def test_no_focus_writes_nothing(form, router):
    before = form.snapshot()

    assert not router.route_text("ignored")

    assert form.snapshot() == before


def test_stale_index_is_silently_dropped(form, router):
    router.set_focus(ListItem("medications", 3))

    assert not router.route_text("aspirin")

    assert form.get_list("medications") == [""]


def test_removing_a_row_of_the_focused_list_clears_focus(form, router):
    router.set_focus(ListItem("allergies", 1))

    form.remove_row("allergies", 0)

    assert router.target is None
    assert not router.route_text("penicillin")
    assert form.get_list("allergies") == [""]


def test_adding_a_row_keeps_focus(form, router):
    router.set_focus(TableCell("surgeries", 0, "procedure"))

    form.add_row("surgeries")

    assert router.target == TableCell("surgeries", 0, "procedure")
    assert form.get_list("surgeries")[1] == {"year": "", "procedure": "", "complications": ""}


def test_mutating_another_list_keeps_focus(form, router):
    router.set_focus(ListItem("allergies", 1))

    form.remove_row("medications", 0)

    assert router.target == ListItem("allergies", 1)


def test_reloading_the_form_clears_list_focus(form, router):
    router.set_focus(ListItem("allergies", 0))

    form.replace(MEDICAL_HISTORY.merge_saved({"allergies": ["penicillin"]}))

    assert router.target is None


def test_unknown_target_type_raises(router):
    router.set_focus("chiefComplaint")
    with pytest.raises(TypeError):
        router.route_text("fever")
