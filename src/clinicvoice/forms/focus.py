"""
Focus router: sends live Raw-mode dictation to the field that has focus.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..voice.errors import InvalidFocusTarget
from .state import FormState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormField:
    """A named field; ``path`` may be dotted (``presentIllness.onset``)."""

    path: str


@dataclass(frozen=True)
class ListItem:
    """One entry of a flat string list (allergies, medications, conditions)."""

    list_name: str
    index: int


@dataclass(frozen=True)
class TableCell:
    """One column of one row of a structured list (surgeries, familyHistory)."""

    list_name: str
    index: int
    column: str


FocusTarget = Union[FormField, ListItem, TableCell]


class FocusRouter:
    """Holds the single focused target of a form and writes text into it.

    Removing a row from the focused list clears focus, so dictation is never
    written into a shifted row. Writes aimed at rows that no longer exist are
    dropped.
    """

    def __init__(self, form: FormState) -> None:
        self._form = form
        self._target: Optional[FocusTarget] = None
        form.add_list_observer(self._on_list_change)

    @property
    def target(self) -> Optional[FocusTarget]:
        return self._target

    def set_focus(self, target: FocusTarget) -> None:
        self._target = target

    def clear_focus(self) -> None:
        self._target = None

    def route_text(self, text: str) -> bool:
        """Overwrite the focused field with ``text``. Returns whether anything was written."""
        target = self._target
        if target is None:
            return False
        try:
            self._write(target, text)
        except InvalidFocusTarget:
            logger.debug(f"Dropping dictation for stale focus target {target}")
            return False
        return True

    def _write(self, target: FocusTarget, text: str) -> None:
        if isinstance(target, FormField):
            self._form.set(target.path, text)
        elif isinstance(target, ListItem):
            self._form.set_list_item(target.list_name, target.index, text)
        elif isinstance(target, TableCell):
            self._form.set_table_cell(target.list_name, target.index, target.column, text)
        else:
            raise TypeError(f"Unknown focus target: {target!r}")

    def _on_list_change(self, list_name: str, kind: str) -> None:
        target = self._target
        if kind == "add" or not isinstance(target, (ListItem, TableCell)):
            return
        if target.list_name == list_name:
            logger.debug(f"Clearing focus on {list_name} after list {kind}")
            self._target = None
