"""
In-memory form state: a nested dict addressed by dotted paths, with
flat lists (``allergies``) and tables (``surgeries``) as list values.
"""

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..voice.errors import InvalidFocusTarget

ListObserver = Callable[[str, str], None]
"""Called with (list_name, kind) where kind is "add", "remove" or "reset"."""

_MISSING = object()


def split_path(path: str) -> List[str]:
    parts = [p for p in path.split(".") if p]
    if not parts:
        raise ValueError(f"Empty field path: {path!r}")
    return parts


class FormState:
    """Mutable form values for one form instance."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))
        self._observers: List[ListObserver] = []

    def add_list_observer(self, observer: ListObserver) -> None:
        self._observers.append(observer)

    def get(self, path: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in split_path(path):
            if not isinstance(node, dict):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def set(self, path: str, value: Any) -> None:
        """Write ``value`` at ``path``, creating intermediate objects as needed."""
        parts = split_path(path)
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
        if isinstance(value, list):
            self._notify(path, "reset")

    def get_list(self, list_name: str) -> List[Any]:
        value = self.get(list_name)
        return value if isinstance(value, list) else []

    def set_list_item(self, list_name: str, index: int, value: str) -> None:
        rows = self._require_row(list_name, index)
        rows[index] = value

    def set_table_cell(self, list_name: str, index: int, column: str, value: str) -> None:
        rows = self._require_row(list_name, index)
        row = rows[index]
        if not isinstance(row, dict):
            raise InvalidFocusTarget(details={"list": list_name, "index": index, "column": column})
        row[column] = value

    def add_row(self, list_name: str, row: Any = None) -> int:
        """Append a row (a blank copy of the first row by default). Returns its index."""
        rows = self.get(list_name)
        if not isinstance(rows, list):
            rows = []
            self.set(list_name, rows)
        if row is None:
            row = _blank_like(rows[0]) if rows else ""
        rows.append(copy.deepcopy(row))
        self._notify(list_name, "add")
        return len(rows) - 1

    def remove_row(self, list_name: str, index: int) -> Any:
        rows = self._require_row(list_name, index)
        removed = rows.pop(index)
        self._notify(list_name, "remove")
        return removed

    def replace(self, data: Mapping[str, Any]) -> None:
        """Swap in a whole new set of values (e.g. a saved slot being loaded)."""
        self._data = copy.deepcopy(dict(data))
        for name, value in self._data.items():
            if isinstance(value, list):
                self._notify(name, "reset")

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def _require_row(self, list_name: str, index: int) -> List[Any]:
        rows = self.get(list_name)
        if not isinstance(rows, list) or not 0 <= index < len(rows):
            raise InvalidFocusTarget(details={"list": list_name, "index": index})
        return rows

    def _notify(self, list_name: str, kind: str) -> None:
        for observer in list(self._observers):
            observer(list_name, kind)


def _blank_like(row: Any) -> Any:
    if isinstance(row, dict):
        return {key: "" for key in row}
    return ""
