"""
Form populator: writes extraction results into form state.

Each payload leaf is written at its dotted path (nested objects are
walked, arrays are written whole). Absent, ``null`` and blank values are
skipped, so a populate never clears what the clinician already typed, and
applying the same payload twice leaves the form as applying it once.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .extraction_schema import ExtractionResult
from .state import FormState

Payload = Union[Mapping[str, Any], ExtractionResult]


def split_comma_list(text: str) -> List[str]:
    """``"penicillin, peanuts"`` -> ``["penicillin", "peanuts"]``."""
    return [part.strip() for part in text.split(",") if part.strip()]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not value
    return False


def _leaves(path: str, value: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield from _leaves(f"{path}.{key}", child)
    else:
        yield path, value


def _as_mapping(payload: Payload) -> Mapping[str, Any]:
    if isinstance(payload, ExtractionResult):
        return payload.to_payload()
    return payload


@dataclass(frozen=True)
class DerivedField:
    """A form field composed from several extraction keys.

    ``sources`` pairs each payload key with a label prefix; non-blank
    values are prefixed and joined with ``separator``.
    """

    target: str
    sources: Tuple[Tuple[str, str], ...]
    separator: str = "\n"

    def compute(self, payload: Mapping[str, Any]) -> Optional[str]:
        parts = []
        for key, prefix in self.sources:
            value = payload.get(key)
            if not _is_blank(value):
                parts.append(f"{prefix}{value}")
        return self.separator.join(parts) or None


class FormPopulator:
    """Applies extraction payloads to a FormState."""

    def __init__(
        self,
        key_map: Optional[Mapping[str, str]] = None,
        comma_split_keys: Iterable[str] = (),
        derived: Iterable[DerivedField] = (),
    ) -> None:
        self._key_map = dict(key_map or {})
        self._comma_split_keys = frozenset(comma_split_keys)
        self._derived = tuple(derived)
        # Keys only consumed by derived fields are not written on their own
        self._derived_only = frozenset(
            key for d in self._derived for key, _ in d.sources if key not in self._key_map
        )

    def map_key(self, key: str) -> str:
        """Form path for a payload key; only the first segment of a dotted key is renamed."""
        if key in self._key_map:
            return self._key_map[key]
        head, dot, rest = key.partition(".")
        mapped = self._key_map.get(head, head)
        return f"{mapped}{dot}{rest}"

    def populate(self, form: FormState, payload: Payload) -> List[str]:
        """Write every non-blank leaf of ``payload`` into ``form``. Returns the written paths."""
        data = _as_mapping(payload)
        written: List[str] = []
        for key, value in data.items():
            if key in self._derived_only:
                continue
            if key in self._comma_split_keys and isinstance(value, str):
                value = split_comma_list(value)
            for path, leaf in _leaves(self.map_key(key), value):
                if _is_blank(leaf):
                    continue
                form.set(path, leaf)
                written.append(path)
        for derived in self._derived:
            if self.populate_derived(form, data, derived):
                written.append(derived.target)
        return written

    @staticmethod
    def populate_derived(form: FormState, payload: Payload, derived: DerivedField) -> bool:
        """Fill one composed field from ``payload``. Returns whether it was written."""
        text = derived.compute(_as_mapping(payload))
        if text is None:
            return False
        form.set(derived.target, text)
        return True
