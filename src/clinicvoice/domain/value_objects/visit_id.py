"""
Visit ID value object for type-safe visit identification.
Format: VISIT-<32 hex chars>
"""

import re
import uuid
from dataclasses import dataclass
from typing import Any

_VISIT_ID_PATTERN = re.compile(r"^VISIT-[0-9a-f]{32}$")


@dataclass(frozen=True)
class VisitId:
    """Immutable visit identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate visit ID format."""
        if not isinstance(self.value, str):
            raise ValueError("Visit ID must be a string")

        if not self.value:
            raise ValueError("Visit ID cannot be empty")

        if not _VISIT_ID_PATTERN.match(self.value):
            raise ValueError("Visit ID must follow format: VISIT-<32 hex chars>")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, VisitId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "VisitId":
        """Generate a new visit ID."""
        return cls(f"VISIT-{uuid.uuid4().hex}")

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return isinstance(value, str) and bool(_VISIT_ID_PATTERN.match(value))
