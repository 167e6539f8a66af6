"""
Medical ID value object: the human-readable patient identifier.
Format: {YYYY}{6-digit sequence}, e.g. 2026000042
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

SEQUENCE_WIDTH = 6
_MEDICAL_ID_PATTERN = re.compile(r"^\d{4}\d{%d,}$" % SEQUENCE_WIDTH)


@dataclass(frozen=True)
class MedicalId:
    """Immutable medical ID value object."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Medical ID cannot be empty")
        if not _MEDICAL_ID_PATTERN.match(self.value):
            raise ValueError("Medical ID must follow format: {YEAR}{6-digit sequence}")

    def __str__(self) -> str:
        return self.value

    @property
    def year(self) -> int:
        return int(self.value[:4])

    @property
    def sequence(self) -> int:
        return int(self.value[4:])

    @staticmethod
    def year_prefix(date: Optional[datetime] = None) -> str:
        """Prefix shared by every medical ID issued in ``date``'s year."""
        return str((date or datetime.utcnow()).year)

    @classmethod
    def generate(cls, existing_count_for_year: int, date: Optional[datetime] = None) -> "MedicalId":
        """Build the next medical ID given how many were already issued this year."""
        if existing_count_for_year < 0:
            raise ValueError("Existing count cannot be negative")
        sequence = str(existing_count_for_year + 1).zfill(SEQUENCE_WIDTH)
        return cls(f"{cls.year_prefix(date)}{sequence}")
