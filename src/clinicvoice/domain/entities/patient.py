"""Patient domain entity.

Patients are registered with a yearly medical ID; visits reference them. The entity
carries what visit creation and discharge summaries need.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..value_objects.medical_id import MedicalId


@dataclass
class Patient:
    """Patient domain entity."""

    patient_id: str
    medical_id: MedicalId
    doctor_id: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.first_name or not self.first_name.strip():
            raise ValueError("First name cannot be empty")
        if not self.last_name or not self.last_name.strip():
            raise ValueError("Last name cannot be empty")
        self.first_name = self.first_name.strip()
        self.last_name = self.last_name.strip()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
