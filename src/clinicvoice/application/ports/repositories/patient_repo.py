"""
Patient repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.patient import Patient


class PatientRepository(ABC):
    """Abstract repository for patient data access."""

    @abstractmethod
    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        """Find a patient by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, patient_id: str) -> bool:
        """Check if a patient exists by ID."""
        pass

    @abstractmethod
    async def save(self, patient: Patient) -> Patient:
        """Insert a new patient; raises DuplicateMedicalIdError on a medical ID clash."""
        pass

    @abstractmethod
    async def count_by_medical_id_prefix(self, prefix: str) -> int:
        """Count patients whose medical ID starts with ``prefix`` (a year)."""
        pass

    @abstractmethod
    async def delete(self, patient_id: str) -> bool:
        """Delete a patient record."""
        pass
