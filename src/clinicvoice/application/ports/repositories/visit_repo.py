"""
Visit repository interface for managing visit data.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.visit import Visit
from ....domain.value_objects.visit_id import VisitId


class VisitRepository(ABC):
    """Repository interface for managing visits."""

    @abstractmethod
    async def save(self, visit: Visit) -> Visit:
        """Insert or replace a visit."""
        pass

    @abstractmethod
    async def find_by_id(self, visit_id: VisitId) -> Optional[Visit]:
        """Find a visit by ID."""
        pass

    @abstractmethod
    async def find_by_patient_id(self, patient_id: str) -> List[Visit]:
        """Find all visits for a patient, most recently created first."""
        pass

    @abstractmethod
    async def count_by_patient_id(self, patient_id: str) -> int:
        """Count total visits for a patient."""
        pass

    @abstractmethod
    async def delete_by_patient_id(self, patient_id: str) -> int:
        """Delete every visit of a patient (patient cascade). Returns the count removed."""
        pass
