"""
Value objects package for domain layer.
"""

from .medical_id import MedicalId
from .visit_id import VisitId

__all__ = [
    "MedicalId",
    "VisitId",
]
