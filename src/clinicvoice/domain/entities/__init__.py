"""
Domain entities package.
"""

from .patient import Patient
from .visit import FormSlot, Visit, VisitForms, has_content, select_current_visit

__all__ = [
    "Patient",
    "Visit",
    "VisitForms",
    "FormSlot",
    "has_content",
    "select_current_visit",
]
