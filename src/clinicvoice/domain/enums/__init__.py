"""
Domain enums package.
"""

from .forms import (
    ExtractionFormType,
    FormSlotKey,
    FormStatus,
    VisitStatus,
)

__all__ = [
    "ExtractionFormType",
    "FormSlotKey",
    "FormStatus",
    "VisitStatus",
]
