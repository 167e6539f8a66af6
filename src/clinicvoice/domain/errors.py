"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class PatientNotFoundError(DomainError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class VisitNotFoundError(DomainError):
    """Visit not found."""

    def __init__(self, visit_id: str) -> None:
        message = f"Visit with ID '{visit_id}' not found"
        super().__init__(message, "VISIT_NOT_FOUND", {"visit_id": visit_id})


class InvalidFormTypeError(DomainError):
    """Form type is not one of the visit's slot keys."""

    def __init__(self, form_type: str) -> None:
        message = f"Invalid form type: {form_type}"
        super().__init__(message, "INVALID_FORM_TYPE", {"form_type": form_type})


class DuplicateVisitNumberError(DomainError):
    """A visit with the same number already exists for the patient."""

    def __init__(self, patient_id: str, visit_number: int) -> None:
        message = f"Visit number {visit_number} already exists for patient '{patient_id}'"
        super().__init__(
            message,
            "DUPLICATE_VISIT_NUMBER",
            {"patient_id": patient_id, "visit_number": visit_number},
        )


class DuplicateMedicalIdError(DomainError):
    """Another patient already holds the medical ID."""

    def __init__(self, medical_id: str) -> None:
        message = f"Medical ID {medical_id} is already assigned"
        super().__init__(message, "DUPLICATE_MEDICAL_ID", {"medical_id": medical_id})
