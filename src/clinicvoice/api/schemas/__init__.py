from .common import ApiResponse, ErrorResponse
from .medical_ai import MedicalAIRequest
from .patients import PatientSchema, RegisterPatientRequestSchema
from .visits import (
    CreateVisitRequestSchema,
    FormSlotSchema,
    SaveFormRequestSchema,
    VisitSchema,
)

__all__ = [
    "ApiResponse",
    "CreateVisitRequestSchema",
    "ErrorResponse",
    "FormSlotSchema",
    "MedicalAIRequest",
    "PatientSchema",
    "RegisterPatientRequestSchema",
    "SaveFormRequestSchema",
    "VisitSchema",
]
