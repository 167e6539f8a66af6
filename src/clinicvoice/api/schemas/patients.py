"""Patient request/response schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.entities.patient import Patient
from .visits import CamelModel


class RegisterPatientRequestSchema(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    doctor_id: str = Field(..., min_length=1, description="Owning doctor")
    first_name: str = Field(..., min_length=1, description="Given name")
    last_name: str = Field(..., min_length=1, description="Family name")
    date_of_birth: Optional[date] = None


class PatientSchema(CamelModel):
    patient_id: str
    medical_id: str
    doctor_id: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientSchema":
        return cls(
            patient_id=patient.patient_id,
            medical_id=patient.medical_id.value,
            doctor_id=patient.doctor_id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            created_at=patient.created_at,
        )
