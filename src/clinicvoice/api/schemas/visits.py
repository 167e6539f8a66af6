"""
Visit request/response schemas.

Field names are camelCase on the wire (``visitNumber``, ``lastUpdated``)
and snake_case in Python.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.entities.visit import FormSlot, Visit


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateVisitRequestSchema(CamelModel):
    chief_complaint: Optional[str] = Field(None, description="Reason for the visit; defaults to 'Visit'")
    doctor_id: Optional[str] = Field(None, description="Attending doctor")


class SaveFormRequestSchema(CamelModel):
    data: Optional[Dict[str, Any]] = Field(None, description="Form data to store in the slot")


class FormSlotSchema(CamelModel):
    status: str
    data: Optional[Dict[str, Any]] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, slot: FormSlot) -> "FormSlotSchema":
        return cls(status=slot.status.value, data=slot.data, last_updated=slot.last_updated)


class VisitFormsSchema(CamelModel):
    medical_history: FormSlotSchema
    clinical_examination: FormSlotSchema
    diagnosis_treatment: FormSlotSchema
    discharge_form: FormSlotSchema


class VisitSchema(CamelModel):
    visit_id: str
    patient_id: str
    visit_number: int
    doctor_id: Optional[str] = None
    chief_complaint: str
    status: str
    admission_date: datetime
    discharge_date: Optional[datetime] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    forms: VisitFormsSchema
    discharge_summary: Optional[Dict[str, Any]] = None
    discharge_summary_generated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, visit: Visit) -> "VisitSchema":
        return cls(
            visit_id=visit.visit_id.value,
            patient_id=visit.patient_id,
            visit_number=visit.visit_number,
            doctor_id=visit.doctor_id,
            chief_complaint=visit.chief_complaint,
            status=visit.status.value,
            admission_date=visit.admission_date,
            discharge_date=visit.discharge_date,
            diagnosis=visit.diagnosis,
            notes=visit.notes,
            forms=VisitFormsSchema(
                medical_history=FormSlotSchema.from_domain(visit.forms.medical_history),
                clinical_examination=FormSlotSchema.from_domain(visit.forms.clinical_examination),
                diagnosis_treatment=FormSlotSchema.from_domain(visit.forms.diagnosis_treatment),
                discharge_form=FormSlotSchema.from_domain(visit.forms.discharge_form),
            ),
            discharge_summary=visit.discharge_summary,
            discharge_summary_generated_at=visit.discharge_summary_generated_at,
            created_at=visit.created_at,
            updated_at=visit.updated_at,
        )
