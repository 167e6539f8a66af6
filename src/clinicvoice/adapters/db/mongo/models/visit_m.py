"""
MongoDB Beanie models used by the persistence layer.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

import pymongo
from beanie import Document
from pydantic import BaseModel, Field
from pymongo import IndexModel


class FormSlotMongo(BaseModel):
    """Embedded model for one form slot (no revision_id)."""
    status: str = Field(default="Not Started", description="Not Started, In Progress, Completed")
    data: Optional[Dict[str, Any]] = Field(None, description="Form data as submitted")
    last_updated: Optional[datetime] = None


class VisitFormsMongo(BaseModel):
    """The four form slots stored on every visit."""
    medical_history: FormSlotMongo = Field(default_factory=FormSlotMongo)
    clinical_examination: FormSlotMongo = Field(default_factory=FormSlotMongo)
    diagnosis_treatment: FormSlotMongo = Field(default_factory=FormSlotMongo)
    discharge_form: FormSlotMongo = Field(default_factory=FormSlotMongo)


class VisitMongo(Document):
    """MongoDB model for visit."""
    visit_id: str = Field(..., description="Visit ID")
    patient_id: str = Field(..., description="Patient ID reference")
    visit_number: int = Field(..., description="1-based visit number, unique per patient")
    doctor_id: Optional[str] = Field(None, description="Attending doctor")
    chief_complaint: str = Field(default="Visit")
    status: str = Field(default="Active")  # Active, Discharged
    admission_date: datetime = Field(default_factory=datetime.utcnow)
    discharge_date: Optional[datetime] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    forms: VisitFormsMongo = Field(default_factory=VisitFormsMongo)
    discharge_summary: Optional[Dict[str, Any]] = None
    discharge_summary_generated_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "visits"
        indexes = [
            IndexModel([("visit_id", pymongo.ASCENDING)], unique=True),
            # Visit numbers never repeat within a patient
            IndexModel(
                [("patient_id", pymongo.ASCENDING), ("visit_number", pymongo.ASCENDING)],
                unique=True,
            ),
            [("patient_id", 1), ("created_at", -1)],
        ]


class PatientMongo(Document):
    """MongoDB model for Patient entity."""

    patient_id: str = Field(..., description="Patient ID")
    medical_id: str = Field(..., description="Medical ID ({YEAR}{6-digit sequence})")
    doctor_id: str = Field(..., description="Owning doctor")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    date_of_birth: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patients"
        indexes = [
            IndexModel([("patient_id", pymongo.ASCENDING)], unique=True),
            IndexModel([("medical_id", pymongo.ASCENDING)], unique=True),
            "doctor_id",
        ]
