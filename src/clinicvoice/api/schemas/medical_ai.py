"""Schemas for the structured-extraction endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class MedicalAIRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: str = Field(..., description="Finalized clinician dictation")
    form_type: str = Field(..., alias="formType", description="Extraction tag, e.g. 'medical-history'")
