"""Visit endpoints: creation, lookup, per-slot form saves and discharge."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request, status

from ...application.use_cases.create_visit import CreateVisitRequest, CreateVisitUseCase
from ...application.use_cases.discharge_visit import (
    DischargeVisitUseCase,
    GenerateDischargeSummaryUseCase,
    GetVisitUseCase,
)
from ...application.use_cases.resolve_current_visit import (
    ListPatientVisitsUseCase,
    ResolveCurrentVisitUseCase,
)
from ...application.use_cases.save_visit_form import SaveVisitFormUseCase
from ..deps import PatientRepositoryDep, VisitRepositoryDep
from ..errors import NotFoundError
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.visits import (
    CreateVisitRequestSchema,
    FormSlotSchema,
    SaveFormRequestSchema,
    VisitSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/api/visits", tags=["visits"])
logger = logging.getLogger(__name__)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Patient, visit or form type not found"}}


@router.post(
    "/create/{patient_id}",
    response_model=ApiResponse[VisitSchema],
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
)
async def create_visit(
    http_request: Request,
    patient_id: str,
    patient_repo: PatientRepositoryDep,
    visit_repo: VisitRepositoryDep,
    request: Optional[CreateVisitRequestSchema] = None,
):
    """
    Open the next visit for a patient.

    The visit number is the patient's visit count plus one; all four form
    slots start as Not Started.
    """
    request = request or CreateVisitRequestSchema()
    use_case = CreateVisitUseCase(patient_repo, visit_repo)
    visit = await use_case.execute(
        CreateVisitRequest(
            patient_id=patient_id,
            chief_complaint=request.chief_complaint,
            doctor_id=request.doctor_id,
        )
    )
    return ok(http_request, data=VisitSchema.from_domain(visit), message="Visit created successfully")


@router.get("/patient/{patient_id}", response_model=ApiResponse[List[VisitSchema]])
async def list_patient_visits(http_request: Request, patient_id: str, visit_repo: VisitRepositoryDep):
    """All visits of a patient, most recently created first."""
    visits = await ListPatientVisitsUseCase(visit_repo).execute(patient_id)
    return ok(http_request, data=[VisitSchema.from_domain(v) for v in visits])


@router.get("/patient/{patient_id}/current", response_model=ApiResponse[VisitSchema], responses=_NOT_FOUND)
async def get_current_visit(http_request: Request, patient_id: str, visit_repo: VisitRepositoryDep):
    """The visit forms should write into: newest Active, else newest of any status."""
    visit = await ResolveCurrentVisitUseCase(visit_repo).execute(patient_id)
    if visit is None:
        raise NotFoundError(f"No visits found for patient ({patient_id})", {"patient_id": patient_id})
    return ok(http_request, data=VisitSchema.from_domain(visit))


@router.get("/{visit_id}", response_model=ApiResponse[VisitSchema], responses=_NOT_FOUND)
async def get_visit(http_request: Request, visit_id: str, visit_repo: VisitRepositoryDep):
    visit = await GetVisitUseCase(visit_repo).execute(visit_id)
    return ok(http_request, data=VisitSchema.from_domain(visit))


@router.put("/{visit_id}/forms/{form_type}", response_model=ApiResponse[FormSlotSchema], responses=_NOT_FOUND)
async def save_visit_form(
    http_request: Request,
    visit_id: str,
    form_type: str,
    request: SaveFormRequestSchema,
    visit_repo: VisitRepositoryDep,
):
    """Replace one form slot's data and mark it Completed."""
    visit = await SaveVisitFormUseCase(visit_repo).execute(visit_id, form_type, request.data)
    return ok(
        http_request,
        data=FormSlotSchema.from_domain(visit.slot(form_type)),
        message=f"{form_type} saved successfully",
    )


@router.post("/{visit_id}/discharge", response_model=ApiResponse[VisitSchema], responses=_NOT_FOUND)
async def discharge_visit(http_request: Request, visit_id: str, visit_repo: VisitRepositoryDep):
    visit = await DischargeVisitUseCase(visit_repo).execute(visit_id)
    return ok(http_request, data=VisitSchema.from_domain(visit), message="Patient discharged successfully")


@router.post(
    "/{visit_id}/discharge-summary",
    response_model=ApiResponse[Dict[str, Any]],
    responses=_NOT_FOUND,
)
async def generate_discharge_summary(
    http_request: Request,
    visit_id: str,
    patient_repo: PatientRepositoryDep,
    visit_repo: VisitRepositoryDep,
):
    """Compile patient info, visit info, all four forms and notes into a stored summary."""
    summary = await GenerateDischargeSummaryUseCase(patient_repo, visit_repo).execute(visit_id)
    return ok(http_request, data=summary, message="Discharge summary generated successfully")
