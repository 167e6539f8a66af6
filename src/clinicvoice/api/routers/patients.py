"""Patient endpoints needed by the visit lifecycle."""

from fastapi import APIRouter, Request, status

from ...application.use_cases.delete_patient import DeletePatientUseCase
from ...application.use_cases.register_patient import RegisterPatientRequest, RegisterPatientUseCase
from ..deps import PatientRepositoryDep, VisitRepositoryDep
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.patients import PatientSchema, RegisterPatientRequestSchema
from ..utils.responses import ok

router = APIRouter(prefix="/api/patients", tags=["patients"])


@router.post(
    "",
    response_model=ApiResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Medical ID could not be assigned"}},
)
async def register_patient(
    http_request: Request,
    request: RegisterPatientRequestSchema,
    patient_repo: PatientRepositoryDep,
):
    """
    Register a patient.

    The medical ID is the current year followed by a six-digit sequence
    counting that year's registrations.
    """
    patient = await RegisterPatientUseCase(patient_repo).execute(
        RegisterPatientRequest(
            doctor_id=request.doctor_id,
            first_name=request.first_name,
            last_name=request.last_name,
            date_of_birth=request.date_of_birth,
        )
    )
    return ok(http_request, data=PatientSchema.from_domain(patient), message="Patient registered successfully")


@router.delete(
    "/{patient_id}",
    response_model=ApiResponse[dict],
    responses={404: {"model": ErrorResponse, "description": "Patient not found"}},
)
async def delete_patient(
    http_request: Request,
    patient_id: str,
    patient_repo: PatientRepositoryDep,
    visit_repo: VisitRepositoryDep,
):
    """Delete a patient and cascade to every visit they own."""
    removed = await DeletePatientUseCase(patient_repo, visit_repo).execute(patient_id)
    return ok(
        http_request,
        data={"patientId": patient_id, "visitsDeleted": removed},
        message="Patient deleted successfully",
    )
