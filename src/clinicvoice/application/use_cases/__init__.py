from .create_visit import CreateVisitRequest, CreateVisitUseCase
from .delete_patient import DeletePatientUseCase
from .discharge_visit import DischargeVisitUseCase, GenerateDischargeSummaryUseCase, GetVisitUseCase
from .extract_medical_data import ExtractMedicalDataUseCase
from .register_patient import RegisterPatientRequest, RegisterPatientUseCase
from .resolve_current_visit import ListPatientVisitsUseCase, ResolveCurrentVisitUseCase
from .save_visit_form import SaveVisitFormUseCase

__all__ = [
    "CreateVisitRequest",
    "CreateVisitUseCase",
    "DeletePatientUseCase",
    "DischargeVisitUseCase",
    "ExtractMedicalDataUseCase",
    "GenerateDischargeSummaryUseCase",
    "GetVisitUseCase",
    "ListPatientVisitsUseCase",
    "RegisterPatientRequest",
    "RegisterPatientUseCase",
    "ResolveCurrentVisitUseCase",
    "SaveVisitFormUseCase",
]
