"""
Shared fixtures: in-memory repositories, a scripted recognition engine,
a manual scheduler and an API client wired to the fakes.
"""

import asyncio
import copy
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from clinicvoice.api import deps
from clinicvoice.application.ports.repositories.patient_repo import PatientRepository
from clinicvoice.application.ports.repositories.visit_repo import VisitRepository
from clinicvoice.application.ports.services.extraction_service import MedicalExtractionService
from clinicvoice.app import create_app
from clinicvoice.domain.entities.patient import Patient
from clinicvoice.domain.entities.visit import Visit
from clinicvoice.domain.errors import DuplicateMedicalIdError, DuplicateVisitNumberError
from clinicvoice.domain.value_objects.medical_id import MedicalId
from clinicvoice.domain.value_objects.visit_id import VisitId
from clinicvoice.voice.engine import (
    EngineInvalidStateError,
    RecognitionEngine,
    RecognitionResultEvent,
    RecognitionSegment,
)
from clinicvoice.voice.errors import ExtractionFailed


# -----------------------------------------------------------------------------
# Repositories
# -----------------------------------------------------------------------------


class InMemoryVisitRepository(VisitRepository):
    """Enforces the unique (patient_id, visit_number) constraint like the Mongo index."""

    def __init__(self) -> None:
        self.visits: Dict[str, Visit] = {}

    async def save(self, visit: Visit) -> Visit:
        # Yield so concurrent creators interleave between count and save
        await asyncio.sleep(0)
        for other in self.visits.values():
            if (
                other.visit_id != visit.visit_id
                and other.patient_id == visit.patient_id
                and other.visit_number == visit.visit_number
            ):
                raise DuplicateVisitNumberError(visit.patient_id, visit.visit_number)
        self.visits[visit.visit_id.value] = copy.deepcopy(visit)
        return visit

    async def find_by_id(self, visit_id: VisitId) -> Optional[Visit]:
        visit = self.visits.get(visit_id.value)
        return copy.deepcopy(visit) if visit else None

    async def find_by_patient_id(self, patient_id: str) -> List[Visit]:
        visits = [copy.deepcopy(v) for v in self.visits.values() if v.patient_id == patient_id]
        return sorted(visits, key=lambda v: v.created_at, reverse=True)

    async def count_by_patient_id(self, patient_id: str) -> int:
        await asyncio.sleep(0)
        return sum(1 for v in self.visits.values() if v.patient_id == patient_id)

    async def delete_by_patient_id(self, patient_id: str) -> int:
        doomed = [k for k, v in self.visits.items() if v.patient_id == patient_id]
        for key in doomed:
            del self.visits[key]
        return len(doomed)


class InMemoryPatientRepository(PatientRepository):
    def __init__(self) -> None:
        self.patients: Dict[str, Patient] = {}

    def add(self, patient: Patient) -> Patient:
        self.patients[patient.patient_id] = patient
        return patient

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        return self.patients.get(patient_id)

    async def exists_by_id(self, patient_id: str) -> bool:
        return patient_id in self.patients

    async def save(self, patient: Patient) -> Patient:
        await asyncio.sleep(0)
        for other in self.patients.values():
            if other.patient_id != patient.patient_id and other.medical_id == patient.medical_id:
                raise DuplicateMedicalIdError(patient.medical_id.value)
        self.patients[patient.patient_id] = patient
        return patient

    async def count_by_medical_id_prefix(self, prefix: str) -> int:
        await asyncio.sleep(0)
        return sum(1 for p in self.patients.values() if p.medical_id.value.startswith(prefix))

    async def delete(self, patient_id: str) -> bool:
        return self.patients.pop(patient_id, None) is not None


def make_patient(patient_id: str = "patient-1", sequence: int = 0) -> Patient:
    return Patient(
        patient_id=patient_id,
        medical_id=MedicalId.generate(sequence, datetime(2026, 3, 1)),
        doctor_id="doctor-1",
        first_name="Jane",
        last_name="Doe",
    )


def make_visit(patient_id: str, number: int, *, created_offset_minutes: int = 0, discharged: bool = False) -> Visit:
    visit = Visit.create(patient_id=patient_id, visit_number=number)
    visit.created_at = datetime(2026, 3, 1, 9, 0) + timedelta(minutes=created_offset_minutes)
    if discharged:
        visit.discharge()
    return visit


@pytest.fixture
def visit_repo():
    return InMemoryVisitRepository()


@pytest.fixture
def patient_repo():
    repo = InMemoryPatientRepository()
    repo.add(make_patient())
    return repo


# -----------------------------------------------------------------------------
# Extraction service
# -----------------------------------------------------------------------------


class FakeExtractionService(MedicalExtractionService):
    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.result = result if result is not None else {"chief_complaint": "Fever"}
        self.error = error
        self.calls: List[tuple] = []

    async def extract(self, transcript: str, form_type: str) -> Dict[str, Any]:
        self.calls.append((transcript, form_type))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def extraction_service():
    return FakeExtractionService()


# -----------------------------------------------------------------------------
# API
# -----------------------------------------------------------------------------


@pytest.fixture
def app(visit_repo, patient_repo, extraction_service):
    application = create_app(use_lifespan=False)
    application.dependency_overrides[deps.get_visit_repository] = lambda: visit_repo
    application.dependency_overrides[deps.get_patient_repository] = lambda: patient_repo
    application.dependency_overrides[deps.get_extraction_service] = lambda: extraction_service
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


# -----------------------------------------------------------------------------
# Voice capture
# -----------------------------------------------------------------------------


class FakeRecognitionEngine(RecognitionEngine):
    """Scripted engine: tests drive results, errors and end events by hand."""

    def __init__(self, end_on_stop: bool = True) -> None:
        self.running = False
        self.end_on_stop = end_on_stop
        self.start_calls = 0
        self.stop_calls = 0
        self.start_errors: List[Exception] = []
        self._results: List[RecognitionSegment] = []

    def start(self) -> None:
        self.start_calls += 1
        if self.start_errors:
            raise self.start_errors.pop(0)
        if self.running:
            raise EngineInvalidStateError("recognition has already started")
        self.running = True
        self._results = []
        if self.on_start:
            self.on_start()

    def stop(self) -> None:
        self.stop_calls += 1
        if not self.running:
            return
        if self.end_on_stop:
            self.emit_end()
        else:
            self.running = False

    def abort(self) -> None:
        self.stop()

    def say_interim(self, text: str) -> None:
        finals = [s for s in self._results if s.is_final]
        event = RecognitionResultEvent(len(finals), finals + [RecognitionSegment(text, False)])
        if self.on_result:
            self.on_result(event)

    def say_final(self, text: str) -> None:
        self._results = [s for s in self._results if s.is_final] + [RecognitionSegment(text, True)]
        event = RecognitionResultEvent(len(self._results) - 1, list(self._results))
        if self.on_result:
            self.on_result(event)

    def emit_error(self, code: str) -> None:
        if self.on_error:
            self.on_error(code)

    def emit_end(self) -> None:
        self.running = False
        if self.on_end:
            self.on_end()


class ManualHandle:
    def __init__(self, when: float, callback) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: List[ManualHandle] = []

    def call_later(self, delay: float, callback) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self._handles if not h.cancelled and h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self._handles = [h for h in self._handles if not h.cancelled]
        self.now = target


class FakeExtractor:
    """Extractor whose outcomes are queued up front; the last one repeats."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes) or [{"chief_complaint": "Fever"}]
        self.calls: List[tuple] = []

    async def extract(self, transcript: str, form_type: str) -> Any:
        self.calls.append((transcript, form_type))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def network_failure(form_type: str = "medical-history") -> ExtractionFailed:
    return ExtractionFailed("network error: ClientConnectorError", form_type=form_type)


@pytest.fixture
def engine():
    return FakeRecognitionEngine()


@pytest.fixture
def scheduler():
    return ManualScheduler()
