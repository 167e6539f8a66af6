"""
Patient registration tests: yearly medical ID sequence and the HTTP route.
"""

import asyncio
from datetime import date, datetime

import pytest

from clinicvoice.application.use_cases import register_patient
from clinicvoice.application.use_cases.register_patient import RegisterPatientRequest, RegisterPatientUseCase
from clinicvoice.domain.errors import DuplicateMedicalIdError

from conftest import InMemoryPatientRepository


def _request(first_name="John"):
    return RegisterPatientRequest("doctor-1", first_name, "Smith", date_of_birth=date(1980, 4, 2))


def _registrar(repo, when=datetime(2026, 5, 1)):
    return RegisterPatientUseCase(repo, clock=lambda: when)


async def test_medical_id_continues_the_year_sequence(patient_repo):
    patient = await _registrar(patient_repo).execute(_request())

    assert patient.medical_id.value == "2026000002"
    assert patient.first_name == "John"
    assert patient.date_of_birth == date(1980, 4, 2)
    assert await patient_repo.exists_by_id(patient.patient_id)


async def test_medical_id_sequence_restarts_each_year(patient_repo):
    patient = await _registrar(patient_repo, datetime(2027, 1, 2)).execute(_request())

    assert patient.medical_id.value == "2027000001"


async def test_concurrent_registrations_get_distinct_ids(patient_repo):
    use_case = _registrar(patient_repo, datetime(2031, 6, 1))

    patients = await asyncio.gather(*(use_case.execute(_request(f"P{i}")) for i in range(4)))

    assert sorted(p.medical_id.value for p in patients) == [
        "2031000001",
        "2031000002",
        "2031000003",
        "2031000004",
    ]
    assert len(register_patient._year_locks) == 0


class StaleCountPatientRepository(InMemoryPatientRepository):
    """Undercounts the year's IDs, as if another process had just registered someone."""

    def __init__(self, stale_counts: int) -> None:
        super().__init__()
        self.stale_counts = stale_counts

    async def count_by_medical_id_prefix(self, prefix: str) -> int:
        count = await super().count_by_medical_id_prefix(prefix)
        if self.stale_counts:
            self.stale_counts -= 1
            return max(count - 1, 0)
        return count


async def test_medical_id_recomputed_after_collision():
    repo = StaleCountPatientRepository(stale_counts=1)
    await _registrar(repo).execute(_request("First"))
    repo.stale_counts = 1

    second = await _registrar(repo).execute(_request("Second"))

    assert second.medical_id.value == "2026000002"


async def test_registration_gives_up_after_repeated_collisions():
    repo = StaleCountPatientRepository(stale_counts=0)
    await _registrar(repo).execute(_request("First"))
    repo.stale_counts = 10

    with pytest.raises(DuplicateMedicalIdError):
        await _registrar(repo).execute(_request("Second"))

    assert repo.stale_counts == 10 - register_patient.MAX_MEDICAL_ID_ATTEMPTS


def test_register_patient_route(client):
    first = client.post(
        "/api/patients",
        json={"doctorId": "doctor-1", "firstName": "John", "lastName": "Smith", "dateOfBirth": "1980-04-02"},
    )
    second = client.post("/api/patients", json={"doctorId": "doctor-1", "firstName": "Ann", "lastName": "Lee"})

    assert first.status_code == 201
    patient = first.json()["data"]
    assert patient["firstName"] == "John"
    assert patient["dateOfBirth"] == "1980-04-02"
    assert len(patient["medicalId"]) == 10
    assert patient["medicalId"][:4] == str(datetime.utcnow().year)
    assert int(second.json()["data"]["medicalId"]) == int(patient["medicalId"]) + 1

    visit = client.post(f"/api/visits/create/{patient['patientId']}", json=None)
    assert visit.status_code == 201


def test_register_patient_requires_names(client):
    response = client.post("/api/patients", json={"doctorId": "doctor-1", "firstName": "", "lastName": "Lee"})

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_register_patient_rejects_blank_names(client):
    response = client.post("/api/patients", json={"doctorId": "doctor-1", "firstName": "   ", "lastName": "Lee"})

    assert response.status_code == 422
