from .patient_repository import MongoPatientRepository
from .visit_repository import MongoVisitRepository

__all__ = ["MongoPatientRepository", "MongoVisitRepository"]
