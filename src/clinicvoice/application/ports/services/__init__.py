from .extraction_service import MedicalExtractionService

__all__ = ["MedicalExtractionService"]
