from .visit_m import FormSlotMongo, PatientMongo, VisitFormsMongo, VisitMongo

DOCUMENT_MODELS = [VisitMongo, PatientMongo]

__all__ = ["DOCUMENT_MODELS", "FormSlotMongo", "PatientMongo", "VisitFormsMongo", "VisitMongo"]
