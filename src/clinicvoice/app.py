"""
FastAPI application factory for the ClinicVoice API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError
from .api.routers import health, medical_ai, patients, visits
from .api.schemas.common import ErrorResponse
from .core.config import get_settings
from .core.exceptions import ClinicVoiceException, ExternalServiceError
from .core.structured_logger import configure_logging
from .domain.errors import (
    DomainError,
    DuplicateMedicalIdError,
    DuplicateVisitNumberError,
    InvalidFormTypeError,
    PatientNotFoundError,
    VisitNotFoundError,
)
from .middleware.request_context_middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)

_DOMAIN_ERROR_STATUS = {
    PatientNotFoundError: 404,
    VisitNotFoundError: 404,
    InvalidFormTypeError: 404,
    DuplicateVisitNumberError: 409,
    DuplicateMedicalIdError: 409,
}


async def init_database(settings) -> None:
    """Connect Motor and register the Beanie document models."""
    from beanie import init_beanie
    from motor.motor_asyncio import AsyncIOMotorClient

    from .adapters.db.mongo.models import DOCUMENT_MODELS

    mongo_uri = settings.database.uri
    # Enable TLS only for Atlas SRV URIs
    if mongo_uri.startswith("mongodb+srv://"):
        import certifi

        client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=15000,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        client = AsyncIOMotorClient(mongo_uri, serverSelectionTimeoutMS=15000)

    await init_beanie(database=client[settings.database.db_name], document_models=DOCUMENT_MODELS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.app_env})")
    try:
        await init_database(settings)
        logger.info("Database connection established")
    except Exception as e:
        # The app still serves health and extraction routes without a database
        logger.error(f"Database connection failed: {type(e).__name__}: {e}", exc_info=True)
    yield
    logger.info(f"Shutting down {settings.app_name}")


def _error_body(request: Request, code: str, message: str, details=None) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return ErrorResponse(
        error=code,
        message=message,
        request_id=req_id or "",
        details=details or {},
    ).model_dump()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title=settings.app_name,
        description="Visit forms and voice dictation extraction for clinical practice",
        version=settings.app_version,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health.router)
    app.include_router(visits.router)
    app.include_router(patients.router)
    app.include_router(medical_ai.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = _DOMAIN_ERROR_STATUS.get(type(exc), 400)
        logger.warning(f"DomainError: {exc.error_code} ({status_code}) {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content=_error_body(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message}")
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_body(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error_messages = []
        for error in exc.errors():
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            error_messages.append(f"{loc}: {error.get('msg', 'Validation error')}")
        logger.warning(f"ValidationError on {request.method} {request.url.path}: {error_messages}")
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request,
                "INVALID_INPUT",
                "; ".join(error_messages) or "Invalid request",
                {"errors": error_messages},
            ),
        )

    @app.exception_handler(ClinicVoiceException)
    async def service_error_handler(request: Request, exc: ClinicVoiceException):
        status_code = 502 if isinstance(exc, ExternalServiceError) else 500
        logger.error(f"{type(exc).__name__}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content=_error_body(request, exc.error_code or "INTERNAL_ERROR", exc.message, exc.details),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {type(exc).__name__}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ),
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "create_visit": "POST /api/visits/create/{patient_id}",
                "list_visits": "GET /api/visits/patient/{patient_id}",
                "current_visit": "GET /api/visits/patient/{patient_id}/current",
                "get_visit": "GET /api/visits/{visit_id}",
                "save_form": "PUT /api/visits/{visit_id}/forms/{form_type}",
                "discharge": "POST /api/visits/{visit_id}/discharge",
                "discharge_summary": "POST /api/visits/{visit_id}/discharge-summary",
                "delete_patient": "DELETE /api/patients/{patient_id}",
                "medical_ai": "POST /api/medical-ai",
            },
        }

    return app


app = create_app()
