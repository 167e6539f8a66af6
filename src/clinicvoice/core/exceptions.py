"""
Exception handling for the ClinicVoice application.

This module provides the base exception classes shared by the server
and client layers. Domain-specific errors live in ``domain.errors`` and
speech-capture errors in ``voice.errors``.
"""

from typing import Any, Dict, Optional


class ClinicVoiceException(Exception):
    """Base exception class for ClinicVoice application."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ClinicVoiceException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class ExternalServiceError(ClinicVoiceException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class OpenAIError(ExternalServiceError):
    """Raised when there's an OpenAI API error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("OpenAI", message, details)
