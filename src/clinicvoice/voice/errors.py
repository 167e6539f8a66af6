"""
Speech capture and dictation error taxonomy.

Every error carries the user-facing message shown when it is surfaced,
and the engine error code it was classified from where there is one.
"""

from typing import Any, Dict, Optional

from ..core.exceptions import ClinicVoiceException


class VoiceCaptureError(ClinicVoiceException):
    """Base class for capture-session errors."""

    default_message = "Speech recognition error"
    error_code = "RECOGNIZER_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        engine_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.engine_code = engine_code
        super().__init__(message or self.default_message, type(self).error_code, details)

    @property
    def user_message(self) -> str:
        return self.message


class PermissionDenied(VoiceCaptureError):
    default_message = "Microphone permission denied. Please allow microphone access."
    error_code = "PERMISSION_DENIED"


class DeviceUnavailable(VoiceCaptureError):
    default_message = "Microphone not available or is being used by another application."
    error_code = "DEVICE_UNAVAILABLE"


class NetworkError(VoiceCaptureError):
    default_message = "Network error. Please check your connection."
    error_code = "NETWORK_ERROR"


class NoSpeechDetected(VoiceCaptureError):
    default_message = "No speech detected. Please try again."
    error_code = "NO_SPEECH"


class AbortedByUser(VoiceCaptureError):
    default_message = "Speech recognition was aborted."
    error_code = "ABORTED"


class RecognizerError(VoiceCaptureError):
    """Engine error code outside the known categories."""

    def __init__(self, engine_code: str) -> None:
        super().__init__(f"Speech recognition error: {engine_code}", engine_code)


class RecognizerStartFailed(VoiceCaptureError):
    default_message = "Failed to start voice recognition"
    error_code = "START_FAILED"


class SpeechNotSupported(VoiceCaptureError):
    default_message = "Speech recognition not supported"
    error_code = "NOT_SUPPORTED"


class ExtractionFailed(VoiceCaptureError):
    """The extraction call failed or returned unusable data."""

    default_message = "AI processing failed"
    error_code = "EXTRACTION_FAILED"

    def __init__(
        self,
        reason: str,
        form_type: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.form_type = form_type
        self.status = status
        super().__init__(
            details={"reason": reason, "form_type": form_type, "status": status},
        )

    def __str__(self) -> str:
        return f"{self.message}: {self.reason}"


class InvalidFocusTarget(VoiceCaptureError):
    """Focus points at a list row or column that no longer exists."""

    default_message = "Focused field no longer exists"
    error_code = "INVALID_FOCUS_TARGET"


_ENGINE_CODES = {
    "not-allowed": PermissionDenied,
    "service-not-allowed": PermissionDenied,
    "network": NetworkError,
    "no-speech": NoSpeechDetected,
    "audio-capture": DeviceUnavailable,
    "aborted": AbortedByUser,
}


def error_from_engine_code(code: str) -> VoiceCaptureError:
    """Classify a recognizer error code into the capture error taxonomy."""
    error_class = _ENGINE_CODES.get(code)
    if error_class is None:
        return RecognizerError(code)
    return error_class(engine_code=code)
