"""Speech capture: recognition engine contract, recognizer adapter and capture sessions."""

from .capture_session import CaptureMode, CaptureSession, CaptureState, SessionStatus
from .engine import (
    EngineInvalidStateError,
    EngineNotAllowedError,
    RecognitionEngine,
    RecognitionResultEvent,
    RecognitionSegment,
)
from .recognizer import RecognizerAdapter, RecognizerUpdate, UpdateKind

__all__ = [
    "CaptureMode",
    "CaptureSession",
    "CaptureState",
    "EngineInvalidStateError",
    "EngineNotAllowedError",
    "RecognitionEngine",
    "RecognitionResultEvent",
    "RecognitionSegment",
    "RecognizerAdapter",
    "RecognizerUpdate",
    "SessionStatus",
    "UpdateKind",
]
