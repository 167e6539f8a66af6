"""
Recognizer adapter: owns one recognition engine for one capture session.

The adapter configures the engine for continuous interim recognition,
accumulates final and interim transcript text, classifies engine error
codes, and reports everything to its listener as ``RecognizerUpdate``s.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .engine import (
    EngineInvalidStateError,
    EngineNotAllowedError,
    RecognitionEngine,
    RecognitionResultEvent,
)
from .errors import (
    AbortedByUser,
    PermissionDenied,
    RecognizerStartFailed,
    VoiceCaptureError,
    error_from_engine_code,
)
from .scheduler import LoopScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class UpdateKind(str, Enum):
    STARTED = "started"
    RESULT = "result"
    ERROR = "error"
    ENDED = "ended"


@dataclass(frozen=True)
class RecognizerUpdate:
    kind: UpdateKind
    final_text: str = ""
    interim_text: str = ""
    error: Optional[VoiceCaptureError] = None

    @property
    def live_text(self) -> str:
        """Everything heard so far, including the unfinished utterance."""
        return f"{self.final_text}{self.interim_text}".strip()


RecognizerListener = Callable[[RecognizerUpdate], None]


class RecognizerAdapter:
    """Wraps one engine instance. Never shared between sessions."""

    def __init__(
        self,
        engine: RecognitionEngine,
        listener: RecognizerListener,
        *,
        language: str = "en-US",
        restart_delay: float = 0.1,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._engine = engine
        self._listener = listener
        self._restart_delay = restart_delay
        self._scheduler = scheduler or LoopScheduler()
        self._restart_handle: Optional[TimerHandle] = None
        self._restarting = False
        self._final = ""
        self._interim = ""
        self._detached = False

        engine.continuous = True
        engine.interim_results = True
        engine.lang = language
        engine.on_start = self._handle_start
        engine.on_result = self._handle_result
        engine.on_error = self._handle_error
        engine.on_end = self._handle_end

    @property
    def final_transcript(self) -> str:
        return self._final

    @property
    def interim_transcript(self) -> str:
        return self._interim

    @property
    def restart_pending(self) -> bool:
        return self._restarting

    def reset_transcripts(self) -> None:
        self._final = ""
        self._interim = ""

    def start(self) -> None:
        """Start the engine; failures are reported to the listener, not raised."""
        if self._detached:
            return
        try:
            self._engine.start()
        except EngineInvalidStateError:
            logger.warning("Recognizer already running; stopping it and retrying start")
            self._restarting = True
            self._stop_engine()
            self._restart_handle = self._scheduler.call_later(self._restart_delay, self._retry_start)
        except EngineNotAllowedError as e:
            self._emit_error(PermissionDenied(engine_code="not-allowed", details={"reason": str(e)}))
        except Exception as e:
            logger.error(f"Recognizer start failed: {e}", exc_info=True)
            self._emit_error(RecognizerStartFailed(f"Failed to start voice recognition: {e}"))

    def stop(self) -> None:
        self._cancel_restart()
        self._stop_engine()

    def detach(self) -> None:
        """Stop the engine and drop its handlers. The adapter is unusable afterwards."""
        if self._detached:
            return
        self._cancel_restart()
        self._stop_engine()
        self._engine.on_start = None
        self._engine.on_result = None
        self._engine.on_error = None
        self._engine.on_end = None
        self._detached = True

    def _retry_start(self) -> None:
        self._restart_handle = None
        self._restarting = False
        if self._detached:
            return
        try:
            self._engine.start()
        except (EngineInvalidStateError, EngineNotAllowedError) as e:
            logger.error(f"Recognizer retry start failed: {type(e).__name__}: {e}")
            self._emit_error(RecognizerStartFailed())

    def _cancel_restart(self) -> None:
        self._restarting = False
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    def _stop_engine(self) -> None:
        try:
            self._engine.stop()
        except EngineInvalidStateError:
            logger.debug("Recognizer stop requested while not running")

    def _emit(self, update: RecognizerUpdate) -> None:
        if not self._detached:
            self._listener(update)

    def _emit_error(self, error: VoiceCaptureError) -> None:
        self._interim = ""
        self._emit(RecognizerUpdate(UpdateKind.ERROR, self._final, "", error))

    def _handle_start(self) -> None:
        self._final = ""
        self._interim = ""
        self._emit(RecognizerUpdate(UpdateKind.STARTED))

    def _handle_result(self, event: RecognitionResultEvent) -> None:
        interim_parts = []
        for segment in event.results[event.result_index:]:
            if segment.is_final:
                self._final += segment.transcript + " "
            else:
                interim_parts.append(segment.transcript)
        self._interim = "".join(interim_parts)
        self._emit(RecognizerUpdate(UpdateKind.RESULT, self._final, self._interim))

    def _handle_error(self, code: str) -> None:
        error = error_from_engine_code(code)
        if isinstance(error, AbortedByUser):
            logger.info("Speech recognition aborted")
        else:
            logger.error(f"Speech recognition error: {code}")
        self._emit_error(error)

    def _handle_end(self) -> None:
        if self._restarting:
            # End of the stale instance stopped before the retry
            logger.debug("Ignoring end event during restart window")
            return
        self._interim = ""
        self._emit(RecognizerUpdate(UpdateKind.ENDED, self._final, ""))
