"""
Capture session state machine.

One session owns one recognizer adapter and moves through
IDLE -> COUNTING_DOWN -> LISTENING -> PROCESSING -> IDLE. Every state
change goes through ``_transition``; ``stopped_manually`` separates a
user stop (which delivers or extracts the transcript) from the engine
ending on its own after a silence gap (which does nothing).
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional, Protocol

from ..core.config import VoiceSettings
from ..core.structured_logger import get_logger
from .engine import RecognitionEngine
from .errors import AbortedByUser, ExtractionFailed, SpeechNotSupported, VoiceCaptureError
from .notifications import (
    AI_PROCESSING_FAILED,
    FORM_AUTO_FILLED,
    LISTENING_STARTED,
    Notifier,
    from_error,
    log_notification,
)
from .recognizer import RecognizerAdapter, RecognizerUpdate, UpdateKind
from .scheduler import Scheduler, TimerHandle

logger = get_logger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    COUNTING_DOWN = "counting_down"
    LISTENING = "listening"
    PROCESSING = "processing"


class CaptureMode(str, Enum):
    RAW = "raw"
    AI_EXTRACT = "ai"


_ALLOWED_TRANSITIONS: Dict[CaptureState, FrozenSet[CaptureState]] = {
    # IDLE -> PROCESSING is a retry of a failed extraction
    CaptureState.IDLE: frozenset({CaptureState.COUNTING_DOWN, CaptureState.LISTENING, CaptureState.PROCESSING}),
    CaptureState.COUNTING_DOWN: frozenset({CaptureState.IDLE, CaptureState.LISTENING}),
    CaptureState.LISTENING: frozenset({CaptureState.IDLE, CaptureState.PROCESSING}),
    CaptureState.PROCESSING: frozenset({CaptureState.IDLE}),
}


class InvalidTransition(RuntimeError):
    def __init__(self, current: CaptureState, target: CaptureState) -> None:
        super().__init__(f"Illegal capture transition {current.value} -> {target.value}")
        self.current = current
        self.target = target


class Extractor(Protocol):
    def extract(self, transcript: str, form_type: str) -> Awaitable[Any]: ...


@dataclass(frozen=True)
class SessionStatus:
    state: CaptureState
    countdown_remaining: int = 0
    interim_text: str = ""


class CaptureSession:
    """Speech capture for one form control.

    In RAW mode live text goes to ``on_transcript`` on every recognizer
    result and the trimmed final text on a manual stop. In AI_EXTRACT mode
    the final text is sent to ``extractor`` on a manual stop and the result
    goes to ``on_extraction``.
    """

    def __init__(
        self,
        engine: Optional[RecognitionEngine],
        *,
        mode: CaptureMode = CaptureMode.AI_EXTRACT,
        form_type: Optional[str] = None,
        extractor: Optional[Extractor] = None,
        on_transcript: Optional[Callable[[str], None]] = None,
        on_extraction: Optional[Callable[[Any], None]] = None,
        on_status: Optional[Callable[[SessionStatus], None]] = None,
        notifier: Optional[Notifier] = None,
        countdown_seconds: int = 3,
        language: str = "en-US",
        restart_delay: float = 0.1,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        if mode == CaptureMode.AI_EXTRACT and (extractor is None or not form_type):
            raise ValueError("AI extraction mode needs an extractor and a form type")
        if countdown_seconds < 0:
            raise ValueError("Countdown cannot be negative")

        self._mode = mode
        self._form_type = form_type
        self._extractor = extractor
        self._on_transcript = on_transcript
        self._on_extraction = on_extraction
        self._on_status = on_status
        self._notify = notifier or log_notification
        self._countdown_seconds = countdown_seconds
        self._scheduler = scheduler

        self._state = CaptureState.IDLE
        self._stopped_manually = False
        self._countdown_remaining = 0
        self._countdown_handle: Optional[TimerHandle] = None
        self._pending_transcript: Optional[str] = None
        self._extraction_task: Optional[asyncio.Task] = None
        self._closed = False

        self._adapter: Optional[RecognizerAdapter] = None
        if engine is None:
            self._notify(from_error(SpeechNotSupported()))
            logger.warning("Speech recognition not supported; capture disabled")
        else:
            adapter_kwargs: Dict[str, Any] = {"language": language, "restart_delay": restart_delay}
            if scheduler is not None:
                adapter_kwargs["scheduler"] = scheduler
            self._adapter = RecognizerAdapter(engine, self._on_recognizer_update, **adapter_kwargs)

    @classmethod
    def from_settings(
        cls,
        engine: Optional[RecognitionEngine],
        settings: VoiceSettings,
        **kwargs: Any,
    ) -> "CaptureSession":
        return cls(
            engine,
            countdown_seconds=settings.countdown_seconds,
            language=settings.language,
            restart_delay=settings.restart_delay_seconds,
            **kwargs,
        )

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    @property
    def form_type(self) -> Optional[str]:
        return self._form_type

    @property
    def supported(self) -> bool:
        return self._adapter is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stopped_manually(self) -> bool:
        return self._stopped_manually

    @property
    def countdown_remaining(self) -> int:
        return self._countdown_remaining

    @property
    def final_transcript(self) -> str:
        return self._adapter.final_transcript if self._adapter else ""

    @property
    def interim_transcript(self) -> str:
        return self._adapter.interim_transcript if self._adapter else ""

    @property
    def pending_transcript(self) -> Optional[str]:
        """Transcript of the last failed extraction, kept for ``retry_extraction``."""
        return self._pending_transcript

    @property
    def extraction_task(self) -> Optional[asyncio.Task]:
        return self._extraction_task

    def start(self) -> bool:
        """Begin a new recording. Returns False when the request is ignored."""
        if self._closed or self._adapter is None:
            logger.debug("Start ignored: session unavailable", closed=self._closed)
            return False
        if self._state != CaptureState.IDLE:
            logger.debug("Start ignored: session busy", state=self._state.value)
            return False

        self._adapter.reset_transcripts()
        self._pending_transcript = None
        self._stopped_manually = False

        if self._countdown_seconds > 0:
            self._countdown_remaining = self._countdown_seconds
            self._transition(CaptureState.COUNTING_DOWN)
            self._countdown_handle = self._call_later(1.0, self._countdown_tick)
        else:
            self._begin_listening()
        return True

    def stop(self) -> bool:
        """Stop a countdown (nothing recorded) or a recording (final text is used)."""
        if self._state == CaptureState.COUNTING_DOWN:
            self._cancel_countdown()
            self._transition(CaptureState.IDLE)
            return True
        if self._state == CaptureState.LISTENING and self._adapter is not None:
            if self._adapter.restart_pending:
                # Engine never came back up, so no end event will follow
                self._adapter.stop()
                self._transition(CaptureState.IDLE)
                return True
            self._stopped_manually = True
            self._adapter.stop()
            return True
        return False

    def toggle(self) -> bool:
        """Microphone button: stop when recording or counting down, otherwise start."""
        if self._state in (CaptureState.LISTENING, CaptureState.COUNTING_DOWN):
            return self.stop()
        return self.start()

    def retry_extraction(self) -> bool:
        """Re-send the transcript kept after a failed extraction."""
        if (
            self._closed
            or self._mode != CaptureMode.AI_EXTRACT
            or self._state != CaptureState.IDLE
            or not self._pending_transcript
        ):
            return False
        self._begin_extraction(self._pending_transcript)
        return True

    def close(self) -> None:
        """Tear the session down: cancel timers and detach the recognizer.

        An extraction already in flight is allowed to finish.
        """
        if self._closed:
            return
        self._cancel_countdown()
        if self._adapter is not None:
            self._adapter.detach()
        if self._state in (CaptureState.COUNTING_DOWN, CaptureState.LISTENING):
            self._transition(CaptureState.IDLE)
        self._closed = True
        logger.debug("Capture session closed", form_type=self._form_type)

    def _transition(self, target: CaptureState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self._state]:
            raise InvalidTransition(self._state, target)
        previous = self._state
        self._state = target
        if target != CaptureState.COUNTING_DOWN:
            self._countdown_remaining = 0
        logger.debug(
            "Capture state change",
            from_state=previous.value,
            to_state=target.value,
            mode=self._mode.value,
            form_type=self._form_type,
        )
        self._publish_status()

    def _publish_status(self) -> None:
        if self._on_status is not None:
            self._on_status(
                SessionStatus(self._state, self._countdown_remaining, self.interim_transcript)
            )

    def _call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if self._scheduler is not None:
            return self._scheduler.call_later(delay, callback)
        return asyncio.get_running_loop().call_later(delay, callback)

    def _cancel_countdown(self) -> None:
        if self._countdown_handle is not None:
            self._countdown_handle.cancel()
            self._countdown_handle = None

    def _countdown_tick(self) -> None:
        self._countdown_handle = None
        if self._state != CaptureState.COUNTING_DOWN:
            return
        self._countdown_remaining -= 1
        if self._countdown_remaining > 0:
            self._publish_status()
            self._countdown_handle = self._call_later(1.0, self._countdown_tick)
        else:
            self._begin_listening()

    def _begin_listening(self) -> None:
        self._transition(CaptureState.LISTENING)
        self._adapter.start()
        # Start errors are reported synchronously and already moved us back to IDLE
        if self._state == CaptureState.LISTENING:
            self._notify(LISTENING_STARTED)

    def _on_recognizer_update(self, update: RecognizerUpdate) -> None:
        if update.kind == UpdateKind.STARTED:
            logger.debug("Recognizer started", form_type=self._form_type)
        elif update.kind == UpdateKind.RESULT:
            self._handle_result(update)
        elif update.kind == UpdateKind.ERROR:
            self._handle_error(update.error)
        elif update.kind == UpdateKind.ENDED:
            self._handle_end(update)

    def _handle_result(self, update: RecognizerUpdate) -> None:
        if self._state != CaptureState.LISTENING:
            return
        if self._mode == CaptureMode.RAW and self._on_transcript is not None:
            live_text = update.live_text
            if live_text:
                self._on_transcript(live_text)
        self._publish_status()

    def _handle_error(self, error: Optional[VoiceCaptureError]) -> None:
        if error is not None:
            if isinstance(error, AbortedByUser):
                logger.info("Capture aborted", form_type=self._form_type)
            else:
                logger.warning(
                    "Capture error",
                    error_code=error.error_code,
                    engine_code=error.engine_code,
                    form_type=self._form_type,
                )
            self._notify(from_error(error))
        if self._state == CaptureState.LISTENING:
            self._transition(CaptureState.IDLE)

    def _handle_end(self, update: RecognizerUpdate) -> None:
        if self._state != CaptureState.LISTENING:
            return
        if not self._stopped_manually:
            logger.debug("Recognizer ended on its own; transcript not delivered", form_type=self._form_type)
            self._transition(CaptureState.IDLE)
            return

        text = update.final_text.strip()
        if self._mode == CaptureMode.RAW:
            if text and self._on_transcript is not None:
                self._on_transcript(text)
            self._transition(CaptureState.IDLE)
        elif text:
            self._begin_extraction(text)
        else:
            self._transition(CaptureState.IDLE)

    def _begin_extraction(self, text: str) -> None:
        self._pending_transcript = text
        self._transition(CaptureState.PROCESSING)
        self._extraction_task = asyncio.ensure_future(self._run_extraction(text))

    async def _run_extraction(self, text: str) -> None:
        try:
            result = await self._extractor.extract(text, self._form_type)
            if self._on_extraction is not None:
                self._on_extraction(result)
        except ExtractionFailed as e:
            logger.error(
                "Extraction failed; transcript kept for retry",
                form_type=self._form_type,
                reason=e.reason,
                status=e.status,
            )
            self._notify(AI_PROCESSING_FAILED)
        except Exception as e:
            logger.error(
                "Extraction could not be applied; transcript kept for retry",
                form_type=self._form_type,
                error=f"{type(e).__name__}: {e}",
                exc_info=True,
            )
            self._notify(AI_PROCESSING_FAILED)
        else:
            self._pending_transcript = None
            self._notify(FORM_AUTO_FILLED)
        finally:
            if self._state == CaptureState.PROCESSING:
                self._transition(CaptureState.IDLE)
