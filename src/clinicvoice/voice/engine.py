"""
Recognition engine contract.

A continuous, interim-enabled speech recognizer as exposed by browsers:
configuration attributes, four handler slots and start/stop/abort.
Concrete engines live outside this package; tests drive a scripted fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional


class EngineInvalidStateError(Exception):
    """``start()`` was called on an engine that is already running."""


class EngineNotAllowedError(Exception):
    """The platform refused microphone access when starting the engine."""


@dataclass(frozen=True)
class RecognitionSegment:
    transcript: str
    is_final: bool = False


@dataclass(frozen=True)
class RecognitionResultEvent:
    """Results delivered so far in this engine session.

    ``results`` only grows; entries before ``result_index`` were already
    delivered by earlier events.
    """

    result_index: int
    results: List[RecognitionSegment] = field(default_factory=list)


class RecognitionEngine(ABC):
    """Abstract continuous speech recognizer."""

    continuous: bool = False
    interim_results: bool = False
    lang: str = "en-US"

    on_start: Optional[Callable[[], None]] = None
    on_result: Optional[Callable[[RecognitionResultEvent], None]] = None
    on_error: Optional[Callable[[str], None]] = None
    on_end: Optional[Callable[[], None]] = None

    @abstractmethod
    def start(self) -> None:
        """Begin capturing audio. Raises EngineInvalidStateError when already running."""

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing; pending audio is still recognized before ``on_end``."""

    @abstractmethod
    def abort(self) -> None:
        """Stop capturing and discard pending audio."""
