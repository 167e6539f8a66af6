"""
Recognizer adapter tests: transcript accumulation, error classification
and the restart-on-already-running path.
"""

import pytest

from clinicvoice.voice.engine import EngineNotAllowedError
from clinicvoice.voice.errors import (
    AbortedByUser,
    DeviceUnavailable,
    NetworkError,
    NoSpeechDetected,
    PermissionDenied,
    RecognizerError,
    RecognizerStartFailed,
)
from clinicvoice.voice.recognizer import RecognizerAdapter, UpdateKind


@pytest.fixture
def updates():
    return []


@pytest.fixture
def adapter(engine, scheduler, updates):
    return RecognizerAdapter(engine, updates.append, language="en-GB", restart_delay=0.1, scheduler=scheduler)


def test_engine_configured_for_continuous_interim_recognition(engine, adapter):
    assert engine.continuous is True
    assert engine.interim_results is True
    assert engine.lang == "en-GB"


def test_final_segments_accumulate_and_interim_is_replaced(engine, adapter, updates):
    adapter.start()
    engine.say_interim("patient")
    engine.say_interim("patient has")
    engine.say_final("patient has fever")
    engine.say_interim("for three")

    assert [u.kind for u in updates] == [UpdateKind.STARTED] + [UpdateKind.RESULT] * 4
    assert adapter.final_transcript == "patient has fever "
    assert adapter.interim_transcript == "for three"
    assert updates[-1].live_text == "patient has fever for three"

    engine.say_final("for three days")
    assert adapter.final_transcript == "patient has fever for three days "
    assert adapter.interim_transcript == ""


def test_end_reports_final_text(engine, adapter, updates):
    adapter.start()
    engine.say_final("cough")
    adapter.stop()

    assert updates[-1].kind == UpdateKind.ENDED
    assert updates[-1].final_text == "cough "


@pytest.mark.parametrize(
    "code, error_class",
    [
        ("not-allowed", PermissionDenied),
        ("service-not-allowed", PermissionDenied),
        ("audio-capture", DeviceUnavailable),
        ("network", NetworkError),
        ("no-speech", NoSpeechDetected),
        ("aborted", AbortedByUser),
    ],
)
def test_engine_error_codes_are_classified(engine, adapter, updates, code, error_class):
    adapter.start()
    engine.emit_error(code)

    update = updates[-1]
    assert update.kind == UpdateKind.ERROR
    assert isinstance(update.error, error_class)
    assert update.error.engine_code == code


def test_unknown_error_code_keeps_the_code_in_the_message(engine, adapter, updates):
    adapter.start()
    engine.emit_error("bad-grammar")

    error = updates[-1].error
    assert isinstance(error, RecognizerError)
    assert error.user_message == "Speech recognition error: bad-grammar"


def test_start_on_running_engine_stops_and_retries(engine, adapter, scheduler, updates):
    engine.running = True

    adapter.start()

    assert adapter.restart_pending
    assert engine.stop_calls == 1
    # The stale instance's end event is not reported
    assert updates == []

    scheduler.advance(0.1)

    assert not adapter.restart_pending
    assert engine.start_calls == 2
    assert engine.running
    assert [u.kind for u in updates] == [UpdateKind.STARTED]


def test_failed_retry_reports_start_failure(engine, adapter, scheduler, updates):
    engine.running = True
    adapter.start()
    engine.running = True

    scheduler.advance(0.1)

    assert isinstance(updates[-1].error, RecognizerStartFailed)
    assert updates[-1].error.user_message == "Failed to start voice recognition"


def test_permission_refused_at_start(engine, adapter, updates):
    engine.start_errors.append(EngineNotAllowedError("denied"))

    adapter.start()

    assert updates[-1].kind == UpdateKind.ERROR
    assert isinstance(updates[-1].error, PermissionDenied)


def test_unexpected_start_failure(engine, adapter, updates):
    engine.start_errors.append(RuntimeError("no audio backend"))

    adapter.start()

    assert isinstance(updates[-1].error, RecognizerStartFailed)


def test_stop_cancels_pending_restart(engine, adapter, scheduler):
    engine.running = True
    adapter.start()

    adapter.stop()
    scheduler.advance(1.0)

    assert engine.start_calls == 1
    assert not adapter.restart_pending


def test_detach_silences_the_adapter(engine, adapter, updates):
    adapter.start()
    adapter.detach()
    updates.clear()

    engine.say_final("late text")
    adapter.start()

    assert updates == []
    assert engine.on_result is None
    assert engine.start_calls == 1
