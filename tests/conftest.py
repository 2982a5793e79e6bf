"""Shared fixtures and test doubles for storyteller_tts tests."""

import io

import pytest
from pydub import AudioSegment

from storyteller_tts.models import Voice
from storyteller_tts.scheduler import PlaybackScheduler, SynthesisBackend, Timer
from storyteller_tts.voices import StaticVoiceCatalog


class FakeBackend(SynthesisBackend):
    """Records submissions; tests decide when each one ends or fails."""

    def __init__(self, available=True):
        self.available = available
        self.submitted = []     # (request, on_end, on_error)
        self.paused = []
        self.resumed = []
        self.cancelled = []

    def is_available(self):
        return self.available

    def submit(self, request, on_end, on_error):
        self.submitted.append((request, on_end, on_error))
        return len(self.submitted) - 1

    def pause(self, handle):
        self.paused.append(handle)

    def resume(self, handle):
        self.resumed.append(handle)

    def cancel(self, handle):
        self.cancelled.append(handle)

    @property
    def texts(self):
        return [request.text for request, _, _ in self.submitted]

    def finish(self, index=-1):
        self.submitted[index][1]()

    def fail(self, error, index=-1):
        self.submitted[index][2](error)


class FakeTimerHandle:
    def __init__(self, delay_ms, continuation):
        self.delay_ms = delay_ms
        self.continuation = continuation
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def run(self):
        """Invoke the continuation even if cancelled (simulates a late timer)."""
        self.continuation()


class FakeTimer(Timer):
    def __init__(self):
        self.handles = []

    def after(self, delay_ms, continuation):
        handle = FakeTimerHandle(delay_ms, continuation)
        self.handles.append(handle)
        return handle

    def fire(self, index=-1):
        handle = self.handles[index]
        if not handle.cancelled:
            handle.continuation()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def offline_backend():
    """A backend reporting no synthesis capability."""
    return FakeBackend(available=False)


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def voices():
    return [
        Voice(name="Google Lekha", language="en-IN"),
        Voice(name="Google X", language="hi-IN"),
        Voice(name="Samantha", language="en-US"),
    ]


@pytest.fixture
def catalog(voices):
    return StaticVoiceCatalog(voices)


@pytest.fixture
def scheduler(backend, timer, catalog):
    return PlaybackScheduler(backend, timer, catalog)


@pytest.fixture
def tiny_mp3_bytes():
    """A 100ms silent MP3 as raw bytes."""
    buffer = io.BytesIO()
    AudioSegment.silent(duration=100).export(buffer, format="mp3")
    return buffer.getvalue()
