"""Sequential playback of parsed segments through a synthesis backend.

The scheduler is a single-threaded, callback-driven state machine. It has
two suspension points: waiting for the backend to report that an utterance
finished (or failed), and waiting for a break timer. Every continuation
carries the request generation it was created for; a continuation whose
generation is no longer current is discarded, so completions arriving after
cancel() or a superseding start() never touch the new queue.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable, Optional, Protocol

from storyteller_tts.errors import SynthesisError
from storyteller_tts.models import (
    BreakSegment,
    EngineState,
    Segment,
    TextSegment,
    UtteranceRequest,
    Voice,
)
from storyteller_tts.voices import resolve_voice

logger = logging.getLogger(__name__)


class SynthesisBackend(ABC):
    """A speech synthesizer that plays one utterance at a time.

    submit() returns immediately with a handle and later calls exactly one
    of on_end() or on_error(exc), never from inside submit() itself. After
    cancel(handle) neither is called.
    """

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def submit(
        self,
        request: UtteranceRequest,
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> Any:
        ...

    @abstractmethod
    def pause(self, handle: Any) -> None:
        ...

    @abstractmethod
    def resume(self, handle: Any) -> None:
        ...

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Timer(ABC):
    """Delay primitive used for break segments.

    The continuation runs after the delay, never from inside after().
    """

    @abstractmethod
    def after(self, delay_ms: int, continuation: Callable[[], None]) -> TimerHandle:
        ...


class VoiceCatalog(Protocol):
    def list(self) -> list[Voice]:
        ...


class PlaybackScheduler:
    """Consume a segment queue, one segment at a time."""

    def __init__(self, backend: SynthesisBackend, timer: Timer, catalog: VoiceCatalog):
        self._backend = backend
        self._timer = timer
        self._catalog = catalog

        self._state = EngineState.IDLE
        self._generation = 0
        self._queue: deque[Segment] = deque()
        self._utterance = None          # backend handle of the in-flight utterance
        self._break_timer = None        # pending break timer handle
        self._held = False              # a break elapsed while paused
        self._language = ""
        self._preferences: list[str] = []
        self._on_end: Optional[Callable[[], None]] = None
        self._on_error: Optional[Callable[[Exception], None]] = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def queue(self) -> tuple[Segment, ...]:
        """Segments not yet started."""
        return tuple(self._queue)

    @property
    def speaking(self) -> bool:
        return self._state is EngineState.SPEAKING

    def start(
        self,
        segments: list[Segment],
        language: str,
        preferences: list[str],
        on_end: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """Replace whatever is playing with a new request and begin consuming it."""
        self.cancel()
        self._queue = deque(segments)
        self._language = language
        self._preferences = list(preferences)
        self._on_end = on_end
        self._on_error = on_error
        self._generation += 1
        self._state = EngineState.SPEAKING
        logger.debug("Request %d started with %d segments", self._generation, len(self._queue))
        self._advance(self._generation)

    def pause(self) -> None:
        if self._state is not EngineState.SPEAKING:
            return
        if self._utterance is not None:
            self._backend.pause(self._utterance)
        self._state = EngineState.PAUSED
        logger.debug("Request %d paused", self._generation)

    def resume(self) -> None:
        if self._state is not EngineState.PAUSED:
            return
        self._state = EngineState.SPEAKING
        logger.debug("Request %d resumed", self._generation)
        if self._held:
            self._held = False
            self._advance(self._generation)
        elif self._utterance is not None:
            self._backend.resume(self._utterance)

    def cancel(self) -> None:
        """Stop playback and drop the queue. Safe to call repeatedly."""
        self._generation += 1
        if self._break_timer is not None:
            self._break_timer.cancel()
            self._break_timer = None
        if self._utterance is not None:
            utterance, self._utterance = self._utterance, None
            self._backend.cancel(utterance)
        self._queue.clear()
        self._held = False
        self._on_end = None
        self._on_error = None
        self._state = EngineState.IDLE

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug("Ignoring event from stale request %d (current %d)", generation, self._generation)
            return True
        return False

    def _advance(self, generation: int) -> None:
        if self._is_stale(generation):
            return
        self._utterance = None
        self._break_timer = None

        if self._state is EngineState.PAUSED:
            self._held = True
            return

        if not self._queue:
            self._finish()
            return

        segment = self._queue.popleft()
        if isinstance(segment, BreakSegment):
            try:
                self._break_timer = self._timer.after(
                    segment.duration_ms, lambda: self._advance(generation)
                )
            except Exception as e:
                self._fail(generation, e, "")
            return

        self._speak_segment(segment, generation)

    def _speak_segment(self, segment: TextSegment, generation: int) -> None:
        language = segment.language or self._language
        voice = resolve_voice(language, self._preferences, self._catalog.list())
        request = UtteranceRequest(
            text=segment.text,
            voice=voice,
            rate=segment.rate,
            pitch=segment.pitch,
            volume=segment.volume,
            language=language,
        )
        try:
            self._utterance = self._backend.submit(
                request,
                lambda: self._advance(generation),
                lambda error: self._fail(generation, error, segment.text),
            )
        except Exception as e:
            self._fail(generation, e, segment.text)

    def _finish(self) -> None:
        on_end = self._on_end
        self._on_end = None
        self._on_error = None
        self._state = EngineState.IDLE
        logger.debug("Request %d finished", self._generation)
        if on_end:
            on_end()

    def _fail(self, generation: int, error: Exception, text: str) -> None:
        if self._is_stale(generation):
            return
        if not isinstance(error, SynthesisError):
            synthesis_error = SynthesisError(str(error) or type(error).__name__, text=text)
            synthesis_error.__cause__ = error
            error = synthesis_error
        logger.error("Speech synthesis error: %s", error)

        on_error = self._on_error
        self._generation += 1
        self._utterance = None
        self._break_timer = None
        self._queue.clear()
        self._held = False
        self._on_end = None
        self._on_error = None
        self._state = EngineState.IDLE
        if on_error:
            on_error(error)
