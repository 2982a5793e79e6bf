"""Public entry point: speak markup, pause, resume, cancel."""

import logging
from dataclasses import replace
from typing import Optional

from storyteller_tts.models import EngineState, SpeakOptions
from storyteller_tts.parser import parse_markup
from storyteller_tts.scheduler import PlaybackScheduler, SynthesisBackend, Timer, VoiceCatalog
from storyteller_tts.tts import AsyncioTimer
from storyteller_tts.voices import StaticVoiceCatalog

logger = logging.getLogger(__name__)


class SpeechEngine:
    """Speak markup through an injected synthesis backend.

    Usage:
        engine = SpeechEngine(EdgeTTSBackend(), EdgeVoiceCatalog(), AsyncioTimer())
        engine.speak('Hello <break time="300ms"/> world', on_end=done)

    A backend of None (or one reporting itself unavailable) makes speak() a
    logged no-op.
    """

    def __init__(
        self,
        backend: Optional[SynthesisBackend],
        catalog: Optional[VoiceCatalog] = None,
        timer: Optional[Timer] = None,
    ):
        self._backend = backend
        self._scheduler = None
        if backend is not None:
            self._scheduler = PlaybackScheduler(
                backend, timer or AsyncioTimer(), catalog or StaticVoiceCatalog()
            )

    def is_supported(self) -> bool:
        return self._backend is not None and self._backend.is_available()

    @property
    def state(self) -> EngineState:
        if self._scheduler is None:
            return EngineState.IDLE
        return self._scheduler.state

    @property
    def speaking(self) -> bool:
        """True while actively speaking (not paused, not idle)."""
        return self.state is EngineState.SPEAKING

    def speak(self, markup: str, options: Optional[SpeakOptions] = None, **overrides) -> None:
        """Parse markup and start speaking it, superseding any current request.

        Keyword overrides replace fields of options (e.g. on_end=..., rate=1.2).
        """
        if not self.is_supported():
            logger.warning("Speech synthesis not supported")
            return

        options = options or SpeakOptions()
        if overrides:
            options = replace(options, **overrides)

        segments = parse_markup(markup, options.prosody(), use_ssml=options.use_ssml)
        self._scheduler.start(
            segments,
            options.language,
            options.voice_preferences,
            on_end=options.on_end,
            on_error=options.on_error,
        )

    def pause(self) -> None:
        if self._scheduler is not None:
            self._scheduler.pause()

    def resume(self) -> None:
        if self._scheduler is not None:
            self._scheduler.resume()

    def cancel(self) -> None:
        if self._scheduler is not None:
            self._scheduler.cancel()
