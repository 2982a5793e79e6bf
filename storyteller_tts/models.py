"""Data models for markup parsing and playback."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from storyteller_tts.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_VOICE_PREFERENCES,
    DEFAULT_RATE,
    DEFAULT_PITCH,
    DEFAULT_VOLUME,
    MARKUP_RATE,
    MARKUP_PITCH,
    MARKUP_VOLUME,
)


@dataclass(frozen=True)
class Prosody:
    rate: float = MARKUP_RATE
    pitch: float = MARKUP_PITCH
    volume: float = MARKUP_VOLUME
    language: Optional[str] = None


@dataclass(frozen=True)
class TextSegment:
    text: str
    rate: float = MARKUP_RATE
    pitch: float = MARKUP_PITCH
    volume: float = MARKUP_VOLUME
    language: Optional[str] = None


@dataclass(frozen=True)
class BreakSegment:
    duration_ms: int


Segment = Union[TextSegment, BreakSegment]


@dataclass(frozen=True)
class Voice:
    name: str
    language: str


@dataclass(frozen=True)
class UtteranceRequest:
    """Everything the synthesis backend needs for one text segment."""

    text: str
    voice: Optional[Voice]
    rate: float
    pitch: float
    volume: float
    language: Optional[str] = None


class EngineState(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass
class SpeakOptions:
    language: str = DEFAULT_LANGUAGE
    voice_preferences: list[str] = field(default_factory=lambda: list(DEFAULT_VOICE_PREFERENCES))
    rate: float = DEFAULT_RATE
    pitch: float = DEFAULT_PITCH
    volume: float = DEFAULT_VOLUME
    use_ssml: bool = True
    on_end: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[[Exception], None]] = None

    def prosody(self) -> Prosody:
        """Caller's default prosody, used for plain (non-markup) text."""
        return Prosody(rate=self.rate, pitch=self.pitch, volume=self.volume, language=self.language)
