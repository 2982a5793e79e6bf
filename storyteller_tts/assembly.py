"""Render spoken markup offline into a single AudioSegment."""

import asyncio
from typing import Callable, Optional

from pydub import AudioSegment

from storyteller_tts.engine import SpeechEngine
from storyteller_tts.errors import UnsupportedPlatformError
from storyteller_tts.models import SpeakOptions
from storyteller_tts.scheduler import SynthesisBackend, Timer, VoiceCatalog
from storyteller_tts.tts import EdgeTTSBackend


class Timeline:
    """Ordered utterance clips and break silences of one render."""

    def __init__(self):
        self._clips: list[AudioSegment] = []

    def add_clip(self, audio: AudioSegment) -> None:
        self._clips.append(audio)

    def add_silence(self, duration_ms: int) -> None:
        if duration_ms > 0:
            self._clips.append(AudioSegment.silent(duration=duration_ms))

    def __len__(self) -> int:
        return len(self._clips)

    @property
    def duration_ms(self) -> int:
        return sum(len(clip) for clip in self._clips)

    def render(self) -> AudioSegment:
        if not self._clips:
            return AudioSegment.silent(duration=0)

        result = self._clips[0]
        for clip in self._clips[1:]:
            result += clip
        return result


class RenderTimer(Timer):
    """Break timer that records silence instead of waiting for it."""

    def __init__(self, timeline: Timeline, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._timeline = timeline
        self._loop = loop

    def after(self, delay_ms: int, continuation: Callable[[], None]) -> asyncio.Handle:
        loop = self._loop or asyncio.get_running_loop()
        self._timeline.add_silence(delay_ms)
        return loop.call_soon(continuation)


async def render_markup(
    markup: str,
    options: Optional[SpeakOptions] = None,
    catalog: Optional[VoiceCatalog] = None,
    backend_factory: Callable[..., SynthesisBackend] = EdgeTTSBackend,
) -> AudioSegment:
    """Speak markup into a timeline and return the rendered audio.

    backend_factory is called with sink=<timeline clip collector>.
    Raises UnsupportedPlatformError when the backend is unavailable and
    re-raises the SynthesisError that aborted the request.
    """
    loop = asyncio.get_running_loop()
    timeline = Timeline()
    engine = SpeechEngine(backend_factory(sink=timeline.add_clip), catalog, RenderTimer(timeline))
    if not engine.is_supported():
        raise UnsupportedPlatformError("Speech synthesis backend is not available (is ffmpeg installed?)")

    finished = loop.create_future()

    def on_end():
        if not finished.done():
            finished.set_result(None)

    def on_error(error):
        if not finished.done():
            finished.set_exception(error)

    engine.speak(markup, options, on_end=on_end, on_error=on_error)
    try:
        await finished
    finally:
        engine.cancel()

    return timeline.render()
