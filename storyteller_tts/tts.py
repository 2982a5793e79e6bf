"""Synthesis backend and timer for an asyncio host, using edge-tts."""

import asyncio
import io
import logging
import shutil
from typing import Callable, Optional

import edge_tts
from pydub import AudioSegment

from storyteller_tts.constants import NARRATOR_VOICE, PITCH_REFERENCE_HZ
from storyteller_tts.effects import apply_volume
from storyteller_tts.errors import SynthesisError
from storyteller_tts.models import UtteranceRequest
from storyteller_tts.scheduler import SynthesisBackend, Timer

logger = logging.getLogger(__name__)


def format_rate(rate: float) -> str:
    """Rate multiplier to edge-tts relative rate: 1.3 → "+30%", 0.9 → "-10%"."""
    return f"{round((rate - 1.0) * 100):+d}%"


def format_pitch(pitch: float) -> str:
    """Pitch multiplier to edge-tts relative pitch: 1.15 → "+15Hz"."""
    return f"{round((pitch - 1.0) * PITCH_REFERENCE_HZ):+d}Hz"


def _decode(data: bytes, volume: float) -> AudioSegment:
    audio = AudioSegment.from_file(io.BytesIO(data), format="mp3")
    return apply_volume(audio, volume)


class Utterance:
    """Handle for one submitted request."""

    def __init__(self, request: UtteranceRequest):
        self.request = request
        self.gate = asyncio.Event()     # cleared while paused
        self.gate.set()
        self.task: Optional[asyncio.Task] = None


class EdgeTTSBackend(SynthesisBackend):
    """Synthesize each utterance with edge-tts into a pydub AudioSegment.

    The decoded clip (volume applied) is handed to sink before on_end fires.
    Pausing holds both the audio stream and the delivery of the clip.
    """

    def __init__(
        self,
        sink: Optional[Callable[[AudioSegment], None]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._sink = sink
        self._loop = loop

    def is_available(self) -> bool:
        # pydub needs ffmpeg to decode the mp3 stream
        return shutil.which("ffmpeg") is not None

    def submit(self, request, on_end, on_error) -> Utterance:
        loop = self._loop or asyncio.get_running_loop()
        utterance = Utterance(request)
        utterance.task = loop.create_task(self._run(utterance, on_end, on_error))
        return utterance

    def pause(self, handle: Utterance) -> None:
        handle.gate.clear()

    def resume(self, handle: Utterance) -> None:
        handle.gate.set()

    def cancel(self, handle: Utterance) -> None:
        if handle.task is not None:
            handle.task.cancel()

    async def _run(self, utterance: Utterance, on_end, on_error) -> None:
        request = utterance.request
        try:
            audio = await self._synthesize(utterance)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if isinstance(e, SynthesisError):
                error = e
            else:
                error = SynthesisError(f"TTS failed for: {request.text[:50]}: {e}", text=request.text)
                error.__cause__ = e
            on_error(error)
            return

        await utterance.gate.wait()
        if self._sink is not None:
            self._sink(audio)
        on_end()

    async def _synthesize(self, utterance: Utterance) -> AudioSegment:
        request = utterance.request
        voice = request.voice.name if request.voice else NARRATOR_VOICE
        communicate = edge_tts.Communicate(
            request.text,
            voice,
            rate=format_rate(request.rate),
            pitch=format_pitch(request.pitch),
        )

        data = bytearray()
        async for chunk in communicate.stream():
            await utterance.gate.wait()
            if chunk["type"] == "audio":
                data.extend(chunk["data"])

        # Empty output counts as failure
        if not data:
            raise SynthesisError(f"TTS produced no audio for: {request.text[:50]}...", text=request.text)

        logger.debug("Synthesized %d bytes with %s", len(data), voice)
        # ffmpeg decode and numpy scaling run in a worker thread
        return await asyncio.to_thread(_decode, bytes(data), request.volume)


class AsyncioTimer(Timer):
    """Break timer backed by loop.call_later()."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def after(self, delay_ms: int, continuation: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, continuation)
