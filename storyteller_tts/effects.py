"""Audio effects applied to synthesized utterances."""

import numpy as np
from pydub import AudioSegment


def apply_volume(audio: AudioSegment, volume: float) -> AudioSegment:
    """Scale an AudioSegment by a linear volume in [0, 1].

    Speech markup expresses volume linearly (silent=0, x-loud=1.0), which
    dB gain cannot represent at zero, so samples are scaled directly.
    """
    volume = min(max(volume, 0.0), 1.0)
    if volume == 1.0:
        return audio

    audio = audio.set_sample_width(2)
    samples = np.array(audio.get_array_of_samples(), dtype=np.float32)
    scaled = np.clip(samples * volume, -32768, 32767).astype(np.int16)

    return AudioSegment(
        data=scaled.tobytes(),
        sample_width=2,
        frame_rate=audio.frame_rate,
        channels=audio.channels,
    )
