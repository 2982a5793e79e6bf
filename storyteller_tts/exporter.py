"""Export rendered speech as MP3 with metadata tags."""

import json
import os
from datetime import datetime, timezone

from pydub import AudioSegment

from storyteller_tts.constants import OUTPUT_BITRATE, VERSION
from storyteller_tts.models import BreakSegment, Segment, TextSegment


def export(
    audio: AudioSegment,
    output_path: str,
    metadata: dict,
    segments: list[Segment],
    settings: dict,
) -> str:
    """Export rendered audio as MP3 with metadata tags.

    Creates:
      - <output_path> (the rendering)
      - <output_path without extension>.json (provenance manifest)

    Returns path to the MP3 file.
    """
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    tags = {}
    if metadata.get("title"):
        tags["title"] = metadata["title"]
    if metadata.get("author"):
        tags["artist"] = metadata["author"]

    audio.export(
        output_path,
        format="mp3",
        bitrate=OUTPUT_BITRATE,
        tags=tags,
    )

    breaks = [s for s in segments if isinstance(s, BreakSegment)]
    manifest = {
        "source": metadata.get("source", ""),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "metadata": {
            "title": metadata.get("title", ""),
            "author": metadata.get("author", ""),
        },
        "settings": settings,
        "stats": {
            "text_segments": sum(1 for s in segments if isinstance(s, TextSegment)),
            "breaks": len(breaks),
            "break_ms": sum(s.duration_ms for s in breaks),
            "duration_seconds": round(len(audio) / 1000, 1),
        },
    }

    manifest_path = os.path.splitext(output_path)[0] + ".json"
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    return output_path
