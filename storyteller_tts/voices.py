"""Voice catalogs, voice resolution and per-document speak options."""

import json
import logging
import os

import edge_tts

from storyteller_tts.models import Voice, SpeakOptions
from storyteller_tts.constants import VOICE_POOL

logger = logging.getLogger(__name__)

# Sidecar keys accepted from <base>.voice.json
OPTION_KEYS = ("language", "voice_preferences", "rate", "pitch", "volume", "use_ssml")


def _normalize_language(code: str) -> str:
    return code.replace("_", "-").lower()


def _primary_subtag(code: str) -> str:
    return _normalize_language(code).split("-")[0]


def resolve_voice(language: str, preferences: list[str], voices: list[Voice]) -> Voice | None:
    """Pick a voice for a language.

    Priority: preference substring in the voice name (in preference order)
    → exact language code → same primary language subtag → first voice.
    Returns None only for an empty catalog.
    """
    for preference in preferences:
        needle = preference.lower()
        for voice in voices:
            if needle in voice.name.lower():
                return voice

    wanted = _normalize_language(language)
    for voice in voices:
        if _normalize_language(voice.language) == wanted:
            return voice

    primary = _primary_subtag(language)
    for voice in voices:
        if _primary_subtag(voice.language) == primary:
            return voice

    return voices[0] if voices else None


def _voice_from_short_name(name: str) -> Voice:
    """Derive the locale from a short name: en-IN-NeerjaNeural → en-IN."""
    parts = name.split("-")
    language = "-".join(parts[:2]) if len(parts) > 2 else parts[0]
    return Voice(name=name, language=language)


class StaticVoiceCatalog:
    """A fixed list of voices; defaults to the bundled neural voice pool."""

    def __init__(self, voices: list[Voice] | None = None):
        if voices is None:
            voices = [_voice_from_short_name(name) for name in VOICE_POOL]
        self._voices = list(voices)

    def list(self) -> list[Voice]:
        return list(self._voices)


class EdgeVoiceCatalog:
    """Voices published by the edge-tts service.

    The list is empty until refresh() has been awaited, mirroring hosts that
    populate their voice list lazily.
    """

    def __init__(self):
        self._voices: list[Voice] = []

    async def refresh(self) -> list[Voice]:
        entries = await edge_tts.list_voices()
        self._voices = [
            Voice(name=entry["ShortName"], language=entry["Locale"])
            for entry in entries
        ]
        logger.debug("Loaded %d edge-tts voices", len(self._voices))
        return self.list()

    def list(self) -> list[Voice]:
        return list(self._voices)


def load_options(markup_path: str) -> dict:
    """Load the .voice.json sidecar file next to a markup document.

    Returns the options dict or an empty dict if not found or malformed.
    """
    base = os.path.splitext(markup_path)[0]
    options_path = base + ".voice.json"
    if not os.path.exists(options_path):
        return {}
    try:
        with open(options_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Malformed voice options file: %s — using defaults", options_path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Voice options file is not an object: %s — using defaults", options_path)
        return {}
    return {key: data[key] for key in OPTION_KEYS if key in data}


def build_options(data: dict | None = None, **overrides) -> SpeakOptions:
    """Build SpeakOptions from sidecar data, then keyword overrides.

    Overrides whose value is None are ignored so CLI flags that were not
    given fall through to the sidecar or the defaults.
    """
    values = dict(data or {})
    values.update({key: value for key, value in overrides.items() if value is not None})
    if "voice_preferences" in values:
        values["voice_preferences"] = list(values["voice_preferences"])
    return SpeakOptions(**values)
