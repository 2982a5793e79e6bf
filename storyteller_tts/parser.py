"""Parse speech markup into an ordered list of text and break segments."""

import math
import re
from dataclasses import replace

from storyteller_tts.models import Prosody, TextSegment, BreakSegment, Segment
from storyteller_tts.constants import (
    BREAK_STRENGTHS,
    DEFAULT_BREAK_MS,
    RATE_VALUES,
    PITCH_VALUES,
    VOLUME_VALUES,
    EMPHASIS_STRONG,
    EMPHASIS_REDUCED,
    EMOJI_RANGES,
)

# Opening or closing tag: <break time="1s"/>, <emphasis level="strong">, </prosody>
_TAG_RE = re.compile(r"<(/?)([\w:-]+)([^>]*)>")

# Anything that looks like a tag, used when markup is disabled
_ANY_TAG_RE = re.compile(r"<[^>]+>")

# name="value" or name='value'
_ATTR_RE = re.compile(r"""([\w:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

# "500ms", "2s", "1.5s", or a bare millisecond count
_TIME_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s)?\s*$", re.IGNORECASE)

_WHITESPACE_RE = re.compile(r"\s+")

_EMOJI_RE = re.compile(
    "[" + "".join(
        re.escape(chr(start)) if start == end
        else f"{re.escape(chr(start))}-{re.escape(chr(end))}"
        for start, end in EMOJI_RANGES
    ) + "]"
)


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def remove_emojis(text: str) -> str:
    """Drop emoji and pictograph code points, collapse whitespace and trim."""
    return _collapse_whitespace(_EMOJI_RE.sub("", text))


def strip_markup(text: str) -> str:
    """Remove every tag and return the plain text."""
    return _collapse_whitespace(_ANY_TAG_RE.sub("", text))


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse the attribute portion of a tag into a lowercase-keyed dict."""
    attrs = {}
    for match in _ATTR_RE.finditer(raw):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs[match.group(1).lower()] = value.strip()
    return attrs


def parse_break_time(value: str) -> int | None:
    """Convert a break time attribute to milliseconds.

    Returns None when the value is not a recognizable duration.
    """
    match = _TIME_RE.match(value)
    if not match:
        return None
    amount = float(match.group(1))
    if (match.group(2) or "ms").lower() == "s":
        amount *= 1000
    return int(round(amount))


def resolve_break(attrs: dict[str, str]) -> int:
    """Break duration: explicit time, then named strength, then the default."""
    if "time" in attrs:
        duration = parse_break_time(attrs["time"])
        if duration is not None:
            return duration
    strength = attrs.get("strength")
    if strength is not None:
        return BREAK_STRENGTHS.get(strength.lower(), DEFAULT_BREAK_MS)
    return DEFAULT_BREAK_MS


def _resolve_level(value: str | None, table: dict[str, float]) -> float | None:
    """Look up a keyword, or accept a literal number."""
    if value is None:
        return None
    key = value.lower()
    if key in table:
        return table[key]
    try:
        number = float(key)
    except ValueError:
        return None
    # "nan" and "inf" parse as floats but are not usable levels
    return number if math.isfinite(number) else None


def _apply_emphasis(current: Prosody, level: str | None) -> Prosody:
    level = (level or "moderate").lower()
    if level in ("strong", "x-strong"):
        rate, pitch, volume = EMPHASIS_STRONG
    elif level == "reduced":
        rate, pitch, volume = EMPHASIS_REDUCED
    else:
        return current
    return replace(current, rate=rate, pitch=pitch, volume=volume)


def _apply_prosody(current: Prosody, attrs: dict[str, str]) -> Prosody:
    changes = {}
    for name, table in (("rate", RATE_VALUES), ("pitch", PITCH_VALUES), ("volume", VOLUME_VALUES)):
        value = _resolve_level(attrs.get(name), table)
        if value is not None:
            changes[name] = value
    return replace(current, **changes)


def _text_segment(text: str, prosody: Prosody) -> TextSegment:
    return TextSegment(
        text=text,
        rate=prosody.rate,
        pitch=prosody.pitch,
        volume=prosody.volume,
        language=prosody.language,
    )


def parse_markup(text: str, default: Prosody | None = None, use_ssml: bool = True) -> list[Segment]:
    """Parse markup text into an ordered list of Segments.

    Plain text (no tags, or use_ssml=False) becomes a single TextSegment under
    the caller's default prosody. Markup is scanned left to right: text is
    buffered under the prosody in effect and flushed at breaks, at
    prosody-changing opening tags, and at closing tags. Closing any tag
    resets prosody to the markup baseline; there is no nesting stack.
    """
    if default is None:
        default = Prosody()

    if not use_ssml or "<" not in text:
        clean = remove_emojis(strip_markup(text))
        return [_text_segment(clean, default)] if clean else []

    baseline = Prosody(language=default.language)
    current = baseline
    segments = []
    pending = []

    def flush():
        clean = remove_emojis("".join(pending))
        pending.clear()
        if clean:
            segments.append(_text_segment(clean, current))

    pos = 0
    for match in _TAG_RE.finditer(text):
        pending.append(text[pos:match.start()])
        pos = match.end()
        closing, name, raw_attrs = match.groups()
        name = name.lower()

        if closing:
            flush()
            current = baseline
            continue

        attrs = parse_attributes(raw_attrs)
        if name == "break":
            flush()
            segments.append(BreakSegment(duration_ms=resolve_break(attrs)))
        elif name == "emphasis":
            flush()
            current = _apply_emphasis(current, attrs.get("level"))
        elif name == "prosody":
            flush()
            current = _apply_prosody(current, attrs)
        elif name == "lang":
            language = attrs.get("xml:lang") or attrs.get("lang")
            if language:
                flush()
                current = replace(current, language=language)
        # say-as and unknown tags carry no directives; their markers are dropped

    pending.append(text[pos:])
    flush()
    return segments
