"""CLI interface: inspect, render and demo speech markup."""

import argparse
import asyncio
import json
import logging
import os
import re
import shutil
import sys

from storyteller_tts.assembly import render_markup
from storyteller_tts.constants import OUTPUT_DIR, VERSION
from storyteller_tts.errors import SpeechError
from storyteller_tts.examples import EXAMPLES, get_example
from storyteller_tts.exporter import export
from storyteller_tts.models import BreakSegment, Segment, SpeakOptions
from storyteller_tts.parser import parse_markup
from storyteller_tts.voices import (
    EdgeVoiceCatalog,
    StaticVoiceCatalog,
    build_options,
    load_options,
)


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg", file=sys.stderr)
        raise SystemExit(1)


def slug_from_path(path: str) -> str:
    """Convert a markup filename to an output name.

    "Lighthouse Night.txt" → "lighthouse_night"
    """
    basename = os.path.splitext(os.path.basename(path))[0]
    return re.sub(r"[^a-zA-Z0-9]+", "_", basename).strip("_").lower() or "speech"


def _read_markup(path: str) -> str:
    """Read markup from a file, or stdin for "-"."""
    if path == "-":
        text = sys.stdin.read()
    else:
        if not os.path.exists(path):
            print(f"Error: File not found: {path}", file=sys.stderr)
            raise SystemExit(1)
        with open(path) as f:
            text = f.read()

    if not text.strip():
        print(f"Error: Input is empty: {path}", file=sys.stderr)
        raise SystemExit(1)
    return text


def _load_source(args) -> tuple[str, dict, str]:
    """Return (markup, sidecar options, source name) for --example or a file."""
    if getattr(args, "example", None):
        try:
            entry = get_example(args.example)
        except KeyError:
            print(f"Error: Unknown example: {args.example}", file=sys.stderr)
            print(f"Available: {', '.join(EXAMPLES)}", file=sys.stderr)
            raise SystemExit(1)
        return entry["markup"], dict(entry["options"]), args.example

    if not args.file:
        print("Error: a markup file (or --example NAME) is required", file=sys.stderr)
        raise SystemExit(1)

    markup = _read_markup(args.file)
    data = load_options(args.file) if args.file != "-" else {}
    return markup, data, args.file


def _options_from_args(data: dict, args) -> SpeakOptions:
    return build_options(
        data,
        language=args.lang,
        voice_preferences=getattr(args, "prefer", None),
        rate=getattr(args, "rate", None),
        pitch=getattr(args, "pitch", None),
        volume=getattr(args, "volume", None),
        use_ssml=False if args.plain else None,
    )


def _segment_to_dict(segment: Segment) -> dict:
    if isinstance(segment, BreakSegment):
        return {"type": "break", "duration_ms": segment.duration_ms}
    return {
        "type": "text",
        "text": segment.text,
        "rate": segment.rate,
        "pitch": segment.pitch,
        "volume": segment.volume,
        "language": segment.language,
    }


def cmd_parse(args):
    """Print the segments a markup document compiles to."""
    markup, data, _ = _load_source(args)
    options = _options_from_args(data, args)
    segments = parse_markup(markup, options.prosody(), use_ssml=options.use_ssml)
    print(json.dumps([_segment_to_dict(s) for s in segments], indent=2, ensure_ascii=False))


async def _render(markup: str, options: SpeakOptions, all_voices: bool):
    if all_voices:
        catalog = EdgeVoiceCatalog()
        await catalog.refresh()
    else:
        catalog = StaticVoiceCatalog()
    return await render_markup(markup, options, catalog)


def cmd_render(args):
    """Render markup to an MP3 file."""
    _check_ffmpeg()

    markup, data, source = _load_source(args)
    options = _options_from_args(data, args)
    segments = parse_markup(markup, options.prosody(), use_ssml=options.use_ssml)
    if not segments:
        print(f"Error: Nothing to speak in: {source}", file=sys.stderr)
        raise SystemExit(1)

    output_path = args.output or os.path.join(
        OUTPUT_DIR, slug_from_path(source if source != "-" else "stdin") + ".mp3"
    )

    break_count = sum(1 for s in segments if isinstance(s, BreakSegment))
    print(f"Rendering {len(segments) - break_count} text segments ({break_count} breaks)...")

    try:
        audio = asyncio.run(_render(markup, options, args.all_voices))
    except SpeechError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    settings = {
        "language": options.language,
        "voice_preferences": options.voice_preferences,
        "rate": options.rate,
        "pitch": options.pitch,
        "volume": options.volume,
        "use_ssml": options.use_ssml,
    }
    metadata = {"title": args.title or slug_from_path(source), "source": source}
    if args.author:
        metadata["author"] = args.author

    path = export(audio, output_path, metadata, segments, settings)
    print(f"Done: {path}")


def cmd_voices(args):
    """List available voices."""
    if args.all:
        catalog = EdgeVoiceCatalog()
        voices = asyncio.run(catalog.refresh())
    else:
        voices = StaticVoiceCatalog().list()

    filter_str = args.filter.lower() if args.filter else None
    if filter_str:
        voices = [
            v for v in voices
            if filter_str in v.name.lower() or filter_str in v.language.lower()
        ]
    if not voices:
        print("No matching voices found.")
        return
    print("Available voices:")
    for v in voices:
        print(f"  {v.name:<28} {v.language}")


def cmd_examples(args):
    """List example scripts, or print one."""
    if args.name:
        try:
            entry = get_example(args.name)
        except KeyError:
            print(f"Error: Unknown example: {args.name}", file=sys.stderr)
            raise SystemExit(1)
        print(entry["markup"])
        return

    print("Examples:")
    for name, entry in EXAMPLES.items():
        print(f"  {name:<16} {entry['description']}")


def _add_source_arguments(parser):
    parser.add_argument("file", nargs="?", help="Markup file ('-' for stdin)")
    parser.add_argument("--example", help="Use a bundled example instead of a file")
    parser.add_argument("--lang", help="Default language code (e.g. en-IN)")
    parser.add_argument("--plain", action="store_true", help="Treat input as plain text, not markup")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="storyteller",
        description="Storyteller TTS — speak text with break, emphasis, prosody and lang markup",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse
    parse_parser = subparsers.add_parser("parse", help="Show the segments markup compiles to")
    _add_source_arguments(parse_parser)
    parse_parser.set_defaults(func=cmd_parse)

    # render
    render_parser = subparsers.add_parser("render", help="Render markup to an MP3 file")
    _add_source_arguments(render_parser)
    render_parser.add_argument("-o", "--output", help="Output MP3 path")
    render_parser.add_argument("--prefer", nargs="+", help="Voice name preference substrings, in order")
    render_parser.add_argument("--rate", type=float, help="Plain-text rate multiplier")
    render_parser.add_argument("--pitch", type=float, help="Plain-text pitch multiplier")
    render_parser.add_argument("--volume", type=float, help="Plain-text volume (0-1)")
    render_parser.add_argument("--title", help="Title tag")
    render_parser.add_argument("--author", help="Artist tag")
    render_parser.add_argument("--all-voices", action="store_true", help="Resolve voices from the full edge-tts list")
    render_parser.set_defaults(func=cmd_render)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by name or language substring")
    voices_parser.add_argument("--all", action="store_true", help="Query the full edge-tts voice list")
    voices_parser.set_defaults(func=cmd_voices)

    # examples
    examples_parser = subparsers.add_parser("examples", help="List or print example scripts")
    examples_parser.add_argument("name", nargs="?", help="Example to print")
    examples_parser.set_defaults(func=cmd_examples)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    args.func(args)
