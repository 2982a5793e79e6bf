"""Tests for the storyteller CLI."""

import json
from unittest.mock import patch, AsyncMock, MagicMock

import pytest
from pydub import AudioSegment

from storyteller_tts.cli import main, slug_from_path
from storyteller_tts.errors import SynthesisError
from storyteller_tts.examples import EXAMPLES


STORY = 'The door opened. <break time="1s"/> <emphasis level="strong">Nobody</emphasis> was there.'


@pytest.fixture
def story(tmp_path):
    path = tmp_path / "Lighthouse Night.txt"
    path.write_text(STORY)
    return str(path)


def _parse_output(capsys):
    return json.loads(capsys.readouterr().out)


# --- slug ---

def test_slug_from_path():
    assert slug_from_path("stories/Lighthouse Night.txt") == "lighthouse_night"
    assert slug_from_path("!!!.txt") == "speech"


# --- parse ---

def test_parse_file(story, capsys):
    main(["parse", story])
    segments = _parse_output(capsys)
    assert [s["type"] for s in segments] == ["text", "break", "text", "text"]
    assert segments[0]["text"] == "The door opened."
    assert segments[1]["duration_ms"] == 1000
    assert segments[2] == {
        "type": "text",
        "text": "Nobody",
        "rate": 0.9,
        "pitch": 1.1,
        "volume": 1.0,
        "language": "en-IN",
    }


def test_parse_plain(story, capsys):
    main(["parse", story, "--plain"])
    segments = _parse_output(capsys)
    assert len(segments) == 1
    assert segments[0]["text"] == "The door opened. Nobody was there."
    assert segments[0]["rate"] == 0.9


def test_parse_lang_flag(story, capsys):
    main(["parse", story, "--lang", "hi-IN"])
    segments = _parse_output(capsys)
    assert segments[0]["language"] == "hi-IN"


def test_parse_applies_sidecar(story, tmp_path, capsys):
    (tmp_path / "Lighthouse Night.voice.json").write_text(json.dumps({"language": "en-GB"}))
    main(["parse", story])
    assert _parse_output(capsys)[0]["language"] == "en-GB"


def test_parse_example(capsys):
    main(["parse", "--example", "basic"])
    segments = _parse_output(capsys)
    assert len(segments) == 1
    assert "🙂" not in segments[0]["text"]


def test_parse_stdin(capsys):
    with patch("sys.stdin") as mock_stdin:
        mock_stdin.read.return_value = 'A<break time="200ms"/>B'
        main(["parse", "-"])
    assert [s["type"] for s in _parse_output(capsys)] == ["text", "break", "text"]


def test_parse_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["parse", str(tmp_path / "nope.txt")])
    assert "File not found" in capsys.readouterr().err


def test_parse_empty_file(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("   \n")
    with pytest.raises(SystemExit):
        main(["parse", str(empty)])


def test_parse_requires_source():
    with pytest.raises(SystemExit):
        main(["parse"])


def test_parse_unknown_example(capsys):
    with pytest.raises(SystemExit):
        main(["parse", "--example", "nope"])
    assert "Available" in capsys.readouterr().err


# --- examples / voices ---

def test_examples_list(capsys):
    main(["examples"])
    out = capsys.readouterr().out
    for name in EXAMPLES:
        assert name in out


def test_examples_print_one(capsys):
    main(["examples", "breaks"])
    assert capsys.readouterr().out.strip() == EXAMPLES["breaks"]["markup"]


def test_examples_unknown():
    with pytest.raises(SystemExit):
        main(["examples", "nope"])


def test_voices_filter(capsys):
    main(["voices", "--filter", "hi-in"])
    out = capsys.readouterr().out
    assert "hi-IN-SwaraNeural" in out
    assert "hi-IN-MadhurNeural" in out
    assert "en-US-AriaNeural" not in out


def test_voices_no_match(capsys):
    main(["voices", "--filter", "klingon"])
    assert "No matching voices found." in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    main([])
    assert "usage" in capsys.readouterr().out.lower()


# --- render ---

@patch("storyteller_tts.cli.export")
@patch("storyteller_tts.cli.render_markup", new_callable=AsyncMock)
@patch("storyteller_tts.cli.shutil.which", return_value="/usr/bin/ffmpeg")
def test_render(mock_which, mock_render, mock_export, story, tmp_path, capsys):
    audio = AudioSegment.silent(duration=1000)
    mock_render.return_value = audio
    output = str(tmp_path / "out.mp3")
    mock_export.return_value = output

    main(["render", story, "-o", output, "--title", "Night", "--author", "Anon", "--rate", "1.2"])

    markup, options, catalog = mock_render.call_args[0]
    assert markup == STORY
    assert options.rate == 1.2

    args = mock_export.call_args[0]
    assert args[0] is audio
    assert args[1] == output
    assert args[2] == {"title": "Night", "source": story, "author": "Anon"}
    assert len(args[3]) == 4
    assert args[4]["rate"] == 1.2

    out = capsys.readouterr().out
    assert "Rendering 3 text segments (1 breaks)..." in out
    assert f"Done: {output}" in out


@patch("storyteller_tts.cli.export")
@patch("storyteller_tts.cli.render_markup", new_callable=AsyncMock)
@patch("storyteller_tts.cli.shutil.which", return_value="/usr/bin/ffmpeg")
def test_render_default_output_path(mock_which, mock_render, mock_export, story, tmp_path, monkeypatch):
    monkeypatch.setattr("storyteller_tts.cli.OUTPUT_DIR", str(tmp_path / "output"))
    mock_render.return_value = AudioSegment.silent(duration=100)
    mock_export.return_value = "x"

    main(["render", story])

    assert mock_export.call_args[0][1] == str(tmp_path / "output" / "lighthouse_night.mp3")
    assert mock_export.call_args[0][2]["title"] == "lighthouse_night"


@patch("storyteller_tts.cli.shutil.which", return_value=None)
def test_render_requires_ffmpeg(mock_which, story, capsys):
    with pytest.raises(SystemExit):
        main(["render", story])
    assert "ffmpeg" in capsys.readouterr().err


@patch("storyteller_tts.cli.export")
@patch("storyteller_tts.cli.render_markup", new_callable=AsyncMock)
@patch("storyteller_tts.cli.shutil.which", return_value="/usr/bin/ffmpeg")
def test_render_synthesis_error(mock_which, mock_render, mock_export, story, capsys):
    mock_render.side_effect = SynthesisError("network down", text="The door opened.")
    with pytest.raises(SystemExit):
        main(["render", story])
    assert "network down" in capsys.readouterr().err
    mock_export.assert_not_called()


@patch("storyteller_tts.cli.render_markup", new_callable=AsyncMock)
@patch("storyteller_tts.cli.shutil.which", return_value="/usr/bin/ffmpeg")
def test_render_nothing_to_speak(mock_which, mock_render, tmp_path):
    only_emoji = tmp_path / "emoji.txt"
    only_emoji.write_text("🙂 🎉")
    with pytest.raises(SystemExit):
        main(["render", str(only_emoji)])
    mock_render.assert_not_called()
