"""Exception types reported by the speech engine."""


class SpeechError(Exception):
    """Base class for storyteller_tts errors."""


class SynthesisError(SpeechError):
    """The synthesis backend failed while producing an utterance."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class UnsupportedPlatformError(SpeechError):
    """No usable synthesis capability is available."""
