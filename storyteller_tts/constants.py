"""All magic numbers, lookup tables and configuration constants."""

DEFAULT_LANGUAGE = "en-IN"
DEFAULT_VOICE_PREFERENCES = ("lekha", "heera", "veena", "rishi")
DEFAULT_RATE = 0.9                  # plain-text (non-markup) speaking rate
DEFAULT_PITCH = 1.1                 # plain-text pitch
DEFAULT_VOLUME = 0.9                # plain-text volume

MARKUP_RATE = 1.0                   # prosody baseline inside markup
MARKUP_PITCH = 1.0
MARKUP_VOLUME = 0.9

DEFAULT_BREAK_MS = 500              # <break/> with no usable attributes
BREAK_STRENGTHS = {
    "none": 0,
    "x-weak": 100,
    "weak": 200,
    "medium": 500,
    "strong": 1000,
    "x-strong": 2000,
}

RATE_VALUES = {
    "x-slow": 0.5,
    "slow": 0.7,
    "medium": 1.0,
    "fast": 1.3,
    "x-fast": 1.5,
}

PITCH_VALUES = {
    "x-low": 0.7,
    "low": 0.85,
    "medium": 1.0,
    "high": 1.15,
    "x-high": 1.3,
}

VOLUME_VALUES = {
    "silent": 0.0,
    "x-soft": 0.3,
    "soft": 0.5,
    "medium": 0.7,
    "loud": 0.9,
    "x-loud": 1.0,
}

# (rate, pitch, volume) applied by <emphasis level="...">
EMPHASIS_STRONG = (0.9, 1.1, 1.0)
EMPHASIS_REDUCED = (1.1, 0.9, 0.7)

# Emoji, pictograph and symbol code point ranges stripped before speaking
EMOJI_RANGES = (
    (0x1F600, 0x1F64F),   # emoticons
    (0x1F300, 0x1F5FF),   # misc symbols and pictographs
    (0x1F680, 0x1F6FF),   # transport and map
    (0x1F700, 0x1F77F),   # alchemical
    (0x1F780, 0x1F7FF),   # geometric shapes extended
    (0x1F800, 0x1F8FF),   # supplemental arrows-c
    (0x1F900, 0x1F9FF),   # supplemental symbols and pictographs
    (0x1FA00, 0x1FA6F),   # chess symbols
    (0x1FA70, 0x1FAFF),   # symbols and pictographs extended-a
    (0x1F1E0, 0x1F1FF),   # regional indicators
    (0x1F191, 0x1F251),   # enclosed alphanumeric/ideographic supplement
    (0x1F004, 0x1F004),
    (0x1F0CF, 0x1F0CF),
    (0x1F170, 0x1F171),
    (0x1F17E, 0x1F17F),
    (0x1F18E, 0x1F18E),
    (0x2600, 0x26FF),     # misc symbols
    (0x2700, 0x27BF),     # dingbats
    (0x2B05, 0x2B07),
    (0x2B1B, 0x2B1C),
    (0x2B50, 0x2B50),
    (0x2B55, 0x2B55),
    (0x2934, 0x2935),
    (0x3030, 0x3030),
    (0x303D, 0x303D),
    (0x3297, 0x3297),
    (0x3299, 0x3299),
    (0x00A9, 0x00A9),
    (0x00AE, 0x00AE),
    (0x203C, 0x203C),
    (0x2049, 0x2049),
    (0x2122, 0x2122),
    (0x2139, 0x2139),
    (0x2194, 0x2199),
    (0x21A9, 0x21AA),
    (0x231A, 0x231B),
    (0x2328, 0x2328),
    (0x23CF, 0x23CF),
    (0x23E9, 0x23F3),
    (0x23F8, 0x23FA),
    (0x24C2, 0x24C2),
    (0x25AA, 0x25AB),
    (0x25B6, 0x25B6),
    (0x25C0, 0x25C0),
    (0x25FB, 0x25FE),
    (0xFE0F, 0xFE0F),     # emoji presentation selector left behind by the above
)

PITCH_REFERENCE_HZ = 100            # pitch multiplier 1.15 -> "+15Hz" for edge-tts
NARRATOR_VOICE = "en-IN-NeerjaNeural"   # used when no catalog voice resolves
OUTPUT_BITRATE = "192k"             # MP3 output bitrate
OUTPUT_DIR = "output"
VERSION = "0.1.0"

# Hardcoded neural voice pool (avoids network call at startup)
VOICE_POOL = (
    "en-IN-NeerjaNeural",
    "en-IN-PrabhatNeural",
    "hi-IN-SwaraNeural",
    "hi-IN-MadhurNeural",
    "en-US-AriaNeural",
    "en-US-DavisNeural",
    "en-US-JennyNeural",
    "en-GB-SoniaNeural",
    "en-GB-RyanNeural",
    "en-AU-NatashaNeural",
)
