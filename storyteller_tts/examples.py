"""Named demonstration scripts showing each markup feature."""

EXAMPLES = {
    "basic": {
        "description": "Plain text with markup disabled",
        "markup": "Hello! This is a plain reading with no markup at all. 🙂",
        "options": {"use_ssml": False},
    },
    "emphasis": {
        "description": "Strong, moderate and reduced emphasis",
        "markup": (
            "The lighthouse keeper opened the door. "
            '<emphasis level="strong">Nobody was there.</emphasis> '
            '<emphasis level="moderate">Only the wind answered.</emphasis> '
            '<emphasis level="reduced">He closed it again, quietly.</emphasis>'
        ),
        "options": {},
    },
    "breaks": {
        "description": "Timed and named pauses",
        "markup": (
            "Welcome back to the reading room. "
            '<break time="500ms"/> Tonight we start a new chapter. '
            '<break time="1s"/> Settle in. '
            '<break strength="strong"/> Let us begin.'
        ),
        "options": {},
    },
    "prosody": {
        "description": "Rate, pitch and volume keywords",
        "markup": (
            '<prosody rate="slow" pitch="low" volume="soft">'
            "The cave was deep, and very, very dark."
            "</prosody>"
            '<break time="500ms"/>'
            '<prosody rate="fast" pitch="high" volume="loud">'
            "Then something moved!"
            "</prosody>"
        ),
        "options": {},
    },
    "numeric_prosody": {
        "description": "Literal numeric prosody values",
        "markup": (
            '<prosody rate="0.8" pitch="0.9">Chapter one.</prosody>'
            '<break time="1s"/>'
            '<prosody rate="1.2" volume="0.6">The train was already moving.</prosody>'
        ),
        "options": {"voice_preferences": ["neerja", "swara"]},
    },
    "article": {
        "description": "A headline, a slow lede and a closing line",
        "markup": (
            '<emphasis level="strong">Tide Tables Rewritten</emphasis>'
            '<break time="800ms"/>'
            '<prosody rate="slow">The harbour office published new charts this morning.</prosody>'
            '<break time="500ms"/>'
            "Fishing crews say the changes were long overdue."
            '<break time="1000ms"/>'
            '<emphasis level="moderate">Copies are free at the pier.</emphasis>'
        ),
        "options": {"voice_preferences": ["lekha", "heera"]},
    },
    "news_headline": {
        "description": "Bulletin pacing with timed pauses",
        "markup": (
            '<emphasis level="strong">Tonight\'s lead story</emphasis>'
            '<break time="800ms"/>'
            '<prosody rate="slow">The old bridge reopens on Monday.</prosody>'
            '<break time="500ms"/>'
            "Commuters will save twenty minutes each way."
            '<break time="1000ms"/>'
            "Weather follows after the break."
        ),
        "options": {},
    },
    "command_feedback": {
        "description": "Short spoken acknowledgements",
        "markup": (
            '<prosody rate="fast" volume="loud">Got it!</prosody>'
            '<break time="300ms"/>'
            '<prosody rate="medium">Saving your draft now.</prosody>'
            '<break time="500ms"/>'
            '<prosody rate="slow" pitch="high">All done.</prosody>'
        ),
        "options": {},
    },
    "mixed_language": {
        "description": "Language spans switching voices",
        "markup": (
            "नमस्ते! Welcome to a bilingual story. "
            '<break time="500ms"/>'
            '<lang xml:lang="hi-IN">एक छोटा सा गाँव था।</lang>'
            '<break time="300ms"/>'
            '<lang xml:lang="en-IN">There was a small village.</lang>'
        ),
        "options": {"language": "hi-IN"},
    },
    "storytelling": {
        "description": "A short dramatic scene combining every tag",
        "markup": (
            '<prosody rate="slow" pitch="low" volume="soft">'
            "Long ago, beyond the salt marshes..."
            "</prosody>"
            '<break time="1s"/>'
            '<prosody rate="medium" volume="medium">A ferryman kept a lantern lit every night.</prosody>'
            '<break time="500ms"/>'
            '<emphasis level="x-strong">And one night, it went out!</emphasis>'
            '<break time="800ms"/>'
            '<say-as interpret-as="date">1 March</say-as> was the last time anyone saw him.'
        ),
        "options": {},
    },
}


def list_examples() -> list[str]:
    return list(EXAMPLES)


def get_example(name: str) -> dict:
    """Return the example entry for name. Raises KeyError if unknown."""
    if name not in EXAMPLES:
        raise KeyError(f"Unknown example: {name}")
    return EXAMPLES[name]
