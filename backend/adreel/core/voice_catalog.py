"""
Catalog of narration voices recommended for video ads.

Keys are the short names accepted wherever a voice is configured; any other
value is treated as a raw provider voice id.
"""

from typing import Dict

RECOMMENDED_VOICES: Dict[str, Dict[str, str]] = {
    "sarah": {"id": "EXAVITQu4vr4xnSDxMaL", "name": "Sarah", "style": "Professional female"},
    "charlie": {"id": "IKne3meq5aSn9XLyUdCD", "name": "Charlie", "style": "Professional male"},
    "matilda": {"id": "XrExE9yKIg1WjnnlVkGX", "name": "Matilda", "style": "Warm female"},
    "george": {"id": "JBFqnCBsd6RMkjVDRZzb", "name": "George", "style": "Warm male"},
    "emily": {"id": "LcfcDJNUP1GQjkzn1xUU", "name": "Emily", "style": "Casual female"},
    "ethan": {"id": "g5CIjZEefAph4nQFvHAz", "name": "Ethan", "style": "Casual male"},
}

DEFAULT_VOICE = "sarah"


def resolve_voice_id(voice: str | None) -> str:
    if not voice:
        return RECOMMENDED_VOICES[DEFAULT_VOICE]["id"]
    entry = RECOMMENDED_VOICES.get(voice.strip().lower())
    return entry["id"] if entry else voice.strip()
