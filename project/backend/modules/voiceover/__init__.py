"""
Voiceover Module.

Text-to-speech narration stored in object storage.
"""

from modules.voiceover.elevenlabs_client import (
    generate_voiceover,
    resolve_voice_id,
    synthesize_speech,
    try_generate_voiceover,
    VOICE_IDS,
)

__all__ = [
    "generate_voiceover",
    "resolve_voice_id",
    "synthesize_speech",
    "try_generate_voiceover",
    "VOICE_IDS",
]
