"""
ElevenLabs text-to-speech integration.

Synthesize narration, store the MP3 in object storage, and return its URL.
"""

import uuid
from typing import Optional

import httpx

from shared.config import settings
from shared.errors import UpstreamAIError, UpstreamFetchError, ValidationError
from shared.http_client import get_http_client
from shared.logging import get_logger
from shared.storage import storage
from shared.validation import is_blank

logger = get_logger("voiceover")

PROVIDER = "elevenlabs"
TTS_MODEL_ID = "eleven_multilingual_v2"

DEFAULT_VOICE_STYLE = "natural-female"
VOICE_IDS = {
    "natural-male": "21m00Tcm4TlvDq8ikWAM",
    "natural-female": "EXAVITQu4vr4xnSDxMaL",
    "energetic": "IKne3meq5aSn9XLyUdCD",
    "calm": "pFZP5JQG7iQjIQuC4Bku",
    "youthful": "IKne3meq5aSn9XLyUdCD",
}


def resolve_voice_id(voice_style: Optional[str]) -> str:
    """Provider voice for a style key; unknown keys get the default voice."""
    return VOICE_IDS.get(voice_style or "", VOICE_IDS[DEFAULT_VOICE_STYLE])


def voice_settings(voice_style: Optional[str]) -> dict:
    return {
        "stability": 0.5,
        "similarity_boost": 0.75,
        "style": 0.8 if "energetic" in (voice_style or "") else 0.4,
        "use_speaker_boost": True,
    }


def _raise_for_tts_error(response: httpx.Response) -> None:
    if response.is_success:
        return

    logger.error(
        "ElevenLabs API error",
        extra={"status_code": response.status_code, "body": response.text[:500]}
    )

    if response.status_code == 401:
        raise UpstreamAIError(
            "Invalid ElevenLabs API key. Please check your API key at "
            "https://elevenlabs.io/app/settings/api-keys",
            status_code=401,
            kind=UpstreamAIError.AUTH,
            provider=PROVIDER
        )
    if response.status_code == 402:
        raise UpstreamAIError(
            "Insufficient ElevenLabs credits. Please add credits at "
            "https://elevenlabs.io/app/subscription",
            status_code=402,
            kind=UpstreamAIError.QUOTA,
            provider=PROVIDER
        )
    if response.status_code == 429:
        raise UpstreamAIError(
            "ElevenLabs rate limit exceeded. Please try again in a moment.",
            status_code=429,
            kind=UpstreamAIError.RATE_LIMIT,
            provider=PROVIDER
        )

    message = response.text or "Failed to generate voiceover"
    try:
        detail = response.json().get("detail")
        if isinstance(detail, dict):
            detail = detail.get("message") or str(detail)
        if detail:
            message = f"ElevenLabs Error: {detail}"
    except (ValueError, AttributeError):
        pass

    raise UpstreamAIError(
        message,
        status_code=response.status_code if response.status_code >= 500 else 500,
        kind=UpstreamAIError.PROVIDER,
        provider=PROVIDER
    )


async def synthesize_speech(text: str, voice_style: Optional[str] = None) -> bytes:
    """
    Synthesize narration audio.

    Args:
        text: Script to speak
        voice_style: Style key (natural-male, natural-female, energetic, calm, youthful)

    Returns:
        MP3 bytes

    Raises:
        ConfigError: If ELEVENLABS_API_KEY is not configured
        UpstreamAIError: If the provider rejects the request
        UpstreamFetchError: If the provider cannot be reached
    """
    api_key = settings.require("elevenlabs_api_key")
    voice_id = resolve_voice_id(voice_style)
    client = get_http_client()

    try:
        response = await client.post(
            f"{settings.elevenlabs_base_url}/text-to-speech/{voice_id}",
            headers={
                "Accept": "audio/mpeg",
                "Content-Type": "application/json",
                "xi-api-key": api_key,
            },
            json={
                "text": text,
                "model_id": TTS_MODEL_ID,
                "voice_settings": voice_settings(voice_style),
            }
        )
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Could not reach ElevenLabs: {str(e)}") from e

    _raise_for_tts_error(response)
    return response.content


async def generate_voiceover(
    text: str,
    voice_style: Optional[str] = None,
    project_id: Optional[str] = None
) -> str:
    """
    Synthesize narration and persist it to storage.

    Args:
        text: Script to speak
        voice_style: Style key; unknown keys use the default voice
        project_id: Optional project, used to group stored files

    Returns:
        Public URL of the stored MP3

    Raises:
        ValidationError: If text is blank
        UpstreamAIError: On provider errors
        PipelineError: If storage upload fails
    """
    if is_blank(text):
        raise ValidationError("Voiceover text is required")

    logger.info(
        "Generating voiceover",
        extra={"voice_style": voice_style, "chars": len(text), "project_id": project_id}
    )
    audio = await synthesize_speech(text, voice_style)

    path = f"{project_id or 'unassigned'}/{uuid.uuid4()}.mp3"
    url = await storage.upload_file(
        bucket=settings.voiceover_bucket,
        path=path,
        data=audio,
        content_type="audio/mpeg"
    )
    logger.info("Voiceover generated successfully", extra={"path": path, "size_bytes": len(audio)})
    return url


async def try_generate_voiceover(
    text: str,
    voice_style: Optional[str] = None,
    project_id: Optional[str] = None
) -> Optional[str]:
    """
    Best-effort voiceover for the video flows.

    Returns:
        Voiceover URL, or None if anything failed (logged as a warning)
    """
    try:
        return await generate_voiceover(text, voice_style, project_id)
    except Exception as e:
        logger.warning(
            f"Voiceover failed, continuing without it: {str(e)}",
            extra={"project_id": project_id, "voice_style": voice_style}
        )
        return None
