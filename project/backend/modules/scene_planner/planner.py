"""
Scene planning.

Decompose a prompt or a script into an ordered list of short video scenes.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.errors import UpstreamAIError
from shared.llm import complete_json
from shared.logging import get_logger
from shared.models.scene import ScenesResult
from shared.validation import validate_exclusive_text

logger = get_logger("scene_planner")

SYSTEM_PROMPT = """You are a professional video editor and script writer. Your job is to analyze text and break it down into logical video scenes optimized for TikTok-style short-form content.

For each scene, provide:
1. "text": The dialogue or narration for this scene
2. "visuals": A detailed description of what should be shown visually
3. "style": The mood/tone (e.g., "energetic", "calm", "motivational", "dramatic")
4. "duration": Estimated duration in seconds (typically 3-8 seconds per scene)

Rules:
- Each scene should be 3-8 seconds long
- Keep scenes punchy and engaging
- Include clear visual descriptions
- Match the style to the content tone
- Total video should be 30-60 seconds

Return ONLY valid JSON in this exact format:
{
  "title": "Video title",
  "scenes": [
    {
      "text": "Scene narration",
      "visuals": "Visual description",
      "style": "mood/tone",
      "duration": 5
    }
  ]
}"""

MAX_COMPLETION_TOKENS = 2000


def build_user_message(kind: str, text: str) -> str:
    """User turn for a script to split or a prompt to write from."""
    if kind == "script":
        return f"Split this script into scenes:\n\n{text}"
    return f"Generate a video script and split it into scenes for this prompt:\n\n{text}"


async def plan_scenes(
    prompt: Optional[str] = None,
    script: Optional[str] = None
) -> ScenesResult:
    """
    Plan scenes for exactly one of prompt/script.

    Args:
        prompt: Free-text idea for the video
        script: Ready-made narration to split

    Returns:
        ScenesResult with at least one scene

    Raises:
        ValidationError: If both or neither input is given
        UpstreamAIError: On provider failure or malformed output
    """
    kind, text = validate_exclusive_text(prompt, script)
    logger.info(f"Generating scenes for {kind}: {text[:100]}")

    data = await complete_json(
        SYSTEM_PROMPT,
        build_user_message(kind, text),
        max_tokens=MAX_COMPLETION_TOKENS
    )

    try:
        result = ScenesResult.model_validate(data)
    except PydanticValidationError as e:
        logger.error("Scene plan did not match the expected shape", extra={"errors": e.errors()})
        raise UpstreamAIError(
            f"OpenAI returned a malformed scene plan: {e.error_count()} validation error(s)",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider="openai"
        ) from e

    logger.info(
        "Generated scenes",
        extra={
            "title": result.title,
            "scene_count": len(result.scenes),
            "total_duration": sum(scene.duration for scene in result.scenes)
        }
    )
    return result
