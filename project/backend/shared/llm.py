"""
OpenAI client.

Chat-completion helpers shared by the content extractor, the scene planner
and the style-cloning flow, plus image generation for scene frames.
Provider failures are mapped onto UpstreamAIError with caller-facing
messages.
"""

import asyncio
import json
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

import openai
from openai import OpenAI

from shared.config import settings
from shared.errors import UpstreamAIError, UpstreamFetchError
from shared.logging import get_logger

logger = get_logger("llm")

PROVIDER = "openai"


@lru_cache(maxsize=1)
def _build_client(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key, max_retries=0)


def get_openai_client() -> OpenAI:
    """Return the OpenAI client, failing with ConfigError if no key is set."""
    return _build_client(settings.require("openai_api_key"))


def map_openai_error(error: Exception) -> Exception:
    """
    Translate an OpenAI SDK exception into the pipeline taxonomy.

    Args:
        error: Exception raised by the OpenAI SDK

    Returns:
        UpstreamAIError or UpstreamFetchError to raise in its place
    """
    if isinstance(error, openai.APIConnectionError):
        return UpstreamFetchError(f"Could not reach OpenAI: {str(error)}")

    if isinstance(error, openai.APIStatusError):
        body_text = str(error.body) if error.body is not None else ""
        if getattr(error, "code", None) == "insufficient_quota" or "insufficient_quota" in body_text:
            return UpstreamAIError(
                "Insufficient OpenAI credits. Please add credits to your OpenAI account "
                "at https://platform.openai.com/account/billing",
                status_code=402,
                kind=UpstreamAIError.QUOTA,
                provider=PROVIDER
            )
        if error.status_code == 429:
            return UpstreamAIError(
                "OpenAI rate limit exceeded. Please try again in a moment.",
                status_code=429,
                kind=UpstreamAIError.RATE_LIMIT,
                provider=PROVIDER
            )
        if error.status_code == 401:
            return UpstreamAIError(
                "Invalid OpenAI API key. Please update your API key in the server environment.",
                status_code=401,
                kind=UpstreamAIError.AUTH,
                provider=PROVIDER
            )
        return UpstreamAIError(
            f"OpenAI API error: {error.message}",
            status_code=error.status_code if error.status_code >= 500 else 500,
            kind=UpstreamAIError.PROVIDER,
            provider=PROVIDER
        )

    return UpstreamAIError(f"OpenAI API error: {str(error)}", provider=PROVIDER)


async def _run(call: Callable[[OpenAI], Any], action: str) -> Any:
    client = get_openai_client()
    loop = asyncio.get_running_loop()

    try:
        return await loop.run_in_executor(None, call, client)
    except openai.OpenAIError as e:
        mapped = map_openai_error(e)
        logger.error(
            f"OpenAI {action} failed: {mapped}",
            extra={"status_code": getattr(e, "status_code", None)}
        )
        raise mapped from e


async def _create_completion(**kwargs) -> Any:
    return await _run(lambda client: client.chat.completions.create(**kwargs), "completion")


def _message_content(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError) as e:
        raise UpstreamAIError(
            "OpenAI returned no completion choices",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider=PROVIDER
        ) from e
    if not content:
        raise UpstreamAIError(
            "OpenAI returned an empty completion",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider=PROVIDER
        )
    return content


async def complete_json(
    system_prompt: str,
    user_content: str,
    max_tokens: int = 2000,
    model: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run a JSON-mode chat completion and parse the result.

    Args:
        system_prompt: Instruction describing the required JSON shape
        user_content: User message
        max_tokens: Completion token cap
        model: Override for settings.openai_model

    Returns:
        Parsed JSON object

    Raises:
        ConfigError: If OPENAI_API_KEY is not configured
        UpstreamAIError: On provider errors or malformed JSON
        UpstreamFetchError: If OpenAI cannot be reached
    """
    response = await _create_completion(
        model=model or settings.openai_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        max_completion_tokens=max_tokens,
        response_format={"type": "json_object"}
    )
    content = _message_content(response)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("OpenAI returned invalid JSON", extra={"content_prefix": content[:200]})
        raise UpstreamAIError(
            f"OpenAI returned malformed JSON: {str(e)}",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider=PROVIDER
        ) from e

    if not isinstance(data, dict):
        raise UpstreamAIError(
            "OpenAI returned JSON that is not an object",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider=PROVIDER
        )
    return data


async def complete_text(
    messages: List[Dict[str, Any]],
    model: Optional[str] = None,
    max_tokens: int = 1500
) -> str:
    """
    Run a plain chat completion and return the message text.

    Args:
        messages: Chat messages (content may be multimodal parts)
        model: Override for settings.openai_model
        max_tokens: Completion token cap

    Returns:
        Completion text
    """
    response = await _create_completion(
        model=model or settings.openai_model,
        messages=messages,
        max_completion_tokens=max_tokens
    )
    return _message_content(response).strip()


async def generate_image(prompt: str, model: Optional[str] = None, size: Optional[str] = None) -> str:
    """
    Generate one image and return its hosted URL.

    Raises:
        UpstreamAIError: On provider errors or when no image URL comes back
    """
    response = await _run(
        lambda client: client.images.generate(
            model=model or settings.openai_image_model,
            prompt=prompt,
            size=size or settings.openai_image_size,
            n=1,
            response_format="url"
        ),
        "image generation"
    )
    try:
        url = response.data[0].url
    except (AttributeError, IndexError, TypeError):
        url = None
    if not url:
        raise UpstreamAIError(
            "No image URL returned from generation",
            status_code=502,
            kind=UpstreamAIError.MALFORMED,
            provider=PROVIDER
        )
    return url
