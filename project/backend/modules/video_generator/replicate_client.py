"""
Replicate predictions API.

Submit render jobs, read their status, and block on completion for the
single-shot flows.
"""

from typing import Any, Dict, Optional

import httpx

from shared.config import settings
from shared.errors import GenerationTimeoutError, UpstreamAIError, UpstreamFetchError
from shared.http_client import get_http_client
from shared.logging import get_logger
from shared.models.scene import PredictionStatus
from shared.polling import poll_until

logger = get_logger("video_generator")

PROVIDER = "replicate"
FAILED_STATUSES = ("failed", "canceled")


def _headers() -> Dict[str, str]:
    token = settings.require("replicate_api_token")
    return {
        "Authorization": f"Token {token}",
        "Content-Type": "application/json",
    }


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("title") or response.text)
    return response.text


def raise_for_provider_error(response: httpx.Response) -> None:
    """
    Map a non-2xx Replicate response onto UpstreamAIError.

    Args:
        response: Provider response

    Raises:
        UpstreamAIError: Distinguishing rate limit, auth and billing failures
    """
    if response.is_success:
        return

    text = response.text
    logger.error(
        "Replicate API error",
        extra={"status_code": response.status_code, "body": text[:500]}
    )

    if response.status_code == 429:
        raise UpstreamAIError(
            "Replicate rate limit exceeded. Please try again in a moment.",
            status_code=429,
            kind=UpstreamAIError.RATE_LIMIT,
            provider=PROVIDER
        )
    if response.status_code == 401:
        raise UpstreamAIError(
            "Invalid Replicate API token. Please update your API token in the server environment.",
            status_code=401,
            kind=UpstreamAIError.AUTH,
            provider=PROVIDER
        )
    if response.status_code == 402 or "insufficient_quota" in text or "billing" in text:
        raise UpstreamAIError(
            "Insufficient Replicate credits. Please add credits at https://replicate.com/account/billing",
            status_code=402,
            kind=UpstreamAIError.QUOTA,
            provider=PROVIDER
        )
    raise UpstreamAIError(
        f"Replicate API error: {_error_detail(response)}",
        status_code=500,
        kind=UpstreamAIError.PROVIDER,
        provider=PROVIDER
    )


async def create_prediction(version: str, model_input: Dict[str, Any]) -> Dict[str, Any]:
    """
    Submit an asynchronous prediction.

    Args:
        version: Model version hash
        model_input: Model input payload

    Returns:
        Provider prediction object (id, status, ...)

    Raises:
        ConfigError: If REPLICATE_API_TOKEN is not configured
        UpstreamFetchError: If Replicate cannot be reached
        UpstreamAIError: If Replicate rejects the request
    """
    headers = _headers()
    client = get_http_client()
    try:
        response = await client.post(
            f"{settings.replicate_base_url}/predictions",
            headers=headers,
            json={"version": version, "input": model_input}
        )
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Could not reach Replicate: {str(e)}") from e

    raise_for_provider_error(response)
    prediction = response.json()
    logger.info(
        "Prediction created",
        extra={"prediction_id": prediction.get("id"), "status": prediction.get("status")}
    )
    return prediction


async def get_prediction(prediction_id: str) -> PredictionStatus:
    """
    Read a prediction's current status. No caching.

    Args:
        prediction_id: Provider job identifier

    Returns:
        PredictionStatus with status/output/error as reported

    Raises:
        UpstreamAIError: If the status query fails
    """
    headers = _headers()
    client = get_http_client()
    try:
        response = await client.get(
            f"{settings.replicate_base_url}/predictions/{prediction_id}",
            headers=headers
        )
    except httpx.HTTPError as e:
        raise UpstreamAIError(
            f"Failed to check status: {str(e)}",
            status_code=500,
            provider=PROVIDER
        ) from e

    if not response.is_success:
        logger.error(
            "Replicate status check error",
            extra={"prediction_id": prediction_id, "status_code": response.status_code}
        )
        raise UpstreamAIError(
            f"Failed to check status: {_error_detail(response)}",
            status_code=500,
            provider=PROVIDER
        )

    data = response.json()
    return PredictionStatus(
        status=data.get("status", "unknown"),
        output=data.get("output"),
        error=data.get("error")
    )


async def wait_for_prediction(
    prediction_id: str,
    interval: Optional[float] = None,
    max_attempts: Optional[int] = None
) -> str:
    """
    Block until a prediction produces a video URL.

    Status-query failures are logged and retried on the next attempt.

    Args:
        prediction_id: Provider job identifier
        interval: Seconds between checks (default settings.render_poll_interval_seconds)
        max_attempts: Attempt ceiling (default settings.render_poll_max_attempts)

    Returns:
        URL of the first output

    Raises:
        UpstreamAIError: If the provider reports failure
        GenerationTimeoutError: If the ceiling is reached first
    """
    interval = settings.render_poll_interval_seconds if interval is None else interval
    max_attempts = max_attempts or settings.render_poll_max_attempts

    async def _tick(attempt: int) -> Optional[str]:
        try:
            status = await get_prediction(prediction_id)
        except (UpstreamAIError, UpstreamFetchError) as e:
            logger.warning(
                f"Status check failed, retrying next attempt: {str(e)}",
                extra={"prediction_id": prediction_id, "attempt": attempt}
            )
            return None

        logger.debug(
            "Generation status",
            extra={"prediction_id": prediction_id, "status": status.status, "attempt": attempt}
        )
        if status.video_url:
            return status.video_url
        if status.status in FAILED_STATUSES:
            raise UpstreamAIError(
                f"Video generation failed: {status.error or status.status}",
                status_code=500,
                provider=PROVIDER
            )
        return None

    outcome = await poll_until(_tick, interval=interval, max_attempts=max_attempts)
    if outcome.timed_out:
        raise GenerationTimeoutError(
            f"Video generation timed out after {outcome.attempts} status checks",
            attempts=outcome.attempts
        )
    return outcome.value
