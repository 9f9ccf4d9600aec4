"""
FastAPI application entry point.

Main application setup with CORS, middleware, error mapping, and route
registration.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.errors import (
    ConfigError,
    GenerationTimeoutError,
    PipelineError,
    UpstreamAIError,
    UpstreamFetchError,
    ValidationError,
)
from shared.http_client import close_http_client
from shared.logging import configure_logging, get_logger, set_request_id
from shared.redis_client import redis_client

logger = get_logger(__name__)

AI_ERROR_CODES = {
    UpstreamAIError.AUTH: "AI_AUTH_FAILED",
    UpstreamAIError.RATE_LIMIT: "AI_RATE_LIMITED",
    UpstreamAIError.QUOTA: "AI_QUOTA_EXCEEDED",
    UpstreamAIError.MALFORMED: "AI_MALFORMED_OUTPUT",
    UpstreamAIError.PROVIDER: "AI_PROVIDER_ERROR",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("API gateway starting")
    yield
    await close_http_client()
    await redis_client.close()
    logger.info("API gateway stopped")


# Create FastAPI app
app = FastAPI(
    title="SmartReel API Gateway",
    description="Marketing video generation: scraping, scene planning, rendering and voiceovers",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=3600
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    set_request_id(request_id)

    logger.info(
        "Request started",
        extra={
            "method": request.method,
            "path": request.url.path
        }
    )

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


def error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    retryable: bool = False
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "retryable": retryable,
            "request_id": getattr(request.state, "request_id", None)
        }
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return error_response(request, 400, str(exc), "VALIDATION_ERROR")


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors like missing fields."""
    errors = exc.errors()
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in errors]
    fields = [f for f in fields if f]
    message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request body"
    return error_response(request, 400, message, "VALIDATION_ERROR")


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError):
    """Handle missing or invalid server credentials."""
    logger.error("Configuration error", extra={"error": str(exc)})
    return error_response(request, 500, str(exc), "CONFIG_ERROR")


@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_error_handler(request: Request, exc: UpstreamFetchError):
    """Handle network failures reaching third parties."""
    return error_response(request, 502, str(exc), "UPSTREAM_FETCH_ERROR", retryable=True)


@app.exception_handler(UpstreamAIError)
async def upstream_ai_error_handler(request: Request, exc: UpstreamAIError):
    """Handle provider errors, mirroring the provider's status."""
    logger.warning(
        "AI provider error",
        extra={"provider": exc.provider, "kind": exc.kind, "status_code": exc.status_code}
    )
    return error_response(
        request,
        exc.status_code,
        str(exc),
        AI_ERROR_CODES.get(exc.kind, "AI_PROVIDER_ERROR"),
        retryable=exc.kind == UpstreamAIError.RATE_LIMIT
    )


@app.exception_handler(GenerationTimeoutError)
async def generation_timeout_handler(request: Request, exc: GenerationTimeoutError):
    """Handle exhausted wait loops."""
    return error_response(request, 504, str(exc), "GENERATION_TIMEOUT", retryable=True)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    """Handle pipeline errors."""
    logger.error("Pipeline error", exc_info=exc)
    return error_response(request, 500, str(exc), "MODULE_FAILURE")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error("Unhandled exception", exc_info=exc)
    return error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


# Register routes
from api_gateway.routes import health, scrape, scenes, videos, batches, projects

app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(scrape.router, prefix="/api/v1", tags=["scrape"])
app.include_router(scenes.router, prefix="/api/v1", tags=["scenes"])
app.include_router(videos.router, prefix="/api/v1", tags=["videos"])
app.include_router(batches.router, prefix="/api/v1", tags=["batches"])
app.include_router(projects.router, prefix="/api/v1", tags=["projects"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "SmartReel API Gateway", "version": "1.0.0"}
