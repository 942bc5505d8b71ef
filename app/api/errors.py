import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from app.core.errors import (
    ChatRelayError,
    ConfigurationError,
    MalformedRemoteResponseError,
    RemoteServiceError,
    RemoteServiceUnavailableError,
    RunNotCompletedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_to_response(exc: ChatRelayError) -> Response:
    """
    The single place where a failed turn becomes an HTTP response.

    Remote failures are proxied as-is: same status, same body bytes.
    """
    if isinstance(exc, RemoteServiceError):
        return Response(
            content=exc.body,
            status_code=exc.status_code,
            media_type=exc.content_type or "application/json",
        )

    if isinstance(exc, ValidationError):
        return JSONResponse({"error": exc.message}, status_code=400)

    if isinstance(exc, RunNotCompletedError):
        return JSONResponse({"error": f"Run {exc.status}"}, status_code=500)

    if isinstance(exc, ConfigurationError):
        return JSONResponse({"error": exc.message}, status_code=500)

    if isinstance(exc, RemoteServiceUnavailableError):
        return JSONResponse({"error": "upstream request failed"}, status_code=502)

    if isinstance(exc, MalformedRemoteResponseError):
        return JSONResponse({"error": "unexpected upstream response"}, status_code=502)

    return JSONResponse({"error": str(exc) or "internal error"}, status_code=500)


async def chat_relay_error_handler(request: Request, exc: ChatRelayError) -> Response:
    if not isinstance(exc, ValidationError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return error_to_response(exc)
