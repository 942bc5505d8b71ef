import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.chat import router as chat_router
from app.api.errors import chat_relay_error_handler
from app.api.site import router as site_router
from app.config.logger import configure_logging
from app.config.settings import get_config
from app.core.errors import ChatRelayError

configure_logging()
logger = logging.getLogger(__name__)

# a bad configuration fails here, at startup
get_config()

app = FastAPI(title="Know2Close Chat Relay")

# Chat turns
app.include_router(chat_router)

# Preflight, info page and the 405 fallback (catch-all, must stay last)
app.include_router(site_router)

app.add_exception_handler(ChatRelayError, chat_relay_error_handler)


def cors_headers() -> dict:
    return {
        "Access-Control-Allow-Origin": get_config().cors_allow_origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS, GET",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("%s %s failed", request.method, request.url.path)
        response = JSONResponse({"error": "internal error"}, status_code=500)
    response.headers.update(cors_headers())
    return response
