import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
KNOW2CLOSE_ASSISTANT_ID = os.getenv("KNOW2CLOSE_ASSISTANT_ID", "").strip()
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
OPENAI_BETA_HEADER = os.getenv("OPENAI_BETA_HEADER", "assistants=v2")
OPENAI_REQUEST_TIMEOUT = float(os.getenv("OPENAI_REQUEST_TIMEOUT", "30"))

RUN_POLL_INTERVAL_MS = int(os.getenv("RUN_POLL_INTERVAL_MS", "800"))
RUN_MAX_WAIT_MS = int(os.getenv("RUN_MAX_WAIT_MS", "20000"))

CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")
SERIALIZE_SESSION_TURNS = os.getenv("SERIALIZE_SESSION_TURNS", "1") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class ServiceConfig:
    api_key: str = ""
    assistant_id: str = ""
    base_url: str = "https://api.openai.com/v1"
    beta_header: str = "assistants=v2"
    request_timeout: float = 30.0
    poll_interval_ms: int = 800
    max_wait_ms: int = 20000
    cors_allow_origin: str = "*"
    serialize_session_turns: bool = True

    def validate(self) -> "ServiceConfig":
        if self.poll_interval_ms <= 0:
            raise ValueError("RUN_POLL_INTERVAL_MS must be positive")
        if self.max_wait_ms < 0:
            raise ValueError("RUN_MAX_WAIT_MS must not be negative")
        if self.request_timeout <= 0:
            raise ValueError("OPENAI_REQUEST_TIMEOUT must be positive")
        return self


@lru_cache
def get_config() -> ServiceConfig:
    return ServiceConfig(
        api_key=OPENAI_API_KEY,
        assistant_id=KNOW2CLOSE_ASSISTANT_ID,
        base_url=OPENAI_BASE_URL,
        beta_header=OPENAI_BETA_HEADER,
        request_timeout=OPENAI_REQUEST_TIMEOUT,
        poll_interval_ms=RUN_POLL_INTERVAL_MS,
        max_wait_ms=RUN_MAX_WAIT_MS,
        cors_allow_origin=CORS_ALLOW_ORIGIN,
        serialize_session_turns=SERIALIZE_SESSION_TURNS,
    ).validate()
