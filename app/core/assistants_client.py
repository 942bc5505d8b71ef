"""
Thin async client for the thread/run endpoints of the Assistants API.

Every method performs exactly one HTTP call. A non-success status raises
RemoteServiceError with the untouched status and body; a transport failure
raises RemoteServiceUnavailableError. Nothing here retries.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config.settings import ServiceConfig
from app.core.errors import (
    ConfigurationError,
    MalformedRemoteResponseError,
    RemoteServiceError,
    RemoteServiceUnavailableError,
)
from app.schemas.chat import Run, Thread

logger = logging.getLogger(__name__)


class AssistantsClient:
    def __init__(self, config: ServiceConfig, http: httpx.AsyncClient):
        self.config = config
        self.http = http

    # --------------------------------------------------
    # Request plumbing
    # --------------------------------------------------
    def ensure_configured(self) -> None:
        """Raise ConfigurationError when the API key or the assistant id is empty."""
        if not self.config.api_key:
            raise ConfigurationError("OPENAI_API_KEY is empty")
        if not self.config.assistant_id:
            raise ConfigurationError("KNOW2CLOSE_ASSISTANT_ID is empty")

    def _headers(self) -> Dict[str, str]:
        self.ensure_configured()
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "OpenAI-Beta": self.config.beta_header,
        }

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = self._headers()
        try:
            r = await self.http.request(
                method,
                self._url(path),
                headers=headers,
                json=json,
                params=params,
                timeout=self.config.request_timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("%s: transport failure: %s", operation, e)
            raise RemoteServiceUnavailableError(operation) from e

        if not r.is_success:
            logger.warning("%s: remote service returned %s", operation, r.status_code)
            raise RemoteServiceError(
                status_code=r.status_code,
                body=r.content,
                content_type=r.headers.get("content-type"),
                operation=operation,
            )

        try:
            data = r.json()
        except ValueError as e:
            raise MalformedRemoteResponseError(operation, "JSON body") from e
        if not isinstance(data, dict):
            raise MalformedRemoteResponseError(operation, "JSON object")
        return data

    # --------------------------------------------------
    # Endpoints
    # --------------------------------------------------
    async def create_thread(self) -> Thread:
        data = await self._request("create_thread", "POST", "/threads")
        try:
            return Thread.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedRemoteResponseError("create_thread", "thread id") from e

    async def add_message(self, thread_id: str, content: str) -> Dict[str, Any]:
        return await self._request(
            "add_message",
            "POST",
            f"/threads/{thread_id}/messages",
            json={"role": "user", "content": content},
        )

    async def create_run(self, thread_id: str) -> Run:
        data = await self._request(
            "create_run",
            "POST",
            f"/threads/{thread_id}/runs",
            json={"assistant_id": self.config.assistant_id},
        )
        if data.get("status") is None:
            data = {**data, "status": "unknown"}
        try:
            return Run.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedRemoteResponseError("create_run", "run id") from e

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        data = await self._request(
            "get_run",
            "GET",
            f"/threads/{thread_id}/runs/{run_id}",
        )
        return Run(id=run_id, status=str(data.get("status") or "unknown"))

    async def list_latest_message(self, thread_id: str) -> Dict[str, Any]:
        try:
            return await self._request(
                "list_messages",
                "GET",
                f"/threads/{thread_id}/messages",
                params={"limit": 1, "order": "desc"},
            )
        except MalformedRemoteResponseError as e:
            # an unreadable listing degrades to the placeholder reply
            logger.warning("list_messages: %s", e)
            return {}
