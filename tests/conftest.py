import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from app.config.settings import ServiceConfig
from app.core.assistants_client import AssistantsClient
from app.core.run_poller import RunPoller
from app.services.conversation import ConversationTurnOrchestrator


BASE_URL = "https://assistants.test/v1"


class FakeAssistantService:
    """
    In-memory stand-in for the thread/run endpoints, served through httpx.MockTransport.

    ``run_statuses`` is consumed one entry per status check; the last entry
    repeats once the list runs out. ``failures`` maps an operation name to a
    (status_code, body) pair returned instead of the normal answer.
    """

    def __init__(
        self,
        *,
        thread_id: str = "t1",
        run_id: str = "run_1",
        initial_status: Optional[str] = "queued",
        run_statuses: Optional[List[str]] = None,
        reply_listing: Optional[Dict[str, Any]] = None,
        failures: Optional[Dict[str, Tuple[int, bytes]]] = None,
    ):
        self.thread_id = thread_id
        self.run_id = run_id
        self.initial_status = initial_status
        self.run_statuses = list(run_statuses or ["completed"])
        self.reply_listing = reply_listing if reply_listing is not None else listing("hi there")
        self.failures = failures or {}
        self.calls: List[Tuple[str, httpx.Request]] = []

    @property
    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]

    def count(self, operation: str) -> int:
        return self.operations.count(operation)

    def _operation(self, request: httpx.Request) -> str:
        parts = request.url.path.split("/v1/", 1)[1].split("/")
        if request.method == "POST" and parts == ["threads"]:
            return "create_thread"
        if request.method == "POST" and parts[-1] == "messages":
            return "add_message"
        if request.method == "GET" and parts[-1] == "messages":
            return "list_messages"
        if request.method == "POST" and parts[-1] == "runs":
            return "create_run"
        if request.method == "GET" and len(parts) == 4 and parts[2] == "runs":
            return "get_run"
        raise AssertionError(f"unexpected request {request.method} {request.url}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        op = self._operation(request)
        self.calls.append((op, request))

        if op in self.failures:
            status, body = self.failures[op]
            return httpx.Response(status, content=body, headers={"content-type": "application/json"})

        if op == "create_thread":
            return httpx.Response(200, json={"id": self.thread_id, "object": "thread"})
        if op == "add_message":
            return httpx.Response(200, json={"id": "msg_user", "role": "user"})
        if op == "create_run":
            body = {"id": self.run_id}
            if self.initial_status is not None:
                body["status"] = self.initial_status
            return httpx.Response(200, json=body)
        if op == "get_run":
            status = self.run_statuses.pop(0) if len(self.run_statuses) > 1 else self.run_statuses[0]
            return httpx.Response(200, json={"id": self.run_id, "status": status})
        return httpx.Response(200, json=self.reply_listing)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def listing(text: Optional[str]) -> Dict[str, Any]:
    if text is None:
        return {"data": []}
    return {
        "data": [
            {
                "id": "msg_assistant",
                "role": "assistant",
                "content": [{"type": "text", "text": {"value": text, "annotations": []}}],
            }
        ]
    }


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(
        api_key="sk-test",
        assistant_id="asst_know2close",
        base_url=BASE_URL,
        serialize_session_turns=False,
    )


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def service() -> FakeAssistantService:
    return FakeAssistantService()


@pytest.fixture
def make_orchestrator(config, fake_sleep):
    def _make(service: FakeAssistantService, cfg: Optional[ServiceConfig] = None, locks=None):
        cfg = cfg or config
        http = httpx.AsyncClient(transport=service.transport())
        client = AssistantsClient(cfg, http)
        poller = RunPoller(
            client,
            interval_ms=cfg.poll_interval_ms,
            max_wait_ms=cfg.max_wait_ms,
            sleep=fake_sleep,
        )
        return ConversationTurnOrchestrator(client, poller, locks)

    return _make


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)
