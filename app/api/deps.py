from typing import AsyncIterator

import httpx
from fastapi import Depends

from app.config.settings import ServiceConfig, get_config
from app.core.assistants_client import AssistantsClient
from app.core.run_poller import RunPoller
from app.core.session_locks import SessionLocks
from app.services.conversation import ConversationTurnOrchestrator

session_locks = SessionLocks()


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


def get_assistants_client(
    config: ServiceConfig = Depends(get_config),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> AssistantsClient:
    return AssistantsClient(config, http)


def get_orchestrator(
    config: ServiceConfig = Depends(get_config),
    client: AssistantsClient = Depends(get_assistants_client),
) -> ConversationTurnOrchestrator:
    poller = RunPoller(
        client,
        interval_ms=config.poll_interval_ms,
        max_wait_ms=config.max_wait_ms,
    )
    locks = session_locks if config.serialize_session_turns else None
    return ConversationTurnOrchestrator(client, poller, locks)
