import logging
from typing import Optional

from app.core.assistants_client import AssistantsClient
from app.core.run_poller import RunPoller
from app.core.session_locks import SessionLocks
from app.schemas.chat import ChatTurnRequest, ChatTurnResponse, Run, extract_reply_text

logger = logging.getLogger(__name__)


class ConversationTurnOrchestrator:
    """
    Runs one chat turn against the remote assistant:

        ensure thread -> add user message -> create run -> poll -> read latest message

    Each step runs only after the previous one succeeded; the first remote
    failure ends the turn.
    """

    def __init__(
        self,
        client: AssistantsClient,
        poller: RunPoller,
        locks: Optional[SessionLocks] = None,
    ):
        self.client = client
        self.poller = poller
        self.locks = locks

    async def resolve_thread(self, thread_id: Optional[str]) -> str:
        if thread_id:
            return thread_id

        thread = await self.client.create_thread()
        logger.info("created thread %s", thread.id)
        return thread.id

    async def append_user_message(self, thread_id: str, message: str) -> None:
        await self.client.add_message(thread_id, message)

    async def run_to_completion(self, thread_id: str) -> Run:
        run = await self.client.create_run(thread_id)
        logger.info("started run %s on %s (%s)", run.id, thread_id, run.status)
        return await self.poller.wait_for_completion(thread_id, run)

    async def fetch_reply(self, thread_id: str) -> str:
        listing = await self.client.list_latest_message(thread_id)
        return extract_reply_text(listing)

    async def handle_turn(self, req: ChatTurnRequest) -> ChatTurnResponse:
        logger.info("chat turn on thread %s", req.thread_id or "<new>")

        if self.locks is None:
            return await self._turn(req)

        async with self.locks.hold(req.thread_id):
            return await self._turn(req)

    async def _turn(self, req: ChatTurnRequest) -> ChatTurnResponse:
        self.client.ensure_configured()
        thread_id = await self.resolve_thread(req.thread_id)
        await self.append_user_message(thread_id, req.message)
        await self.run_to_completion(thread_id)
        reply = await self.fetch_reply(thread_id)
        return ChatTurnResponse(thread_id=thread_id, reply=reply)
