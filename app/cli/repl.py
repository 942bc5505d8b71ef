import asyncio

import httpx

from app.config.logger import configure_logging
from app.config.settings import ServiceConfig, get_config
from app.core.assistants_client import AssistantsClient
from app.core.errors import ChatRelayError, RemoteServiceError
from app.core.run_poller import RunPoller
from app.schemas.chat import ChatTurnRequest
from app.services.conversation import ConversationTurnOrchestrator

EXIT_WORDS = ("exit", "quit", "stop")


def describe_error(exc: ChatRelayError) -> str:
    if isinstance(exc, RemoteServiceError):
        body = exc.body.decode("utf-8", errors="replace")
        return f"remote service returned {exc.status_code}: {body}"
    return str(exc)


async def repl(config: ServiceConfig, input_fn=input, print_fn=print, transport=None):
    async with httpx.AsyncClient(transport=transport) as http:
        client = AssistantsClient(config, http)
        poller = RunPoller(
            client,
            interval_ms=config.poll_interval_ms,
            max_wait_ms=config.max_wait_ms,
        )
        orchestrator = ConversationTurnOrchestrator(client, poller)

        thread_id = input_fn("Thread id (Enter for a new thread): ").strip() or None
        print_fn(f"\nActive thread: {thread_id or '<new>'}\n")

        while True:
            user_input = input_fn("You: ").strip()
            if user_input.lower() in EXIT_WORDS:
                break
            if not user_input:
                continue

            try:
                result = await orchestrator.handle_turn(
                    ChatTurnRequest(message=user_input, thread_id=thread_id)
                )
            except ChatRelayError as e:
                print_fn(f"Error: {describe_error(e)}")
                continue

            if result.thread_id != thread_id:
                thread_id = result.thread_id
                print_fn(f"(thread {thread_id})")
            print_fn("Bot:", result.reply)

    return thread_id


def main():
    configure_logging("WARNING")
    asyncio.run(repl(get_config()))


if __name__ == "__main__":
    main()
