"""
Drive one run to a terminal status or to the polling deadline.

The loop sleeps a fixed interval, then checks the status once, and counts
only the slept time toward the deadline. It stops early on ``completed`` or
``failed``; every other status keeps it polling until the deadline.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List

from app.core.assistants_client import AssistantsClient
from app.core.errors import RunNotCompletedError
from app.schemas.chat import Run, RunStatus

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class PollOutcome:
    run: Run
    waited_ms: int
    checks: int
    statuses: List[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.run.status == RunStatus.COMPLETED


class RunPoller:
    def __init__(
        self,
        client: AssistantsClient,
        *,
        interval_ms: int = 800,
        max_wait_ms: int = 20000,
        sleep: Sleep = asyncio.sleep,
    ):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.client = client
        self.interval_ms = interval_ms
        self.max_wait_ms = max_wait_ms
        self.sleep = sleep

    async def poll(self, thread_id: str, run: Run) -> PollOutcome:
        outcome = PollOutcome(run=run, waited_ms=0, checks=0, statuses=[run.status])

        while (
            outcome.run.status not in RunStatus.TERMINAL
            and outcome.waited_ms < self.max_wait_ms
        ):
            await self.sleep(self.interval_ms / 1000)
            outcome.waited_ms += self.interval_ms

            outcome.run = await self.client.get_run(thread_id, run.id)
            outcome.checks += 1
            outcome.statuses.append(outcome.run.status)
            logger.debug(
                "run %s on %s: %s after %sms",
                run.id, thread_id, outcome.run.status, outcome.waited_ms,
            )

        return outcome

    async def wait_for_completion(self, thread_id: str, run: Run) -> Run:
        """Poll and raise RunNotCompletedError unless the run ends ``completed``."""
        outcome = await self.poll(thread_id, run)
        if not outcome.completed:
            logger.info(
                "run %s on %s ended as %s after %s checks",
                run.id, thread_id, outcome.run.status, outcome.checks,
            )
            raise RunNotCompletedError(outcome.run.status)
        logger.info(
            "run %s on %s completed after %s checks",
            run.id, thread_id, outcome.checks,
        )
        return outcome.run
