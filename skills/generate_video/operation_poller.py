"""
Operation poller - wait for a long-running remote job to finish.

submitted → (poll)* → done. The delay between checks starts at
``interval`` and is multiplied by ``backoff`` after every check, capped at
``max_interval``. ``max_wait`` bounds the whole wait; None waits forever.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from agent.errors import OperationFailed, ProtocolViolation, RemoteTimeout
from models.operation import Operation

logger = logging.getLogger(__name__)


class OperationPoller:
    """Poll an Operation through the client until it is done."""

    def __init__(
        self,
        client,
        interval: float = 5.0,
        backoff: float = 1.0,
        max_interval: float = 30.0,
        max_wait: Optional[float] = None,
        sleep: Callable = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")
        self.client = client
        self.interval = interval
        self.backoff = backoff
        self.max_interval = max_interval
        self.max_wait = max_wait
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(cls, client, settings, **kwargs) -> "OperationPoller":
        return cls(
            client,
            interval=settings.video_poll_interval_seconds,
            backoff=settings.video_poll_backoff,
            max_interval=settings.video_poll_max_interval_seconds,
            max_wait=settings.video_max_wait_seconds,
            **kwargs,
        )

    async def wait(self, operation: Optional[Operation]) -> Operation:
        """
        Return the operation once it is done and successful.

        Raises:
            ProtocolViolation: no operation was returned on submission
            RemoteTimeout: max_wait elapsed first
            OperationFailed: the operation finished with an error
        """
        if operation is None or operation.handle is None:
            raise ProtocolViolation("Expected the model to return an operation")

        started = self._clock()
        delay = self.interval
        polls = 0

        while not operation.done:
            elapsed = self._clock() - started
            if self.max_wait is not None and elapsed >= self.max_wait:
                raise RemoteTimeout(
                    f"Deadline exceeded: operation {operation.name or ''} not done "
                    f"after {elapsed:.0f}s"
                )

            await self._sleep(delay)
            operation = await self.client.poll_operation(operation)
            polls += 1
            logger.info(
                f"[Poller] Check {polls}: {'done' if operation.done else 'running'} "
                f"({self._clock() - started:.0f}s)"
            )
            delay = min(delay * self.backoff, self.max_interval)

        if operation.error:
            raise OperationFailed(f"Failed to generate video: {operation.error}")

        return operation
