from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol

from loguru import logger

from santa.notify.base import Notifier
from santa.services.registry import Participant

DEFAULT_CONCURRENCY = 4
QUEUE_SIZE = 4

_STOP = object()


@dataclass(frozen=True)
class Assignment:
    source: Participant
    destination: Participant


@dataclass
class DispatchReport:
    delivered: int = 0
    failures: int = 0
    dead_letters: List[Assignment] = field(default_factory=list)


class DeliveryListener(Protocol):
    def record(self, assignment: Assignment, attempt: int, error: Optional[BaseException]) -> None:
        ...


class DispatchPool:
    """Fixed set of workers draining one bounded queue of assignments.

    Each assignment is retried until the notifier accepts it. When
    ``max_attempts`` is set, an assignment that keeps failing is parked in
    ``report.dead_letters`` instead of holding its worker forever.
    """

    def __init__(
        self,
        concurrency: int,
        notifier: Notifier,
        retry_delay: float = 1.0,
        max_attempts: Optional[int] = None,
        listener: Optional[DeliveryListener] = None,
        queue_size: int = QUEUE_SIZE,
    ) -> None:
        if concurrency < 1:
            raise ValueError("Dispatch concurrency must be at least 1.")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be at least 1 when set.")

        self.concurrency = concurrency
        self.notifier = notifier
        self.retry_delay = retry_delay
        self.max_attempts = max_attempts
        self.listener = listener
        self.report = DispatchReport()
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._workers: List[asyncio.Task] = []
        self._closed = False

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"santa-dispatch-{index}")
            for index in range(self.concurrency)
        ]

    async def submit(self, assignment: Assignment) -> None:
        if self._closed:
            raise RuntimeError("Dispatch pool no longer accepts assignments.")
        await self._queue.put(assignment)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for _ in self._workers:
            await self._queue.put(_STOP)

    async def wait(self) -> DispatchReport:
        await asyncio.gather(*self._workers)
        return self.report

    async def _worker(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _STOP:
                return
            await self._deliver(item)

    async def _deliver(self, assignment: Assignment) -> None:
        giver = assignment.source.name
        attempt = 0
        while True:
            attempt += 1
            try:
                await self.notifier.send(assignment.source, assignment.destination)
            except Exception as exc:
                self.report.failures += 1
                self._record(assignment, attempt, exc)
                logger.bind(giver=giver, attempt=attempt).warning(
                    "Error sending assignment to {giver}: {error}", giver=giver, error=str(exc)
                )
                if self.max_attempts is not None and attempt >= self.max_attempts:
                    self.report.dead_letters.append(assignment)
                    logger.bind(giver=giver).error(
                        "Giving up on {giver} after {attempts} attempts", giver=giver, attempts=attempt
                    )
                    return
                await asyncio.sleep(self.retry_delay)
                continue

            self.report.delivered += 1
            self._record(assignment, attempt, None)
            logger.bind(giver=giver, attempt=attempt).info("Sent {giver}", giver=giver)
            return

    def _record(self, assignment: Assignment, attempt: int, error: Optional[BaseException]) -> None:
        if self.listener is None:
            return
        try:
            self.listener.record(assignment, attempt, error)
        except Exception as exc:
            logger.bind(giver=assignment.source.name).exception(
                "Failed to record delivery attempt: {error}", error=str(exc)
            )


def dispatch(
    concurrency: int,
    notifier: Notifier,
    retry_delay: float = 1.0,
    max_attempts: Optional[int] = None,
    listener: Optional[DeliveryListener] = None,
) -> DispatchPool:
    pool = DispatchPool(
        concurrency,
        notifier,
        retry_delay=retry_delay,
        max_attempts=max_attempts,
        listener=listener,
    )
    pool.start()
    return pool


async def deliver_all(
    matching: Mapping[Participant, Participant],
    notifier: Notifier,
    concurrency: int = DEFAULT_CONCURRENCY,
    retry_delay: float = 1.0,
    max_attempts: Optional[int] = None,
    listener: Optional[DeliveryListener] = None,
) -> DispatchReport:
    pool = dispatch(
        concurrency,
        notifier,
        retry_delay=retry_delay,
        max_attempts=max_attempts,
        listener=listener,
    )
    for giver, receiver in matching.items():
        await pool.submit(Assignment(giver, receiver))
    await pool.close()
    return await pool.wait()
