"""Background recording of AI token usage.

Extraction requests hand a ``UsageRecord`` to ``UsageRecorder.record`` and
return immediately. A single worker task drains a bounded queue and writes
each record through its own database session, so a slow or failing write
never delays or fails the request that produced it.

When the queue is full the newest record is dropped and counted. Write
failures are logged and counted; the worker keeps going.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brewlog.logging import get_logger
from brewlog.models import AiUsage
from brewlog.repositories.ai_usage import insert_usage

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0


@dataclass(frozen=True)
class UsageRecord:
    model: str
    endpoint: str
    usage: TokenUsage

    def to_model(self) -> AiUsage:
        return AiUsage(
            model=self.model,
            endpoint=self.endpoint,
            prompt_tokens=self.usage.prompt_tokens,
            completion_tokens=self.usage.completion_tokens,
            total_tokens=self.usage.total_tokens,
            cost=self.usage.cost,
        )


type UsageWriter = Callable[[UsageRecord], Awaitable[None]]


def session_writer(session_factory: async_sessionmaker[AsyncSession]) -> UsageWriter:
    """Writer that commits each record in a fresh session from ``session_factory``."""

    async def write(record: UsageRecord) -> None:
        async with session_factory() as session:
            await insert_usage(session, record.to_model())
            await session.commit()

    return write


class UsageRecorder:
    def __init__(self, writer: UsageWriter, maxsize: int = 100) -> None:
        self._writer = writer
        self._queue: asyncio.Queue[UsageRecord] = asyncio.Queue(maxsize=max(maxsize, 1))
        self._task: asyncio.Task[None] | None = None
        self._stopping = False
        self.written = 0
        self.dropped = 0
        self.failed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def record(self, record: UsageRecord) -> bool:
        """Enqueue without waiting. Returns False when the record was dropped."""
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "usage_record_dropped",
                endpoint=record.endpoint,
                model=record.model,
                dropped=self.dropped,
            )
            return False
        return True

    def start(self) -> None:
        if self.running:
            return
        self._stopping = False
        self._task = asyncio.create_task(self._run(), name="usage-recorder")
        self._task.add_done_callback(self._on_worker_done)
        logger.info("usage_recorder_started", queue_size=self._queue.maxsize)

    async def drain(self) -> None:
        """Wait until every queued record has been written (or has failed)."""
        await self._queue.join()

    async def stop(self, timeout: float = 5.0) -> None:
        """Flush what is queued, up to ``timeout`` seconds, then stop the worker."""
        if self._task is None:
            return
        self._stopping = True
        try:
            await asyncio.wait_for(self.drain(), timeout)
        except TimeoutError:
            logger.warning("usage_recorder_flush_timeout", pending=self.pending)
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(
            "usage_recorder_stopped",
            written=self.written,
            dropped=self.dropped,
            failed=self.failed,
        )

    async def _run(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                await self._writer(record)
                self.written += 1
            except Exception:
                self.failed += 1
                logger.exception(
                    "usage_record_failed", endpoint=record.endpoint, failed=self.failed
                )
            finally:
                self._queue.task_done()

    def _on_worker_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled() or self._stopping:
            return
        logger.error("usage_recorder_crashed", error=repr(task.exception()))
        self._task = None
        self.start()
