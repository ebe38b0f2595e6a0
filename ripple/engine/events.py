#!/usr/bin/env python3
"""
Ripple - Progress Events
Typed events emitted by a propagation run and the bounded queue that carries them.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, ClassVar, Tuple

from ..config import EVENT_QUEUE_SIZE
from .models import Endpoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    kind: ClassVar[str] = "event"
    terminal: ClassVar[bool] = False


@dataclass(frozen=True)
class Discovered(ProgressEvent):
    kind: ClassVar[str] = "discovered"
    endpoints: Tuple[Endpoint, ...]


@dataclass(frozen=True)
class ResolversInitialized(ProgressEvent):
    kind: ClassVar[str] = "resolvers_initialized"
    endpoints: Tuple[Endpoint, ...]


@dataclass(frozen=True)
class TargetPropagated(ProgressEvent):
    kind: ClassVar[str] = "target_propagated"
    endpoint: Endpoint
    role: str
    matched_record: str
    found_after: float


@dataclass(frozen=True)
class Complete(ProgressEvent):
    kind: ClassVar[str] = "complete"
    terminal: ClassVar[bool] = True
    elapsed: float


@dataclass(frozen=True)
class Timeout(ProgressEvent):
    kind: ClassVar[str] = "timeout"
    terminal: ClassVar[bool] = True
    elapsed: float


@dataclass(frozen=True)
class Cancelled(ProgressEvent):
    kind: ClassVar[str] = "cancelled"
    terminal: ClassVar[bool] = True
    elapsed: float = 0.0


@dataclass(frozen=True)
class Error(ProgressEvent):
    kind: ClassVar[str] = "error"
    terminal: ClassVar[bool] = True
    message: str


class EventQueue:
    """
    Bounded hand-off between a run and its consumer.

    Intermediate events are dropped when the queue is full so a slow consumer
    never stalls the poller. The terminal event is always delivered, waiting
    for space if needed. Iterating the queue yields events up to and including
    the terminal one.
    """

    def __init__(self, maxsize: int = EVENT_QUEUE_SIZE):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: ProgressEvent) -> bool:
        """Best-effort delivery of an intermediate event."""
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug(f"Event queue full, dropped {event.kind} event")
            return False
        return True

    async def close(self, event: ProgressEvent) -> None:
        """Deliver the terminal event. Nothing is accepted afterwards."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(event)

    async def get(self) -> ProgressEvent:
        return await self._queue.get()

    async def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        while True:
            event = await self._queue.get()
            yield event
            if event.terminal:
                return
