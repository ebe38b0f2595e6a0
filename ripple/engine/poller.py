#!/usr/bin/env python3
"""
Ripple - Propagation Poller
Discovers the authoritative nameservers once, then sweeps every target that
has not yet propagated on a fixed interval until all of them match, the
deadline passes, or the run is cancelled. Progress is published as events.
"""
import asyncio
import logging
import time
from typing import AsyncIterator, Awaitable, Callable, List, Optional

from ..config import EVENT_QUEUE_SIZE, LOCAL_RESOLVER_NAME
from ..utils import parse_server_address
from .authoritative import DiscoveryError, find_authoritative_servers
from .checker import check_authoritative, check_resolver
from .events import (
    Cancelled,
    Complete,
    Discovered,
    Error,
    EventQueue,
    ProgressEvent,
    ResolversInitialized,
    TargetPropagated,
    Timeout,
)
from .models import (
    AUTHORITATIVE,
    RESOLVER,
    Endpoint,
    MatchCriteria,
    PropagationResult,
    RunConfig,
    TargetStatus,
)

logger = logging.getLogger(__name__)

Checker = Callable[[Endpoint, str, MatchCriteria, float], Awaitable[Optional[str]]]

_DONE = "done"
_CANCELLED = "cancelled"
_TIMED_OUT = "timed_out"


def endpoint_from_address(address: str, name: Optional[str] = None) -> Endpoint:
    host, port = parse_server_address(address)
    return Endpoint(name=name or host, address=host, port=port)


class PropagationPoller:
    """Runs one propagation check. A poller instance is good for a single run."""

    def __init__(
        self,
        config: RunConfig,
        *,
        discover: Callable[..., Awaitable[List[Endpoint]]] = find_authoritative_servers,
        check_authoritative: Checker = check_authoritative,
        check_resolver: Checker = check_resolver,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._discover = discover
        self._check_authoritative = check_authoritative
        self._check_resolver = check_resolver
        self._clock = clock

        self._authoritative: List[TargetStatus] = []
        self._resolvers: List[TargetStatus] = []
        self._events: Optional[EventQueue] = None
        self._cancel: Optional[asyncio.Event] = None
        self._lock: Optional[asyncio.Lock] = None
        self._finished = False
        self._started_at = 0.0

    def _elapsed(self) -> float:
        return self._clock() - self._started_at

    def _emit(self, event: ProgressEvent):
        if self._events is not None:
            self._events.publish(event)

    async def _wait(self, aw: Awaitable, timeout: Optional[float]) -> str:
        """Waits for aw, the cancel signal or the timeout, whichever comes first."""
        task = asyncio.ensure_future(aw)
        cancel_wait = asyncio.ensure_future(self._cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {task, cancel_wait}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            cancel_wait.cancel()

        if self._cancel.is_set():
            task.cancel()
            return _CANCELLED
        if task in done:
            return _DONE
        task.cancel()
        return _TIMED_OUT

    async def run(
        self, events: Optional[EventQueue] = None, cancel: Optional[asyncio.Event] = None
    ) -> PropagationResult:
        """
        Drives the run to its terminal event and returns the summary.

        Args:
            events: Queue receiving progress events, or None to discard them.
            cancel: Setting this event cancels the run cooperatively.
        """
        self._events = events
        self._cancel = cancel or asyncio.Event()
        self._lock = asyncio.Lock()
        self._started_at = self._clock()
        try:
            return await self._run()
        except Exception as e:
            if self._finished:
                raise
            logger.error(f"Unexpected error while checking {self.config.domain}: {e}", exc_info=True)
            return await self._finish(Error(message=f"unexpected error: {e}"))

    async def _run(self) -> PropagationResult:
        domain = self.config.domain
        roots = [endpoint_from_address(addr) for addr in self.config.root_servers]
        discovery = asyncio.ensure_future(
            self._discover(domain, roots, timeout=self.config.query_timeout)
        )
        if await self._wait(discovery, None) == _CANCELLED:
            return await self._finish(Cancelled(elapsed=self._elapsed()))
        try:
            servers = discovery.result()
        except DiscoveryError as e:
            logger.error(f"Failed to find authoritative servers for {domain}: {e}")
            return await self._finish(Error(message=f"failed to find authoritative servers: {e}"))
        except Exception as e:
            logger.error(f"Unexpected error during discovery for {domain}: {e}", exc_info=True)
            return await self._finish(Error(message=f"failed to find authoritative servers: {e}"))

        logger.info(f"Found {len(servers)} authoritative nameservers for {domain}")
        self._authoritative = [TargetStatus(endpoint=ep, role=AUTHORITATIVE) for ep in servers]
        self._emit(Discovered(endpoints=tuple(servers)))

        resolvers = [endpoint_from_address(addr) for addr in self.config.public_resolvers]
        resolvers.append(Endpoint(name=LOCAL_RESOLVER_NAME))
        self._resolvers = [TargetStatus(endpoint=ep, role=RESOLVER) for ep in resolvers]
        self._emit(ResolversInitialized(endpoints=tuple(resolvers)))

        return await self._poll()

    async def _poll(self) -> PropagationResult:
        interval = self.config.poll_interval
        self._started_at = self._clock()
        deadline = self._started_at + self.config.deadline
        next_tick = self._started_at

        while True:
            if self._cancel.is_set():
                return await self._finish(Cancelled(elapsed=self._elapsed()))
            remaining = deadline - self._clock()
            if remaining <= 0:
                return await self._finish(Timeout(elapsed=self._elapsed()))

            state = await self._wait(self._sweep(), remaining)
            if state == _CANCELLED:
                return await self._finish(Cancelled(elapsed=self._elapsed()))
            if state == _TIMED_OUT:
                return await self._finish(Timeout(elapsed=self._elapsed()))

            async with self._lock:
                all_done = all(t.propagated for t in self._authoritative + self._resolvers)
            if all_done:
                return await self._finish(Complete(elapsed=self._elapsed()))

            now = self._clock()
            next_tick = max(next_tick + interval, now)
            if await self._wait(asyncio.sleep(min(next_tick, deadline) - now), None) == _CANCELLED:
                return await self._finish(Cancelled(elapsed=self._elapsed()))

    async def _sweep(self):
        """One round of checks: authoritative targets first, then resolvers."""
        batches = (
            (self._authoritative, self._check_authoritative),
            (self._resolvers, self._check_resolver),
        )
        for targets, checker in batches:
            pending = [t for t in targets if not t.propagated]
            if not pending:
                continue
            results = await asyncio.gather(
                *(self._check_target(t, checker) for t in pending), return_exceptions=True
            )
            for target, result in zip(pending, results):
                if isinstance(result, Exception):
                    logger.debug(f"Check against {target.endpoint.name} raised: {result!r}")

    async def _check_target(self, target: TargetStatus, checker: Checker):
        record = await checker(
            target.endpoint, self.config.domain, self.config.criteria, self.config.query_timeout
        )
        if not record:
            return
        async with self._lock:
            # First success wins; nothing is applied once the run is over.
            if self._finished or self._cancel.is_set() or target.propagated:
                return
            target.propagated = True
            target.found_after = self._elapsed()
            target.matched_record = record
            self._emit(
                TargetPropagated(
                    endpoint=target.endpoint,
                    role=target.role,
                    matched_record=record,
                    found_after=target.found_after,
                )
            )

    async def _finish(self, event: ProgressEvent) -> PropagationResult:
        async with self._lock:
            self._finished = True
            result = PropagationResult(
                domain=self.config.domain,
                criteria=self.config.criteria,
                outcome=event.kind,
                elapsed=getattr(event, "elapsed", self._elapsed()),
                error=getattr(event, "message", None),
                authoritative=[t.snapshot() for t in self._authoritative],
                resolvers=[t.snapshot() for t in self._resolvers],
            )
        logger.debug(f"Run for {self.config.domain} finished: {event.kind}")
        if self._events is not None:
            await self._events.close(event)
        return result


async def stream_propagation(
    config: RunConfig,
    cancel: Optional[asyncio.Event] = None,
    maxsize: int = EVENT_QUEUE_SIZE,
    **poller_kwargs,
) -> AsyncIterator[ProgressEvent]:
    """
    Yields the events of one run, ending with its terminal event.
    Closing the generator early cancels the run.
    """
    events = EventQueue(maxsize)
    poller = PropagationPoller(config, **poller_kwargs)
    task = asyncio.create_task(poller.run(events, cancel))
    try:
        async for event in events:
            yield event
        await task
    finally:
        if not task.done():
            task.cancel()


def check_propagation(config: RunConfig, **poller_kwargs) -> PropagationResult:
    """Synchronous wrapper: runs a check to completion and returns its summary."""
    return asyncio.run(PropagationPoller(config, **poller_kwargs).run())
