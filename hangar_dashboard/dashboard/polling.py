"""Cancellable polling loops for project status and metrics.

A :class:`Poller` fetches once immediately, then once per period, until
:meth:`Poller.cancel` is called.  Ticks are dispatched without waiting for
the previous fetch, so a slow backend never stretches the cadence.
Cancelling also cancels in-flight fetches: no result for the old key is
applied after cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable, Optional, Set, Tuple

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import METRICS_POLL_INTERVAL, STATUS_POLL_INTERVAL
from hangar_dashboard.models import ProjectMetrics

logger = logging.getLogger(__name__)

PollKey = Tuple[str, Hashable]


class Poller:
    """Recurring fetch keyed by ``(resource, identifier)``.

    Parameters
    ----------
    key:
        ``(resource, identifier)`` pair, used for task names and logs.
    fetch:
        Coroutine function run on every tick.  Exceptions are logged and
        never stop the loop.
    interval:
        Seconds between ticks.
    """

    def __init__(
        self,
        key: PollKey,
        fetch: Callable[[], Awaitable[Any]],
        interval: float,
    ) -> None:
        self.key = key
        self._fetch = fetch
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None
        self._inflight: Set[asyncio.Task[Any]] = set()
        self._cancelled = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self._cancelled:
            raise RuntimeError(f"Poller {self.key} was cancelled and cannot restart")
        if self.running:
            return
        resource, ident = self.key
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"poll-{resource}-{ident}"
        )
        logger.debug("Poller %s started (every %.1fs)", self.key, self._interval)

    def cancel(self) -> None:
        """Stop the loop and every in-flight fetch."""
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
            self._task = None
        for task in list(self._inflight):
            task.cancel()
        self._inflight.clear()
        logger.debug("Poller %s cancelled", self.key)

    async def _run(self) -> None:
        while True:
            self._dispatch()
            await asyncio.sleep(self._interval)

    def _dispatch(self) -> None:
        task = asyncio.get_running_loop().create_task(self._tick())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _tick(self) -> None:
        try:
            await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.debug("Poll %s failed", self.key, exc_info=True)


class StatusPoller:
    """Owns the run-state cell of one project.

    A failed fetch keeps the previous value; :attr:`status` stays ``None``
    until a first value arrives (or while the backend reports none).
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_change: Callable[[Optional[str]], None],
        interval: float = STATUS_POLL_INTERVAL,
    ) -> None:
        self.project_id = project_id
        self.status: Optional[str] = None
        self._client = client
        self._on_change = on_change
        self._poller = Poller(("status", project_id), self.fetch, interval)

    async def fetch(self) -> None:
        try:
            status = await self._client.get_project_status(self.project_id)
        except Exception as exc:
            logger.debug("Status fetch for project %s failed: %s", self.project_id, exc)
            return
        self.status = status
        self._on_change(status)

    def start(self) -> None:
        self._poller.start()

    def cancel(self) -> None:
        self._poller.cancel()


class MetricsPoller:
    """Owns the resource-usage cell of one project.

    A failed fetch clears :attr:`metrics`; there is no stale fallback.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_change: Callable[[Optional[ProjectMetrics]], None],
        interval: float = METRICS_POLL_INTERVAL,
    ) -> None:
        self.project_id = project_id
        self.metrics: Optional[ProjectMetrics] = None
        self._client = client
        self._on_change = on_change
        self._poller = Poller(("metrics", project_id), self.fetch, interval)

    async def fetch(self) -> None:
        try:
            self.metrics = await self._client.get_project_metrics(self.project_id)
        except Exception as exc:
            logger.debug("Metrics fetch for project %s failed: %s", self.project_id, exc)
            self.metrics = None
        self._on_change(self.metrics)

    def start(self) -> None:
        self._poller.start()

    def cancel(self) -> None:
        self._poller.cancel()
