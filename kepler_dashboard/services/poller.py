"""
Dashboard Poller - Periodic, independent refresh of every dashboard view.

This module provides:
- One asyncio task per view, each on its own poll loop
- Result delivery through a callback
- Filter generations: a result computed for an outdated filter selection is
  dropped when it arrives
- Cancel-and-replace refresh after a filter change
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from kepler_dashboard.engine.filters import FilterState
from kepler_dashboard.models import ErrorDetail, ViewResult

logger = logging.getLogger(__name__)

ViewFn = Callable[[], ViewResult]
ResultCallback = Callable[[ViewResult], Union[None, Awaitable[None]]]


class DashboardPoller:
    """
    Polls a set of views against a shared ``FilterState``.

    Views run in worker threads since the Prometheus client is blocking.
    Views never share mutable state, so no locking is needed: the only
    shared table is ``latest``, where the last delivered result wins.
    """

    def __init__(
        self,
        views: Dict[str, ViewFn],
        filters: FilterState,
        on_result: Optional[ResultCallback] = None,
        interval: float = 15,
    ):
        self.views = views
        self.filters = filters
        self.on_result = on_result
        self.interval = interval
        self.latest: Dict[str, ViewResult] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def start(self):
        """Start one poll loop per view. Must be called from a running event loop."""
        if self.running:
            return
        for name in self.views:
            self._tasks[name] = asyncio.create_task(self._poll_view(name), name=f"poll:{name}")
        logger.info(f"Dashboard poller started: {len(self._tasks)} views every {self.interval}s")

    async def stop(self):
        """Cancel every poll loop and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks = {}
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Dashboard poller stopped")

    async def refresh(self):
        """Cancel in-flight polls and start over with the current filters."""
        await self.stop()
        self.start()

    async def update_filters(self, change: Callable[[FilterState], Any]):
        """
        Apply ``change`` to the filter state and refresh when it took effect.

        Exceptions raised by ``change`` (for example an invalid pod
        selection) propagate and leave the poller untouched.
        """
        generation = self.filters.generation
        change(self.filters)
        if self.filters.generation != generation:
            logger.info(f"Filters changed: {self.filters!r}")
            await self.refresh()

    async def poll_once(self, name: str) -> Optional[ViewResult]:
        """
        Run one view once and deliver its result.

        Returns ``None`` when the filters changed while the view was running.
        """
        view = self.views[name]
        generation = self.filters.generation
        try:
            result = await asyncio.to_thread(view)
        except Exception as e:
            logger.error(f"Error polling view '{name}': {e}")
            result = ViewResult(view=name, error=ErrorDetail(code="VIEW_ERROR", message=str(e)))

        if generation != self.filters.generation:
            logger.debug(f"Discarding stale result for view '{name}' (generation {generation})")
            return None

        result.generation = generation
        self.latest[name] = result
        await self._deliver(result)
        return result

    async def _deliver(self, result: ViewResult):
        if self.on_result is None:
            return
        try:
            outcome = self.on_result(result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(f"Failed to deliver result of view '{result.view}': {e}")

    async def _poll_view(self, name: str):
        while True:
            await self.poll_once(name)
            await asyncio.sleep(self.interval)
