"""Poll loop: one sync cycle over every rule, then wait for the interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractContextManager, nullcontext

from commitwatch.config.models import WatchConfig
from commitwatch.interfaces.sink import NotificationSink
from commitwatch.matching.models import RuleOutcome
from commitwatch.sync.engine import SyncEngine

logger = logging.getLogger(__name__)


class RepositoryWatcher:
    """Runs sync cycles over the configured rules until told to stop.

    Without an interval in the config the watcher checks once and returns.
    AuthError from a cycle ends the session. ``status`` is entered around each
    cycle with a short description, e.g. to show a spinner while it runs.
    """

    def __init__(
        self,
        config: WatchConfig,
        engine: SyncEngine,
        sink: NotificationSink,
        wait: Callable[[int], Awaitable[None]] = asyncio.sleep,
        status: Callable[[str], AbstractContextManager] | None = None,
    ) -> None:
        self._config = config
        self._engine = engine
        self._sink = sink
        self._wait = wait
        self._status = status
        self.cycles = 0

    async def run(self, max_cycles: int | None = None) -> None:
        """Check every repository at least once, then keep polling."""
        if not self._config.notifications:
            logger.warning("No notifications configured, nothing to watch")
            return

        await self.run_cycle()

        interval = self._config.interval_seconds
        if interval is None:
            return
        while max_cycles is None or self.cycles < max_cycles:
            await self._wait(interval)
            await self.run_cycle()

    async def run_cycle(self) -> list[RuleOutcome]:
        rules = self._config.notifications
        count = len({rule.repository.uri for rule in rules})
        label = f"Inspecting {count} {'repository' if count == 1 else 'repositories'}..."
        with self._status(label) if self._status else nullcontext():
            outcomes = await self._engine.run_cycle(rules, self._sink)
        self.cycles += 1
        failed = sum(1 for o in outcomes if o.status == "failed")
        matched = sum(len(o.matches) for o in outcomes)
        logger.debug(
            "Cycle %d done: %d rule(s), %d match(es), %d failure(s)",
            self.cycles,
            len(outcomes),
            matched,
            failed,
        )
        return outcomes
