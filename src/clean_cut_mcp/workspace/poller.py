"""Background cleanup poller — prunes manifest entries for deleted components.

Polls the animations directory on a fixed interval. When a known
component disappears, its records are pruned from the manifest; each
prune runs under its own timeout so one slow cleanup cannot stall the
following polls.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..models.workspace import ManifestWriteResult
from .manifest import ManifestStore

logger = logging.getLogger(__name__)


def _component_names(directory: Path) -> set[str]:
    if not directory.is_dir():
        return set()
    return {path.stem for path in directory.glob("*.tsx")}


class CleanupPoller:
    """Fixed-interval asyncio task watching one workspace."""

    def __init__(
        self,
        store: ManifestStore,
        animations_dir: str | Path,
        interval: float = 5.0,
        timeout: float = 10.0,
    ) -> None:
        self.store = store
        self.animations_dir = Path(animations_dir).expanduser()
        self.interval = interval
        self.timeout = timeout
        self.known: set[str] | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> ManifestWriteResult | None:
        """Run one poll; returns the prune outcome when a deletion was seen."""
        current = await asyncio.to_thread(_component_names, self.animations_dir)
        previous = self.known
        self.known = current
        if previous is None:
            logger.info("Cleanup poller watching %d component(s) in %s", len(current), self.animations_dir)
            return None

        for name in sorted(current - previous):
            logger.info("New component detected: %s.tsx", name)
        deleted = sorted(previous - current)
        if not deleted:
            return None

        logger.info("Deletion detected: %s — pruning manifest", ", ".join(deleted))
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.store.prune, current),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.error("Cleanup timed out after %.1fs for %s", self.timeout, ", ".join(deleted))
            return None

    async def run(self) -> None:
        """Poll until cancelled; individual poll failures are logged and skipped."""
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Cleanup poll failed (non-fatal): %s", exc)
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """Schedule :meth:`run` on the running loop (idempotent)."""
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="clean-cut-cleanup-poller")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
