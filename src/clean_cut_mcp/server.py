"""Main FastMCP server — mounts all sub-servers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .config import get_config
from .tools.generate import generate_server
from .tools.timeline import timeline_server
from .tools.transforms import transforms_server
from .tools.workspace import workspace_server
from .workspace.manifest import ManifestStore
from .workspace.poller import CleanupPoller

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook — runs the cleanup poller when a workspace is set."""
    cfg = get_config()
    poller: CleanupPoller | None = None
    if cfg.workspace_enabled:
        poller = CleanupPoller(
            ManifestStore.from_config(cfg),
            cfg.animations_dir,
            interval=cfg.poll_interval,
            timeout=cfg.cleanup_timeout,
        )
        poller.start()
    yield {}
    if poller is not None:
        await poller.stop()
        logger.info("Lifespan shutdown: cleanup poller stopped")


app = FastMCP(
    "clean-cut",
    instructions=(
        "Constrained animation generation — validate Remotion timelines frame by "
        "frame, enforce transition, motion-blur and scale rules, and emit source "
        "code only for timelines that pass every rule."
    ),
    lifespan=_lifespan,
)

app.mount(timeline_server)
app.mount(transforms_server)
app.mount(generate_server)
app.mount(workspace_server)


def main() -> None:
    """Entry-point for ``clean-cut-mcp`` console script."""
    app.run()


if __name__ == "__main__":
    main()
