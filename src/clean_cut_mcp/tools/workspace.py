"""Workspace tools — 2 tools on a FastMCP sub-server."""

from __future__ import annotations

import asyncio

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..config import ServerConfig, get_config
from ..errors import WorkspaceNotConfiguredError, make_tool_error
from ..workspace.manifest import ManifestStore
from ..workspace.scanner import ascan_scene_sources

workspace_server = FastMCP("workspace")


def _require_workspace() -> ServerConfig:
    cfg = get_config()
    if not cfg.workspace_enabled:
        raise WorkspaceNotConfiguredError("CLEAN_CUT_WORKSPACE is not set")
    return cfg


@workspace_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def workspace_sync() -> dict:
    """Rebuild the composition manifest and Root.tsx from the animations directory.

    Components on disk are registered, entries for deleted components are
    removed. Nothing is written when the manifest is already current.

    Returns:
        Dict with changed, records, added and removed.
    """
    try:
        cfg = _require_workspace()
        sources = await ascan_scene_sources(cfg.animations_dir)
        store = ManifestStore.from_config(cfg)
        result = await asyncio.to_thread(store.sync, sources)
        return result.model_dump(mode="json")
    except Exception as exc:
        return make_tool_error(exc)


@workspace_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def workspace_list() -> dict:
    """List registered compositions and scene components on disk.

    Returns:
        Dict with registered records, on-disk sources, and the names that
        are registered without a file (orphaned) or on disk but unregistered.
    """
    try:
        cfg = _require_workspace()
        sources = await ascan_scene_sources(cfg.animations_dir)
        store = ManifestStore.from_config(cfg)
        registered = await asyncio.to_thread(store.read)

        on_disk = {s.name for s in sources}
        names = {r.name for r in registered}
        return {
            "workspace": cfg.workspace_path,
            "registered": [r.model_dump(mode="json") for r in registered],
            "sources": [s.model_dump(mode="json") for s in sources],
            "orphaned": sorted(names - on_disk),
            "unregistered": sorted(on_disk - names),
        }
    except Exception as exc:
        return make_tool_error(exc)
