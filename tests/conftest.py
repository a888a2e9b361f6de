"""Shared test fixtures for clean-cut-mcp."""

from __future__ import annotations

import os
from typing import Any

import pytest

from clean_cut_mcp.models.timeline import AnimationSpec, ElementSpec, SceneDefinition, SceneSpec


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


@pytest.fixture(autouse=True, scope="session")
def _unwrap_fastmcp_tools():
    """Patch tool modules so FunctionTool objects become directly callable."""
    import importlib
    import pkgutil

    import clean_cut_mcp.tools as tools_pkg

    modules = [
        importlib.import_module(info.name)
        for info in pkgutil.walk_packages(tools_pkg.__path__, tools_pkg.__name__ + ".")
    ]

    for mod in modules:
        for name in list(vars(mod)):
            obj = getattr(mod, name, None)
            if obj is not None and hasattr(obj, "fn") and not callable(obj):
                setattr(mod, name, obj.fn)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop any CLEAN_CUT_* variables inherited from the developer shell."""
    for key in list(os.environ):
        if key.startswith("CLEAN_CUT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/clean-cut-mcp/.env."""
    monkeypatch.setattr(
        "clean_cut_mcp.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture()
def clean_config():
    """Reset the config singleton between tests."""
    import clean_cut_mcp.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def workspace(tmp_path, monkeypatch, clean_config):
    """Configure a temporary Remotion workspace with an empty animations dir."""
    root = tmp_path / "remotion"
    (root / "src" / "assets" / "animations").mkdir(parents=True)
    monkeypatch.setenv("CLEAN_CUT_WORKSPACE", str(root))
    return root


def make_scene(name: str, start: int, end: int, **kwargs: Any) -> SceneDefinition:
    """Build a SceneDefinition with crossfade-scale/15 defaults."""
    kwargs.setdefault("exit_type", "crossfade-scale")
    kwargs.setdefault("exit_duration", 15)
    return SceneDefinition(name=name, start_frame=start, end_frame=end, **kwargs)


def make_spec(scenes: list[dict], total: int | None = None) -> AnimationSpec:
    """Build an AnimationSpec from plain dicts with optional ``elements`` lists."""
    built = []
    for raw in scenes:
        raw = dict(raw)
        elements = [ElementSpec(**e) for e in raw.pop("elements", [])]
        raw.setdefault("exit_type", "crossfade-scale")
        raw.setdefault("exit_duration", 15)
        built.append(SceneSpec(elements=elements, **raw))
    end = max(s.end_frame for s in built) if built else 0
    return AnimationSpec(scenes=built, total_duration=total if total is not None else end)
