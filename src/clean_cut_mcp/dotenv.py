"""Auto-load environment variables from a shared config file.

Loads ``~/.config/clean-cut-mcp/.env`` so the workspace path and rule
thresholds can be configured once, independent of the MCP host's env
block. Variables already set in the process environment always win.
``CLEAN_CUT_*`` keys the server does not read are reported and skipped,
so a misspelt threshold never silently falls back to its default.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ENV_PATH = Path.home() / ".config" / "clean-cut-mcp" / ".env"

ENV_PREFIX = "CLEAN_CUT_"
CONFIG_KEYS = frozenset({
    "CLEAN_CUT_WORKSPACE",
    "CLEAN_CUT_FPS",
    "CLEAN_CUT_FRAMES_PER_SCENE",
    "CLEAN_CUT_TRANSITION_FRAMES",
    "CLEAN_CUT_DEFAULT_STYLE",
    "CLEAN_CUT_MOTION_BLUR_VELOCITY",
    "CLEAN_CUT_MAX_SHOT_SCALE",
    "CLEAN_CUT_MIN_EXIT_FRAMES",
    "CLEAN_CUT_MAX_EXIT_FRAMES",
    "CLEAN_CUT_MIN_SCENE_FRAMES",
    "CLEAN_CUT_POLL_INTERVAL",
    "CLEAN_CUT_CLEANUP_TIMEOUT",
})


def _is_unset_or_placeholder(key: str, value: str | None) -> bool:
    """Return True when the current env value should be treated as unset.

    Accepts blank values and unresolved self-placeholders that some MCP
    hosts pass through unchanged (e.g. ``${CLEAN_CUT_WORKSPACE}``).
    """
    if value is None:
        return True

    normalized = value.strip()
    if len(normalized) >= 2 and normalized[0] == normalized[-1] and normalized[0] in ('"', "'"):
        normalized = normalized[1:-1].strip()
    if not normalized:
        return True

    if normalized in {f"${key}", f"${{{key}}}"}:
        return True
    return normalized.startswith(f"${{{key}:-") and normalized.endswith("}")


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse a ``.env`` file into a dict of key-value pairs.

    Blank lines, ``#`` comments and lines without ``=`` are skipped; an
    ``export`` prefix and matching outer quotes are stripped.
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        if key:
            result[key] = value
    return result


def unknown_keys(parsed: dict[str, str]) -> list[str]:
    """``CLEAN_CUT_*`` keys in *parsed* that no setting reads, in file order."""
    return [key for key in parsed if key.startswith(ENV_PREFIX) and key not in CONFIG_KEYS]


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Load vars from *path* into ``os.environ`` when existing values are unset.

    Unrecognised ``CLEAN_CUT_*`` keys are logged and never injected. Keys
    outside the prefix pass through untouched.

    Args:
        path: Path to the ``.env`` file. Defaults to :data:`DEFAULT_ENV_PATH`.

    Returns:
        Dict of vars that were actually injected.
    """
    if path is None:
        path = DEFAULT_ENV_PATH
    parsed = parse_dotenv(path)
    rejected = unknown_keys(parsed)
    for key in rejected:
        logger.warning("Ignoring unknown setting %s in %s", key, path)

    injected: dict[str, str] = {}
    for key, value in parsed.items():
        if key in rejected:
            continue
        if _is_unset_or_placeholder(key, os.environ.get(key)):
            os.environ[key] = value
            injected[key] = value
    return injected
