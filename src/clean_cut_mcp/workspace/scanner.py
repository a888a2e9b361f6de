"""Scene source scanner — reads ``*.tsx`` components from the animations directory."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from ..duration import synthesize_duration
from ..models.workspace import SceneSourceRecord

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 240

_DURATION_RE = re.compile(r"Duration:\s*(\d+)\s*frames")
_SCENE_COUNT_RE = re.compile(r"calculateSceneBasedDuration\((\d+)\)")
_PROPS_RE = re.compile(r"interface\s+\w+Props\s*\{([^}]*)\}")
_ZOD_RE = re.compile(r"z\.object\(\s*\{([^}]*)\}")
_FIELD_RE = re.compile(r"^\s*(?:readonly\s+)?([A-Za-z_$][\w$]*)\??\s*:", re.M)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def extract_duration(source: str) -> int:
    """Frames declared by a ``Duration: N frames`` comment or scene-count call.

    Falls back to :data:`DEFAULT_DURATION` when neither is present.
    """
    match = _DURATION_RE.search(source)
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    match = _SCENE_COUNT_RE.search(source)
    if match and int(match.group(1)) > 0:
        return synthesize_duration(int(match.group(1))).total_frames
    return DEFAULT_DURATION


def extract_schema_fields(source: str) -> list[str] | None:
    """Field names of the component's props interface or zod schema.

    Returns None when the component declares no props.
    """
    match = _PROPS_RE.search(source) or _ZOD_RE.search(source)
    if match is None:
        return None
    body = "\n".join(
        line for line in match.group(1).splitlines() if not line.strip().startswith("//")
    )
    return _FIELD_RE.findall(body.replace(",", "\n").replace(";", "\n"))


def scan_scene_sources(directory: str | Path) -> list[SceneSourceRecord]:
    """Scan *directory* for scene components, sorted by name.

    Missing directories yield an empty list. Files whose stem is not a valid
    identifier cannot be imported as components and are skipped.
    """
    root = Path(directory).expanduser()
    if not root.is_dir():
        logger.warning("Animations directory not found: %s", root)
        return []

    records: list[SceneSourceRecord] = []
    for path in sorted(root.glob("*.tsx")):
        name = path.stem
        if not _IDENTIFIER_RE.match(name):
            logger.warning("Skipping %s: not a valid component name", path.name)
            continue
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            continue
        fields = extract_schema_fields(source)
        records.append(SceneSourceRecord(
            name=name,
            path=str(path),
            duration=extract_duration(source),
            has_schema=fields is not None,
            schema_fields=fields or [],
        ))
    return records


async def ascan_scene_sources(directory: str | Path) -> list[SceneSourceRecord]:
    """Run :func:`scan_scene_sources` in a worker thread."""
    return await asyncio.to_thread(scan_scene_sources, directory)
