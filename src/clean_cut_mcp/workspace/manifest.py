"""Workspace manifest — structured composition records plus generated ``Root.tsx``.

Records are the unit of change: the JSON manifest is parsed into
:class:`ManifestRecord` objects, modified in memory and re-serialized, and
``Root.tsx`` is always regenerated from the full record list.

Both the publisher and the cleanup poller write here, so every
read-modify-write runs under a per-workspace lock. Files are replaced via
a temp file and ``os.replace`` and left untouched when content is unchanged.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from ..config import ServerConfig
from ..models.workspace import ManifestRecord, ManifestWriteResult, SceneSourceRecord

logger = logging.getLogger(__name__)

MANIFEST_VERSION = 1
ANIMATIONS_IMPORT_PREFIX = "./assets/animations/"

_LOCKS: dict[str, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def workspace_lock(workspace: str | Path) -> threading.RLock:
    """Return the process-wide lock serializing writes for *workspace*."""
    key = str(Path(workspace).expanduser().resolve())
    with _LOCKS_GUARD:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = _LOCKS[key] = threading.RLock()
        return lock


def atomic_write_text(path: Path, content: str) -> bool:
    """Write *content* to *path* via temp file + rename.

    Returns:
        False when the file already holds exactly *content* (nothing written).
    """
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return True


def render_root_source(records: Iterable[ManifestRecord], fps: int = 30, width: int = 1920, height: int = 1080) -> str:
    """Generate the Remotion ``Root.tsx`` registering every record."""
    records = list(records)
    imports = [f"import {{ {r.name} }} from '{r.template_path}';" for r in records]
    schemas = []
    for record in records:
        if not record.has_schema:
            continue
        fields = ",\n".join(f"  {field}: z.string().optional()" for field in record.schema_fields)
        schemas.append(f"const {record.name}Schema = z.object({{\n{fields}\n}});")

    compositions = []
    for record in records:
        schema_line = f"\n        schema={{{record.name}Schema}}" if record.has_schema else ""
        compositions.append(
            "      <Composition\n"
            f'        id="{record.name}"\n'
            f"        component={{{record.name}}}\n"
            f"        durationInFrames={{{record.duration}}}\n"
            f"        fps={{{fps}}}\n"
            f"        width={{{width}}}\n"
            f"        height={{{height}}}{schema_line}\n"
            "      />"
        )

    parts = [
        "// Generated by clean-cut-mcp from compositions.json. Do not edit by hand.",
        "import React from 'react';",
        "import { Composition } from 'remotion';",
        "import { z } from 'zod';",
        *imports,
        "",
    ]
    if schemas:
        parts += ["\n\n".join(schemas), ""]
    parts += [
        "export const RemotionRoot: React.FC = () => {",
        "  return (",
        "    <>",
        *compositions,
        "    </>",
        "  );",
        "};",
        "",
    ]
    return "\n".join(parts)


def record_from_source(source: SceneSourceRecord) -> ManifestRecord:
    return ManifestRecord(
        name=source.name,
        template_path=f"{ANIMATIONS_IMPORT_PREFIX}{source.name}",
        duration=source.duration,
        has_schema=source.has_schema,
        schema_fields=source.schema_fields,
    )


class ManifestStore:
    """Serialized access to one workspace's manifest and ``Root.tsx``."""

    def __init__(
        self,
        workspace: str | Path,
        manifest_path: str | Path | None = None,
        root_path: str | Path | None = None,
        fps: int = 30,
    ) -> None:
        self.workspace = Path(workspace).expanduser()
        self.manifest_path = Path(manifest_path) if manifest_path else self.workspace / "src" / "compositions.json"
        self.root_path = Path(root_path) if root_path else self.workspace / "src" / "Root.tsx"
        self.fps = fps
        self._lock = workspace_lock(self.workspace)

    @classmethod
    def from_config(cls, cfg: ServerConfig) -> ManifestStore:
        return cls(cfg.workspace_path, cfg.manifest_path, cfg.root_source_path, fps=cfg.fps)

    def read(self) -> list[ManifestRecord]:
        """Load records; a missing manifest is an empty list.

        Raises:
            ValueError: If the manifest is not valid JSON or has bad records.
        """
        if not self.manifest_path.is_file():
            return []
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top level must be an object")
            return [ManifestRecord.model_validate(item) for item in data.get("compositions", [])]
        except (ValueError, ValidationError) as exc:
            raise ValueError(f"Corrupt manifest {self.manifest_path}: {exc}") from exc

    def write(self, records: Iterable[ManifestRecord]) -> ManifestWriteResult:
        """Replace the manifest with *records* (order kept, later duplicates win)."""
        with self._lock:
            previous = [r.name for r in self.read()]
            unique: dict[str, ManifestRecord] = {}
            for record in records:
                unique.pop(record.name, None)
                unique[record.name] = record
            ordered = list(unique.values())

            document = {
                "version": MANIFEST_VERSION,
                "compositions": [r.model_dump(mode="json") for r in ordered],
            }
            manifest_changed = atomic_write_text(self.manifest_path, json.dumps(document, indent=2) + "\n")
            root_changed = atomic_write_text(self.root_path, render_root_source(ordered, fps=self.fps))

            names = [r.name for r in ordered]
            result = ManifestWriteResult(
                changed=manifest_changed or root_changed,
                records=len(ordered),
                added=[n for n in names if n not in previous],
                removed=[n for n in previous if n not in names],
            )
        if result.changed:
            logger.info(
                "Manifest updated: %d record(s), +%d -%d",
                result.records, len(result.added), len(result.removed),
            )
        return result

    def register(self, record: ManifestRecord) -> ManifestWriteResult:
        """Add or replace one record, keeping the position of an existing entry."""
        with self._lock:
            records = self.read()
            for index, existing in enumerate(records):
                if existing.name == record.name:
                    records[index] = record
                    break
            else:
                records.append(record)
            return self.write(records)

    def prune(self, existing: Iterable[str] | None = None) -> ManifestWriteResult:
        """Drop records whose component is gone.

        Args:
            existing: Component names still on disk. When omitted, each
                record's source file is checked directly.
        """
        with self._lock:
            records = self.read()
            if existing is None:
                src = self.root_path.parent
                kept = [r for r in records if (src / f"{r.template_path}.tsx").is_file()]
            else:
                names = set(existing)
                kept = [r for r in records if r.name in names]
            return self.write(kept)

    def sync(self, sources: Iterable[SceneSourceRecord]) -> ManifestWriteResult:
        """Make the manifest mirror *sources* exactly."""
        return self.write(record_from_source(s) for s in sources)
