"""Publish generated components into the workspace and register them."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import EnforcementFailedError
from ..models.generation import GenerationResult
from ..models.workspace import ManifestRecord, ManifestWriteResult
from .manifest import ANIMATIONS_IMPORT_PREFIX, ManifestStore, atomic_write_text

logger = logging.getLogger(__name__)


def publish_animation(
    result: GenerationResult,
    component_name: str,
    store: ManifestStore,
    animations_dir: str | Path,
) -> tuple[Path, ManifestWriteResult]:
    """Write ``<component_name>.tsx`` and register it in the manifest.

    Only results that passed enforcement are published.

    Returns:
        The component path and the manifest write outcome.

    Raises:
        EnforcementFailedError: If *result* carries a failed enforcement pass.
    """
    if not result.metadata.enforcement.valid:
        raise EnforcementFailedError(result.metadata.enforcement)

    path = Path(animations_dir).expanduser() / f"{component_name}.tsx"
    written = atomic_write_text(path, result.code)
    logger.info("%s %s", "Wrote" if written else "Unchanged", path)

    record = ManifestRecord(
        name=component_name,
        template_path=f"{ANIMATIONS_IMPORT_PREFIX}{component_name}",
        duration=result.spec.total_duration,
    )
    return path, store.register(record)
