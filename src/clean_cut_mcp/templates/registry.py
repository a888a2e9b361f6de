"""Static template catalog — loaded once from the bundled ``catalog.json``."""

from __future__ import annotations

import json
import logging
from collections import Counter
from functools import lru_cache
from pathlib import Path

from ..models.templates import TemplateRecord
from ..types import Platform, TemplateCategory

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).with_name("catalog.json")


def parse_catalog(data: dict) -> tuple[TemplateRecord, ...]:
    """Validate a catalog document; ids must be unique.

    Raises:
        ValueError: On duplicate ids or a malformed entry.
    """
    records = tuple(TemplateRecord.model_validate(entry) for entry in data.get("templates", []))
    duplicates = [tid for tid, n in Counter(r.id for r in records).items() if n > 1]
    if duplicates:
        raise ValueError(f"Duplicate template id(s): {', '.join(duplicates)}")
    return records


@lru_cache(maxsize=1)
def load_catalog() -> tuple[TemplateRecord, ...]:
    """Return the bundled catalog; the tuple is shared and never mutated."""
    records = parse_catalog(json.loads(CATALOG_PATH.read_text()))
    logger.info("Loaded %d template(s) from %s", len(records), CATALOG_PATH.name)
    return records


def get_template(catalog: tuple[TemplateRecord, ...] | list[TemplateRecord], template_id: str) -> TemplateRecord | None:
    """Find a template by id; None when absent."""
    for record in catalog:
        if record.id == template_id:
            return record
    return None


def filter_by_category(catalog, category: TemplateCategory) -> list[TemplateRecord]:
    return [r for r in catalog if r.category == category]


def filter_by_platform(catalog, platform: Platform) -> list[TemplateRecord]:
    return [r for r in catalog if platform in r.platforms]


def catalog_stats(catalog) -> dict:
    """Counts per category, platform and aspect ratio."""
    platforms: Counter[str] = Counter()
    for record in catalog:
        platforms.update(record.platforms)
    return {
        "total": len(catalog),
        "by_category": dict(Counter(r.category for r in catalog)),
        "by_platform": dict(platforms),
        "by_aspect_ratio": dict(Counter(r.aspect_ratio for r in catalog)),
    }
