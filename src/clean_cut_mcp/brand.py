"""Brand palette collaborator — default palettes, lightweight extraction, contrast.

Raster images are never decoded. A palette is "extracted" only from text
sources: a JSON palette file, or the hex fills/strokes of an SVG logo.
Anything else falls back to the requested style's default palette.
"""

from __future__ import annotations

import colorsys
import json
import logging
import re
from collections import Counter
from pathlib import Path

from pydantic import ValidationError

from .models.brand import BrandPalette, ContrastCheck

logger = logging.getLogger(__name__)

DARK_TEXT = "#1a1a1a"
LIGHT_TEXT = "#f0f6fc"
WCAG_AAA_RATIO = 7.0

_DEFAULT_PALETTES: dict[str, BrandPalette] = {
    "tech": BrandPalette(
        primary="#0a0a0a", secondary="#1a1a1a", accent="#10b981",
        background="#0a0a0a", text="#f0f6fc",
        source="default", extraction_method="predefined_tech_palette",
    ),
    "elegant": BrandPalette(
        primary="#ffffff", secondary="#f5f5f5", accent="#a78bfa",
        background="#ffffff", text="#1a1a1a",
        source="default", extraction_method="predefined_elegant_palette",
    ),
    "corporate": BrandPalette(
        primary="#1e293b", secondary="#334155", accent="#3b82f6",
        background="#1e293b", text="#f1f5f9",
        source="default", extraction_method="predefined_corporate_palette",
    ),
    "vibrant": BrandPalette(
        primary="#000000", secondary="#1a1a1a", accent="#f59e0b",
        background="#000000", text="#ffffff",
        source="default", extraction_method="predefined_vibrant_palette",
    ),
}

_HEX_RE = re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")
_ROLES = ("primary", "secondary", "accent", "background", "text")


def lookup_palette(style: str) -> BrandPalette | None:
    """Return the default palette for *style*, or None when the style is unknown."""
    return _DEFAULT_PALETTES.get(style.strip().lower())


def default_palette(style: str = "tech") -> BrandPalette:
    """Like :func:`lookup_palette` but resolves unknown styles to ``tech``."""
    palette = lookup_palette(style)
    if palette is None:
        logger.info("Unknown palette style %r, using tech", style)
        return _DEFAULT_PALETTES["tech"]
    return palette


def _normalize_hex(value: str) -> str:
    value = value.lower()
    if len(value) == 4:
        value = "#" + "".join(ch * 2 for ch in value[1:])
    return value


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` / ``#rgb`` into an RGB triple.

    Raises:
        ValueError: If *value* is not a hex colour.
    """
    if not _HEX_RE.fullmatch(value.strip()):
        raise ValueError(f"Not a hex colour: {value!r}")
    hexed = _normalize_hex(value.strip())
    return int(hexed[1:3], 16), int(hexed[3:5], 16), int(hexed[5:7], 16)


def _hls(value: str) -> tuple[float, float, float]:
    r, g, b = hex_to_rgb(value)
    return colorsys.rgb_to_hls(r / 255, g / 255, b / 255)


def relative_luminance(value: str) -> float:
    """WCAG relative luminance of a hex colour."""
    def channel(c: int) -> float:
        s = c / 255
        return s / 12.92 if s <= 0.03928 else ((s + 0.055) / 1.055) ** 2.4

    r, g, b = hex_to_rgb(value)
    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_ratio(first: str, second: str) -> float:
    lighter, darker = sorted((relative_luminance(first), relative_luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def validate_palette_contrast(palette: BrandPalette) -> ContrastCheck:
    """Check text/background contrast against WCAG AAA (7:1)."""
    ratio = round(contrast_ratio(palette.text, palette.background), 2)
    if ratio >= WCAG_AAA_RATIO:
        recommendation = "Sufficient contrast (WCAG AAA compliant)"
    else:
        recommendation = f"Insufficient contrast ({ratio:.2f}:1, need 7:1). Adjust text or background colour."
    return ContrastCheck(valid=ratio >= WCAG_AAA_RATIO, contrast_ratio=ratio, recommendation=recommendation)


def map_colors_to_roles(colors: list[str]) -> BrandPalette | None:
    """Assign colour roles from colours ordered by prominence.

    Most prominent → primary/background, second → secondary, third (or the
    most saturated) → accent. Text is light on dark primaries and dark on
    light ones. Returns None for an empty list.
    """
    if not colors:
        return None
    ordered = [_normalize_hex(c) for c in colors]
    primary = ordered[0]
    secondary = ordered[1] if len(ordered) > 1 else primary
    accent = ordered[2] if len(ordered) > 2 else max(ordered, key=lambda c: _hls(c)[2])
    is_dark = _hls(primary)[1] < 0.5
    return BrandPalette(
        primary=primary,
        secondary=secondary,
        accent=accent,
        background=primary,
        text=LIGHT_TEXT if is_dark else DARK_TEXT,
        source="extracted",
        extraction_method="dominant_color_analysis",
    )


def _palette_from_json(path: Path) -> BrandPalette:
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Palette file must contain a JSON object")
    missing = [role for role in _ROLES if role not in data]
    if missing:
        raise ValueError(f"Palette file missing role(s): {', '.join(missing)}")
    colors = {role: _normalize_hex(str(data[role])) for role in _ROLES}
    for value in colors.values():
        hex_to_rgb(value)
    return BrandPalette(**colors, source="extracted", extraction_method="palette_file")


def _palette_from_svg(path: Path) -> BrandPalette | None:
    counts = Counter(_normalize_hex(m) for m in _HEX_RE.findall(path.read_text()))
    palette = map_colors_to_roles([color for color, _ in counts.most_common()])
    if palette is None:
        return None
    return palette.model_copy(update={"extraction_method": "svg_color_frequency"})


def extract_palette(source_path: str | Path | None, fallback_style: str = "tech") -> BrandPalette:
    """Derive a palette from a brand asset, falling back to a default palette.

    Args:
        source_path: JSON palette file or SVG logo. Raster formats are not
            decoded and always use the fallback.
        fallback_style: Default palette style used on any failure.

    Returns:
        An extracted palette, or the fallback style's default palette.
    """
    fallback = default_palette(fallback_style)
    if not source_path:
        return fallback

    path = Path(source_path).expanduser()
    if not path.is_file():
        logger.warning("Brand asset not found: %s — using %s palette", path, fallback_style)
        return fallback

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            palette = _palette_from_json(path)
        elif suffix == ".svg":
            palette = _palette_from_svg(path)
        else:
            logger.info("No text colour data in %s — using %s palette", path.name, fallback_style)
            return fallback
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning("Palette extraction failed for %s: %s — using %s palette", path, exc, fallback_style)
        return fallback

    if palette is None:
        logger.info("No colours found in %s — using %s palette", path.name, fallback_style)
        return fallback
    logger.info("Extracted palette from %s (%s)", path.name, palette.extraction_method)
    return palette
