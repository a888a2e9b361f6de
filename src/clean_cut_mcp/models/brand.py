"""Brand palette model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..types import PaletteSource


class BrandPalette(BaseModel):
    """Colour roles for a generated animation."""

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    source: PaletteSource = "default"
    extraction_method: str


class ContrastCheck(BaseModel):
    """WCAG contrast of a palette's text against its background."""

    valid: bool
    contrast_ratio: float
    recommendation: str
