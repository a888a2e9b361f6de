"""Transform hierarchy models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..types import TransformLevel, TransformType

_FROZEN = ConfigDict(frozen=True)


class Transform(BaseModel):
    """One CSS transform function, e.g. ``translateY(10px)``."""

    model_config = _FROZEN

    type: TransformType
    value: float


class TransformCheck(BaseModel):
    """Whether a transform type is legal at a hierarchy level."""

    model_config = _FROZEN

    allowed: bool
    reason: str


class ScaleEntry(BaseModel):
    """A scale factor applied at one level of the hierarchy."""

    model_config = _FROZEN

    level: TransformLevel
    scale: float = Field(gt=0)


class CompoundScale(BaseModel):
    """Effective scale after multiplying every non-identity level."""

    model_config = _FROZEN

    total_scale: float
    is_safe: bool
    recommendation: str
    scaled_levels: list[TransformLevel] = Field(default_factory=list)


class Bounds(BaseModel):
    """Axis-aligned box in canvas pixels, origin top-left."""

    model_config = _FROZEN

    x: float = 0.0
    y: float = 0.0
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class CropResult(BaseModel):
    """How much of a transformed box survives inside the viewport."""

    model_config = _FROZEN

    is_cropped: bool
    visible_percentage: float = Field(ge=0, le=100)
    cropped_edges: list[Literal["top", "bottom", "left", "right"]] = Field(default_factory=list)
    overflow: dict[str, float] = Field(default_factory=dict, description="Pixels past each edge")
    recommendation: str


class CroppedFrame(BaseModel):
    model_config = _FROZEN

    frame: int
    visible_percentage: float
    recommendation: str


class ShotCropCheck(BaseModel):
    """Crop safety of one shot across a scale progression."""

    model_config = _FROZEN

    shot_name: str
    max_safe_scale: float
    peak_scale: float
    is_safe: bool
    cropped_frames: list[int] = Field(default_factory=list)
    worst_frame: CroppedFrame | None = None
