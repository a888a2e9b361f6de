"""Timeline validation and enforcement result models.

Results are frozen: each validation call builds a fresh result that is
never mutated afterwards, which keeps repeated calls comparable.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..types import TimelineErrorKind, TimelineWarningKind, ViolationRule

_FROZEN = ConfigDict(frozen=True)


class TimelineError(BaseModel):
    """A blocking structural defect in the timeline."""

    model_config = _FROZEN

    kind: TimelineErrorKind
    message: str
    affected_frames: list[int] = Field(default_factory=list)
    affected_scenes: list[str] = Field(default_factory=list)


class TimelineWarning(BaseModel):
    """An advisory timing issue; never blocks."""

    model_config = _FROZEN

    kind: TimelineWarningKind
    message: str
    frames: list[int] = Field(default_factory=list)


class FrameReport(BaseModel):
    """Per-frame snapshot of which scenes are on screen."""

    model_config = _FROZEN

    frame: int
    active_scenes: list[str] = Field(default_factory=list)
    is_valid: bool = True
    issue: str | None = None


class ValidationResult(BaseModel):
    """Outcome of a full timeline validation pass."""

    model_config = _FROZEN

    valid: bool
    errors: list[TimelineError] = Field(default_factory=list)
    warnings: list[TimelineWarning] = Field(default_factory=list)
    frame_report: list[FrameReport] = Field(default_factory=list)


class ElementBounds(BaseModel):
    """Axis-aligned bounding box of an element at a given frame."""

    scene: str
    element: str
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class Collision(BaseModel):
    """Two elements whose bounding boxes intersect."""

    model_config = _FROZEN

    element1: str
    element2: str
    overlap_area: float


class Violation(BaseModel):
    """A blocking rule failure reported by the enforcement engine."""

    model_config = _FROZEN

    rule: ViolationRule
    severity: str = "critical"
    location: str
    issue: str
    fix: str


class EnforcementResult(BaseModel):
    """Pass/fail gate consulted before any code is emitted.

    Stricter than :class:`ValidationResult`: a timeline can be structurally
    valid and still fail here (e.g. a fast element without motion blur).
    """

    model_config = _FROZEN

    valid: bool
    violations: list[Violation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    must_fix: list[str] = Field(default_factory=list)
