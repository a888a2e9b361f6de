"""Transform isolation across the shot/element/child hierarchy.

Scale is only legal at the shot level. A shot zoomed 1.19x holding an
element zoomed 1.22x renders at 1.45x and crops, so every other level is
limited to translation (and rotation at element level).
"""

from __future__ import annotations

import logging
import re
import warnings
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .models.transforms import (
    Bounds,
    CompoundScale,
    CroppedFrame,
    CropResult,
    ScaleEntry,
    ShotCropCheck,
    Transform,
    TransformCheck,
)
from .types import TransformLevel, TransformType

logger = logging.getLogger(__name__)

TRANSFORM_RULES: Mapping[str, Mapping[str, bool]] = MappingProxyType({
    "shot": MappingProxyType({"scale": True, "translateX": True, "translateY": True, "rotate": False}),
    "element": MappingProxyType({"scale": False, "translateX": True, "translateY": True, "rotate": True}),
    "child": MappingProxyType({"scale": False, "translateX": False, "translateY": True, "rotate": False}),
})

# Canvas the crop checks measure against when none is given.
DEFAULT_VIEWPORT = (1920, 1080)
CROP_SAFETY_MARGIN = 0.95

_UNITS = {"scale": "", "translateX": "px", "translateY": "px", "rotate": "deg"}
_FUNC_RE = re.compile(r"([A-Za-z][A-Za-z0-9]*)\(\s*([^)]*?)\s*\)")
_NUMBER_RE = re.compile(r"^(-?\d*\.?\d+)\s*(px|deg)?$")


class ScaleIsolationWarning(UserWarning):
    """Emitted when a disallowed transform is stripped instead of applied."""


def validate_transform(level: TransformLevel, transform_type: TransformType) -> TransformCheck:
    """Look up whether *transform_type* may be applied at *level*.

    Raises:
        ValueError: For an unknown level or transform type.
    """
    if level not in TRANSFORM_RULES:
        raise ValueError(f"Unknown transform level '{level}'")
    if transform_type not in TRANSFORM_RULES[level]:
        raise ValueError(f"Unknown transform type '{transform_type}'")

    if TRANSFORM_RULES[level][transform_type]:
        return TransformCheck(allowed=True, reason="Transform allowed at this level")

    reasons = {
        "scale": (
            f"Scale at {level} level compounds with the shot scale and crops content. "
            "Apply scale at 'shot' level only."
        ),
        "translateX": f"translateX at {level} level stacks on parent slides and drifts content off-frame.",
        "translateY": f"translateY at {level} level stacks on parent movement.",
        "rotate": f"Rotate at {level} level compounds with parent transforms.",
    }
    return TransformCheck(allowed=False, reason=reasons[transform_type])


def calculate_compound_scale(entries: Iterable[ScaleEntry | dict]) -> CompoundScale:
    """Multiply every ``scale != 1`` entry; safe iff at most one level scales."""
    total = 1.0
    parts: list[str] = []
    levels: list[TransformLevel] = []
    for raw in entries:
        entry = raw if isinstance(raw, ScaleEntry) else ScaleEntry.model_validate(raw)
        if entry.scale != 1.0:
            total *= entry.scale
            parts.append(f"{entry.level}: {entry.scale:.2f}x")
            levels.append(entry.level)

    is_safe = len(parts) <= 1
    if is_safe:
        recommendation = "Scale applied at a single level only"
    else:
        recommendation = (
            f"Compound scale: {' x '.join(parts)} = {total:.2f}x total. "
            "Apply scale at 'shot' level only."
        )
    return CompoundScale(
        total_scale=total,
        is_safe=is_safe,
        recommendation=recommendation,
        scaled_levels=levels,
    )


def transformed_bounds(
    bounds: Bounds,
    scale: float = 1.0,
    translate_x: float = 0.0,
    translate_y: float = 0.0,
) -> Bounds:
    """Box after scaling about its centre and then translating it."""
    width = bounds.width * scale
    height = bounds.height * scale
    center_x = bounds.x + bounds.width / 2 + translate_x
    center_y = bounds.y + bounds.height / 2 + translate_y
    return Bounds(x=center_x - width / 2, y=center_y - height / 2, width=width, height=height)


def detect_viewport_crop(bounds: Bounds, viewport: tuple[float, float] = DEFAULT_VIEWPORT) -> CropResult:
    """Report which edges of *bounds* fall outside *viewport* and how much stays visible."""
    view_w, view_h = viewport
    overflow = {
        "top": max(0.0, -bounds.y),
        "bottom": max(0.0, bounds.y + bounds.height - view_h),
        "left": max(0.0, -bounds.x),
        "right": max(0.0, bounds.x + bounds.width - view_w),
    }
    edges = [edge for edge, amount in overflow.items() if amount > 0]

    visible_w = max(0.0, min(view_w, bounds.x + bounds.width) - max(0.0, bounds.x))
    visible_h = max(0.0, min(view_h, bounds.y + bounds.height) - max(0.0, bounds.y))
    area = bounds.width * bounds.height
    visible = min(100.0, visible_w * visible_h / area * 100) if area > 0 else 100.0

    if visible < 50:
        recommendation = f"CRITICAL: only {visible:.1f}% visible. Reduce scale or reposition the element."
    elif visible < 90:
        recommendation = f"WARNING: {visible:.1f}% visible. Consider reducing scale."
    elif edges:
        recommendation = f"Minor crop: {visible:.1f}% visible, edges slightly cut off."
    else:
        recommendation = "No cropping detected, element fully visible."
    return CropResult(
        is_cropped=bool(edges),
        visible_percentage=visible,
        cropped_edges=edges,
        overflow=overflow,
        recommendation=recommendation,
    )


def max_safe_scale(
    width: float,
    height: float,
    viewport: tuple[float, float] = DEFAULT_VIEWPORT,
    margin: float = CROP_SAFETY_MARGIN,
) -> float:
    """Largest scale at which a *width* x *height* box still fits *viewport*, less *margin*.

    Raises:
        ValueError: If either dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Element size must be positive, got {width:g}x{height:g}")
    view_w, view_h = viewport
    return min(view_w / width, view_h / height) * margin


def would_scale_crop(
    width: float,
    height: float,
    scale: float,
    viewport: tuple[float, float] = DEFAULT_VIEWPORT,
) -> bool:
    """True when a *width* x *height* box outgrows *viewport* at *scale*."""
    view_w, view_h = viewport
    return width * scale > view_w or height * scale > view_h


def validate_shot_crop(
    shot_name: str,
    bounds: Bounds,
    scale_progression: Iterable[tuple[int, float]],
    viewport: tuple[float, float] = DEFAULT_VIEWPORT,
) -> ShotCropCheck:
    """Check every ``(frame, scale)`` keyframe of a zooming shot for viewport crop.

    Raises:
        ValueError: If *scale_progression* is empty.
    """
    keyframes = list(scale_progression)
    if not keyframes:
        raise ValueError(f"Shot '{shot_name}' has no scale keyframes")

    cropped: list[int] = []
    worst: CroppedFrame | None = None
    for frame, scale in keyframes:
        result = detect_viewport_crop(transformed_bounds(bounds, scale=scale), viewport)
        if result.is_cropped:
            cropped.append(frame)
        if worst is None or result.visible_percentage < worst.visible_percentage:
            worst = CroppedFrame(
                frame=frame,
                visible_percentage=result.visible_percentage,
                recommendation=result.recommendation,
            )
    return ShotCropCheck(
        shot_name=shot_name,
        max_safe_scale=max_safe_scale(bounds.width, bounds.height, viewport),
        peak_scale=max(scale for _, scale in keyframes),
        is_safe=not cropped,
        cropped_frames=cropped,
        worst_frame=worst if cropped else None,
    )


def parse_transform(css: str) -> list[Transform]:
    """Parse a CSS transform string into :class:`Transform` records.

    ``"none"`` and empty strings parse to an empty list. Functions outside
    scale/translateX/translateY/rotate are skipped with a warning.

    Raises:
        ValueError: If a known function carries a non-numeric argument.
    """
    text = css.strip()
    if not text or text == "none":
        return []

    result: list[Transform] = []
    for name, arg in _FUNC_RE.findall(text):
        if name not in _UNITS:
            logger.warning("Ignoring unsupported transform function %s(%s)", name, arg)
            continue
        match = _NUMBER_RE.match(arg)
        if not match:
            raise ValueError(f"Invalid argument for {name}(): '{arg}'")
        result.append(Transform(type=name, value=float(match.group(1))))
    return result


def format_transforms(transforms: Iterable[Transform]) -> str:
    """Render transforms back to a CSS string (``"none"`` when empty)."""
    parts = [f"{t.type}({t.value:g}{_UNITS[t.type]})" for t in transforms]
    return " ".join(parts) if parts else "none"


def enforce_scale_isolation(
    level: TransformLevel,
    transforms: Iterable[Transform | dict] | str,
) -> list[Transform]:
    """Drop every transform the rule table forbids at *level*.

    Each strip is reported through :class:`ScaleIsolationWarning` and a log
    record; the function itself never raises for a disallowed transform.

    Args:
        level: Hierarchy level the transforms are applied at.
        transforms: Transform records/dicts, or a CSS transform string.

    Returns:
        The transforms that are legal at *level*, in their original order.
    """
    if isinstance(transforms, str):
        items = parse_transform(transforms)
    else:
        items = [t if isinstance(t, Transform) else Transform.model_validate(t) for t in transforms]

    kept: list[Transform] = []
    for transform in items:
        check = validate_transform(level, transform.type)
        if check.allowed:
            kept.append(transform)
            continue
        message = f"Stripped {format_transforms([transform])} at '{level}' level: {check.reason}"
        logger.warning("%s", message)
        warnings.warn(message, ScaleIsolationWarning, stacklevel=2)
    return kept


class SafeTransformBuilder:
    """Fluent builder that only accepts transforms legal at its level.

    Disallowed calls are skipped, logged, and kept in :attr:`rejected` with
    their reason so callers can surface them.

    Example::

        SafeTransformBuilder("element").translate_y(10).scale(1.2).rotate(5).build()
        # -> "translateY(10px) rotate(5deg)"
    """

    def __init__(self, level: TransformLevel) -> None:
        if level not in TRANSFORM_RULES:
            raise ValueError(f"Unknown transform level '{level}'")
        self.level = level
        self.transforms: list[Transform] = []
        self.rejected: list[tuple[Transform, str]] = []

    def _add(self, transform_type: TransformType, value: float) -> SafeTransformBuilder:
        transform = Transform(type=transform_type, value=value)
        check = validate_transform(self.level, transform_type)
        if not check.allowed:
            logger.error("Rejected %s: %s", format_transforms([transform]), check.reason)
            self.rejected.append((transform, check.reason))
            return self
        self.transforms.append(transform)
        return self

    def scale(self, value: float) -> SafeTransformBuilder:
        return self._add("scale", value)

    def translate_x(self, value: float) -> SafeTransformBuilder:
        return self._add("translateX", value)

    def translate_y(self, value: float) -> SafeTransformBuilder:
        return self._add("translateY", value)

    def rotate(self, value: float) -> SafeTransformBuilder:
        return self._add("rotate", value)

    def build(self) -> str:
        return format_transforms(self.transforms)
