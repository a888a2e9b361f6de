"""Transform isolation tools — 3 tools on a FastMCP sub-server."""

from __future__ import annotations

import warnings
from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..errors import make_tool_error
from ..models.transforms import Bounds
from ..transforms import (
    DEFAULT_VIEWPORT,
    ScaleIsolationWarning,
    calculate_compound_scale,
    enforce_scale_isolation,
    format_transforms,
    validate_shot_crop,
    validate_transform,
)
from ..types import TransformLevel, TransformType, coerce_json_param

transforms_server = FastMCP("transforms")

_READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)


@transforms_server.tool(annotations=_READ_ONLY)
async def transform_check(
    level: TransformLevel,
    transform_type: TransformType | None = None,
    css: Annotated[str | None, Field(
        description='CSS transform to sanitize at this level, e.g. "scale(1.2) translateY(10px)"',
    )] = None,
) -> dict:
    """Check which transforms are legal at a hierarchy level.

    Scale belongs to the shot level only; element and child levels are
    limited to translation (plus rotation at element level).

    Args:
        level: "shot", "element" or "child".
        transform_type: Single transform type to look up.
        css: Transform string to sanitize; disallowed functions are stripped.

    Returns:
        Dict with the lookup result and/or the sanitized transform and the
        list of stripped functions.
    """
    try:
        payload: dict = {"level": level}
        if transform_type is not None:
            payload.update(validate_transform(level, transform_type).model_dump())
        if css is not None:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", ScaleIsolationWarning)
                kept = enforce_scale_isolation(level, css)
            payload["sanitized"] = format_transforms(kept)
            payload["stripped"] = [
                str(w.message) for w in caught if issubclass(w.category, ScaleIsolationWarning)
            ]
        return payload
    except Exception as exc:
        return make_tool_error(exc)


@transforms_server.tool(annotations=_READ_ONLY)
async def transform_compound(
    entries: Annotated[list[dict], Field(
        description='Scale per level, e.g. [{"level": "shot", "scale": 1.19}, {"level": "element", "scale": 1.22}]',
    )],
) -> dict:
    """Compute the effective scale across nested levels.

    Args:
        entries: One {level, scale} entry per nesting level.

    Returns:
        Dict with total_scale, is_safe (at most one level scales), recommendation.
    """
    try:
        entries = coerce_json_param(entries, list)
        return calculate_compound_scale(entries).model_dump(mode="json")
    except Exception as exc:
        return make_tool_error(exc)


@transforms_server.tool(annotations=_READ_ONLY)
async def transform_crop_check(
    shot_name: str,
    bounds: Annotated[dict, Field(
        description='Element box in canvas pixels, e.g. {"x": 460, "y": 190, "width": 1500, "height": 850}',
    )],
    keyframes: Annotated[list[dict], Field(
        description='Scale progression, e.g. [{"frame": 0, "scale": 1.0}, {"frame": 60, "scale": 1.2}]',
    )],
    viewport_width: Annotated[int, Field(gt=0)] = DEFAULT_VIEWPORT[0],
    viewport_height: Annotated[int, Field(gt=0)] = DEFAULT_VIEWPORT[1],
) -> dict:
    """Check whether a zooming element stays inside the viewport.

    Args:
        shot_name: Label echoed back in the result.
        bounds: Element box before scaling.
        keyframes: One {frame, scale} entry per keyframe.
        viewport_width: Canvas width in pixels.
        viewport_height: Canvas height in pixels.

    Returns:
        Dict with max_safe_scale, peak_scale, is_safe, cropped_frames and
        the worst frame when any keyframe crops.
    """
    try:
        bounds = coerce_json_param(bounds, dict)
        keyframes = coerce_json_param(keyframes, list)
        progression = [(int(k["frame"]), float(k["scale"])) for k in keyframes]
        check = validate_shot_crop(
            shot_name,
            Bounds.model_validate(bounds),
            progression,
            (viewport_width, viewport_height),
        )
        return check.model_dump(mode="json")
    except Exception as exc:
        return make_tool_error(exc)
