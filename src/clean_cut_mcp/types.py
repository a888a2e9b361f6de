"""Shared type aliases and helpers for models and tool parameters."""

from __future__ import annotations

import json
from typing import Annotated, Literal

from pydantic import Field


def coerce_json_param(value: str | dict | list | None, expected_type: type) -> dict | list | None:
    """Parse MCP JSON-RPC string params back to dict/list.

    MCP JSON-RPC transport may serialize dict/list params as JSON strings.
    Pydantic v2 rejects these — this helper coerces them back.

    Args:
        value: The parameter value (possibly a JSON string).
        expected_type: Expected Python type (``dict`` or ``list``).

    Returns:
        Parsed value if coercion succeeded, original value otherwise.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = json.loads(value)
        if isinstance(parsed, expected_type):
            return parsed
    except (json.JSONDecodeError, TypeError):
        pass
    return value


# ── Literal enums ────────────────────────────────────────────────────────────

ExitType = Literal[
    "wipe-left", "wipe-right", "wipe-up", "wipe-down",
    "slide-up", "slide-down",
    "dolly-in", "dolly-out",
    "crossfade-scale", "scale-out", "hard-cut",
]
EntryTransition = Literal[
    "wipe-left", "wipe-right", "wipe-up", "wipe-down",
    "slide-up", "slide-down",
    "dolly-in", "dolly-out",
    "crossfade-scale", "scale-out", "hard-cut",
    "none",
]
TransformLevel = Literal["shot", "element", "child"]
TransformType = Literal["scale", "translateX", "translateY", "rotate"]

TimelineErrorKind = Literal["overlap", "gap", "invalid-timing", "missing-exit"]
TimelineWarningKind = Literal["long-overlap", "short-scene", "rapid-transition"]
ViolationRule = Literal[
    "overlap", "gap", "invalid-timing", "missing-exit",
    "no-entry-transition", "missing-motion-blur",
    "scale-isolation-violation", "scale-exceeds-ceiling",
]

SceneRole = Literal["intro", "body", "outro"]
Complexity = Literal["simple", "medium", "complex"]
PaletteSource = Literal["extracted", "default"]
PaletteStyle = Literal["tech", "elegant", "corporate", "vibrant"]
Platform = Literal["youtube", "instagram", "tiktok", "linkedin", "twitter", "facebook"]
AspectRatio = Literal["16:9", "9:16", "1:1", "4:5"]
TemplateCategory = Literal["business", "social", "tech", "education", "creative"]

# ── Annotated aliases ────────────────────────────────────────────────────────

SceneCount = Annotated[int, Field(ge=1, le=200, description="Number of scenes in the animation")]
FramesPerScene = Annotated[int, Field(ge=1, le=900, description="Hold frames per scene (default 75 = 2.5s @ 30fps)")]
TransitionFrames = Annotated[int, Field(ge=0, le=300, description="Frames per transition between scenes")]
PromptText = Annotated[str, Field(min_length=1, max_length=4000, description="Free-text description of the desired animation")]
SceneTexts = Annotated[list[str], Field(min_length=1, description="Ordered scene texts, one entry per scene")]
ComponentName = Annotated[str, Field(
    min_length=1,
    max_length=100,
    pattern=r"^[A-Z][A-Za-z0-9]*$",
    description="PascalCase React component name for the generated animation",
)]
