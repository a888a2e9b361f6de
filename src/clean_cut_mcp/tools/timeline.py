"""Timeline tools — 3 tools on a FastMCP sub-server."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import get_config
from ..duration import synthesize_duration
from ..enforcement import enforce_learned_rules, render_enforcement_report
from ..errors import make_tool_error
from ..models.timeline import AnimationSpec, SceneDefinition
from ..timeline import render_validation_report, validate_animation
from ..types import FramesPerScene, SceneCount, TransitionFrames, coerce_json_param

timeline_server = FastMCP("timeline")

_READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)


@timeline_server.tool(annotations=_READ_ONLY)
async def timeline_validate(
    scenes: Annotated[list[dict], Field(
        description="Scenes with name, startFrame, endFrame, exitType, exitDuration, entryTransition",
    )],
    include_frame_report: Annotated[bool, Field(
        description="Include the per-frame report (one row per frame)",
    )] = False,
    include_report: Annotated[bool, Field(description="Include a markdown report")] = False,
) -> dict:
    """Validate a scene timeline frame by frame — overlaps, gaps, timing.

    At most one scene may be fully visible on any frame; exit tails may
    overlap the next scene. Gaps between consecutive scenes are errors.

    Args:
        scenes: Scene definitions (camelCase or snake_case keys).
        include_frame_report: Return the per-frame report.
        include_report: Return a rendered markdown report.

    Returns:
        Dict with valid, errors, warnings and optionally frame_report/report.
    """
    try:
        scenes = coerce_json_param(scenes, list)
        definitions = [SceneDefinition.model_validate(s) for s in scenes]
        result = validate_animation(definitions, get_config().rule_policy())
        exclude = None if include_frame_report else {"frame_report"}
        payload = result.model_dump(mode="json", exclude=exclude)
        if include_report:
            payload["report"] = render_validation_report(result)
        return payload
    except Exception as exc:
        return make_tool_error(exc)


@timeline_server.tool(annotations=_READ_ONLY)
async def timeline_enforce(
    spec: Annotated[dict, Field(
        description="AnimationSpec: {scenes: [...scene + elements], totalDuration}",
    )],
    include_report: Annotated[bool, Field(description="Include a markdown report")] = True,
) -> dict:
    """Run the full rule gate on an animation spec.

    Combines timeline validation with the learned rules: entry transitions
    after the first scene, motion blur for fast elements, shot-only scale
    and the shot scale ceiling.

    Args:
        spec: Animation spec with per-scene elements.
        include_report: Return a rendered markdown report.

    Returns:
        Dict with valid, violations, warnings, recommendations, must_fix.
    """
    try:
        spec = coerce_json_param(spec, dict)
        animation = AnimationSpec.model_validate(spec)
        result = enforce_learned_rules(animation, get_config().rule_policy())
        payload = result.model_dump(mode="json")
        if include_report:
            payload["report"] = render_enforcement_report(result)
        return payload
    except Exception as exc:
        return make_tool_error(exc)


@timeline_server.tool(annotations=_READ_ONLY)
async def timeline_duration(
    scene_count: SceneCount,
    frames_per_scene: FramesPerScene | None = None,
    transition_frames: TransitionFrames | None = None,
) -> dict:
    """Compute the total frame budget for a number of scenes.

    ``total = scenes * frames_per_scene + (scenes - 1) * transition_frames``

    Args:
        scene_count: Number of scenes.
        frames_per_scene: Hold frames per scene (defaults to config, 75).
        transition_frames: Frames per transition (defaults to config, 15).

    Returns:
        Dict with total_frames, total_seconds, scene_frames, transition_frames, formula.
    """
    try:
        cfg = get_config()
        return synthesize_duration(
            scene_count,
            frames_per_scene if frames_per_scene is not None else cfg.frames_per_scene,
            transition_frames if transition_frames is not None else cfg.transition_frames,
            cfg.fps,
        ).model_dump(mode="json")
    except Exception as exc:
        return make_tool_error(exc)
