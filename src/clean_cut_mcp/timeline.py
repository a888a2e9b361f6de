"""Frame-accurate timeline validation.

Sweeps the discrete frame axis ``0..max(end_frame)`` and classifies each
scene per frame as *fully active* (``[start, end - exit_duration)``) or
*transitioning* (``[end - exit_duration, end)``). At most one scene may be
fully active on any frame; exit tails may overlap the next scene freely.

Every check returns structured results and never raises. Only ordered
sequences are iterated, so identical input gives identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models.policy import DEFAULT_POLICY, RulePolicy
from .models.timeline import SceneDefinition
from .models.validation import (
    Collision,
    ElementBounds,
    FrameReport,
    TimelineError,
    TimelineWarning,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MAX_SIMULTANEOUS_TRANSITIONS = 2


def _timing_problem(scene: SceneDefinition) -> str | None:
    """Describe why *scene* has impossible timing, or None when it is sound."""
    if scene.start_frame < 0:
        return f"start frame {scene.start_frame} is negative"
    if scene.end_frame <= scene.start_frame:
        return f"end frame {scene.end_frame} is not after start frame {scene.start_frame}"
    if scene.exit_duration < 0:
        return f"exit duration {scene.exit_duration} is negative"
    if scene.exit_duration > scene.length:
        return f"exit duration {scene.exit_duration} exceeds scene length {scene.length}"
    return None


def _well_formed(scenes: Sequence[SceneDefinition]) -> list[SceneDefinition]:
    return [s for s in scenes if _timing_problem(s) is None]


def _frame_span(frames: list[int]) -> str:
    if len(frames) == 1:
        return f"Frame {frames[0]}"
    return f"Frames {frames[0]}-{frames[-1]}"


def validate_scene_definitions(scenes: Sequence[SceneDefinition]) -> list[TimelineError]:
    """Report impossible timing and undeclared exits, one error per scene."""
    errors: list[TimelineError] = []
    for scene in scenes:
        problem = _timing_problem(scene)
        if problem is not None:
            errors.append(TimelineError(
                kind="invalid-timing",
                message=f'Scene "{scene.name}": {problem}',
                affected_frames=[scene.start_frame, scene.end_frame],
                affected_scenes=[scene.name],
            ))
        if scene.exit_type is None:
            errors.append(TimelineError(
                kind="missing-exit",
                message=f'Scene "{scene.name}" declares no exit transition',
                affected_frames=[scene.end_frame],
                affected_scenes=[scene.name],
            ))
    return errors


def validate_no_overlaps(scenes: Sequence[SceneDefinition]) -> ValidationResult:
    """Sweep every frame and flag frames with more than one fully active scene.

    Consecutive frames sharing the same set of fully active scenes are
    reported as a single error covering the whole run. Scenes with
    impossible timing are left out of the sweep.
    """
    sweep = _well_formed(scenes)
    errors: list[TimelineError] = []
    warnings: list[TimelineWarning] = []
    frame_report: list[FrameReport] = []
    if not sweep:
        return ValidationResult(valid=True)

    max_end = max(s.end_frame for s in sweep)
    overlap_key: tuple[str, ...] = ()
    overlap_frames: list[int] = []
    busy_key: tuple[str, ...] = ()
    busy_frames: list[int] = []

    def flush_overlap() -> None:
        if overlap_frames:
            errors.append(TimelineError(
                kind="overlap",
                message=(
                    f"{_frame_span(overlap_frames)}: {len(overlap_key)} scenes fully visible "
                    f"({', '.join(overlap_key)})"
                ),
                affected_frames=list(overlap_frames),
                affected_scenes=list(overlap_key),
            ))
            overlap_frames.clear()

    def flush_busy() -> None:
        if busy_frames:
            warnings.append(TimelineWarning(
                kind="long-overlap",
                message=(
                    f"{_frame_span(busy_frames)}: {len(busy_key)} scenes transitioning "
                    f"simultaneously ({', '.join(busy_key)})"
                ),
                frames=list(busy_frames),
            ))
            busy_frames.clear()

    for frame in range(max_end + 1):
        active: list[str] = []
        transitioning: list[str] = []
        for scene in sweep:
            if scene.start_frame <= frame < scene.exit_start:
                active.append(scene.name)
            elif scene.exit_start <= frame < scene.end_frame:
                transitioning.append(scene.name)

        on_screen = active + transitioning
        if len(active) > 1:
            key = tuple(active)
            if key != overlap_key:
                flush_overlap()
                overlap_key = key
            overlap_frames.append(frame)
            frame_report.append(FrameReport(frame=frame, active_scenes=on_screen, is_valid=False, issue="OVERLAP"))
        else:
            flush_overlap()
            overlap_key = ()

        if len(transitioning) > MAX_SIMULTANEOUS_TRANSITIONS:
            key = tuple(transitioning)
            if key != busy_key:
                flush_busy()
                busy_key = key
            busy_frames.append(frame)
            if len(active) <= 1:
                frame_report.append(FrameReport(frame=frame, active_scenes=on_screen, issue="MANY_TRANSITIONS"))
        else:
            flush_busy()
            busy_key = ()
            if len(active) <= 1:
                frame_report.append(FrameReport(frame=frame, active_scenes=on_screen))

    flush_overlap()
    flush_busy()
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        frame_report=frame_report,
    )


def validate_no_gaps(scenes: Sequence[SceneDefinition]) -> list[TimelineError]:
    """Flag dead air between consecutive scenes (sorted by start frame)."""
    ordered = sorted(_well_formed(scenes), key=lambda s: s.start_frame)
    errors: list[TimelineError] = []
    for current, following in zip(ordered, ordered[1:]):
        gap = following.start_frame - current.end_frame
        if gap > 0:
            errors.append(TimelineError(
                kind="gap",
                message=(
                    f'Gap of {gap} frames between "{current.name}" and "{following.name}" '
                    f"(frames {current.end_frame}-{following.start_frame})"
                ),
                affected_frames=list(range(current.end_frame, following.start_frame)),
                affected_scenes=[current.name, following.name],
            ))
    return errors


def validate_transition_timing(
    scenes: Sequence[SceneDefinition],
    policy: RulePolicy | None = None,
) -> list[TimelineWarning]:
    """Advisory checks on exit length and scene length."""
    policy = policy or DEFAULT_POLICY
    warnings: list[TimelineWarning] = []
    for scene in _well_formed(scenes):
        exit_frames = [scene.exit_start, scene.end_frame]
        if scene.exit_duration < policy.min_exit_frames:
            warnings.append(TimelineWarning(
                kind="rapid-transition",
                message=(
                    f'Scene "{scene.name}": exit duration {scene.exit_duration} frames is too fast '
                    f"(recommended: {policy.min_exit_frames}-{policy.max_exit_frames} frames)"
                ),
                frames=exit_frames,
            ))
        if scene.exit_duration > policy.max_exit_frames:
            warnings.append(TimelineWarning(
                kind="rapid-transition",
                message=(
                    f'Scene "{scene.name}": exit duration {scene.exit_duration} frames is too slow '
                    f"(recommended: {policy.min_exit_frames}-{policy.max_exit_frames} frames)"
                ),
                frames=exit_frames,
            ))
        if scene.length < policy.min_scene_frames:
            warnings.append(TimelineWarning(
                kind="short-scene",
                message=(
                    f'Scene "{scene.name}": duration {scene.length} frames is very short '
                    f"(minimum: {policy.min_scene_frames} frames)"
                ),
                frames=[scene.start_frame, scene.end_frame],
            ))
    return warnings


def validate_animation(
    scenes: Sequence[SceneDefinition],
    policy: RulePolicy | None = None,
) -> ValidationResult:
    """Run every structural check and merge the results.

    Args:
        scenes: Scene definitions in timeline order.
        policy: Timing thresholds; defaults to :data:`DEFAULT_POLICY`.

    Returns:
        ValidationResult with ``valid`` True iff no error was found. Warnings
        never affect validity.
    """
    definition_errors = validate_scene_definitions(scenes)
    sweep = validate_no_overlaps(scenes)
    gap_errors = validate_no_gaps(scenes)
    timing_warnings = validate_transition_timing(scenes, policy)

    errors = [*definition_errors, *sweep.errors, *gap_errors]
    warnings = [*sweep.warnings, *timing_warnings]
    logger.debug(
        "Validated %d scene(s): %d error(s), %d warning(s)",
        len(scenes), len(errors), len(warnings),
    )
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        frame_report=sweep.frame_report,
    )


def detect_spatial_collisions(frame: int, elements: Sequence[ElementBounds]) -> list[Collision]:
    """Pairwise AABB intersection of element bounds at *frame*.

    Diagnostic only; collisions never affect timeline validity.
    """
    collisions: list[Collision] = []
    for i, first in enumerate(elements):
        for second in elements[i + 1:]:
            overlap_x = min(first.x + first.width, second.x + second.width) - max(first.x, second.x)
            overlap_y = min(first.y + first.height, second.y + second.height) - max(first.y, second.y)
            if overlap_x > 0 and overlap_y > 0:
                collisions.append(Collision(
                    element1=f"{first.scene}/{first.element}",
                    element2=f"{second.scene}/{second.element}",
                    overlap_area=overlap_x * overlap_y,
                ))
    if collisions:
        logger.debug("Frame %d: %d spatial collision(s)", frame, len(collisions))
    return collisions


def render_validation_report(result: ValidationResult) -> str:
    """Render *result* as a markdown report."""
    lines = ["# Animation Validation Report", ""]
    if result.valid:
        lines += ["**VALIDATION PASSED** - no critical errors detected", ""]
    else:
        lines += [f"**VALIDATION FAILED** - {len(result.errors)} error(s) found", ""]

    if result.errors:
        lines += ["## Critical errors", ""]
        for index, error in enumerate(result.errors, 1):
            lines += [
                f"### Error {index}: {error.kind.upper()}",
                f"**Message**: {error.message}",
                f"**Affected Frames**: {_frame_list(error.affected_frames)}",
                f"**Affected Scenes**: {', '.join(error.affected_scenes)}",
                "",
            ]

    if result.warnings:
        lines += ["## Warnings", ""]
        lines += [f"{i}. **{w.kind}**: {w.message}" for i, w in enumerate(result.warnings, 1)]
        lines.append("")

    lines += ["## Frame analysis", ""]
    flagged = [row for row in result.frame_report if row.issue]
    if flagged:
        lines += [f"- Frame {row.frame}: {', '.join(row.active_scenes)} ({row.issue})" for row in flagged]
    else:
        lines.append("All frames valid - no overlaps detected")
    return "\n".join(lines) + "\n"


def _frame_list(frames: list[int]) -> str:
    if len(frames) > 12 and frames == list(range(frames[0], frames[-1] + 1)):
        return f"{frames[0]}-{frames[-1]} ({len(frames)} frames)"
    return ", ".join(str(f) for f in frames)
