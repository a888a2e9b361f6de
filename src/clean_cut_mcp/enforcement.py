"""Rule enforcement — the single pass/fail gate before code generation.

Folds the timeline validator's errors into blocking violations and adds
the learned constraints on top: every scene after the first needs an entry
transition, fast elements need motion blur, scale belongs to the shot
level only, and shot zoom stays under a fixed ceiling. Elements that
would outgrow the shot frame once scales compound are surfaced as
recommendations with their max safe scale.
"""

from __future__ import annotations

import logging

from .models.policy import DEFAULT_POLICY, RulePolicy
from .models.timeline import AnimationSpec, ElementSpec, SceneSpec
from .models.transforms import ScaleEntry
from .models.validation import EnforcementResult, Violation
from .timeline import validate_animation
from .transforms import (
    DEFAULT_VIEWPORT,
    calculate_compound_scale,
    max_safe_scale,
    validate_transform,
    would_scale_crop,
)

logger = logging.getLogger(__name__)

_TIMELINE_FIXES = {
    "overlap": "Shift the later scene to start inside the earlier scene's exit tail, or add an exit transition",
    "gap": "Start the next scene at or before the previous scene's end frame",
    "invalid-timing": "Make end_frame greater than start_frame and keep exit_duration within the scene",
    "missing-exit": "Declare an exit_type (use 'hard-cut' with exit_duration 0 for an instant cut)",
}

# Exit direction -> entry that visually replaces it.
REPLACEMENT_ENTRY = {
    "wipe-left": "wipe-right",
    "wipe-right": "wipe-left",
    "wipe-up": "slide-up",
    "wipe-down": "slide-down",
}


def _has_blur(scene: SceneSpec, element: ElementSpec) -> bool:
    return element.has_motion_blur is True or scene.has_motion_blur


def _check_scene(
    index: int,
    scene: SceneSpec,
    policy: RulePolicy,
    violations: list[Violation],
    must_fix: list[str],
) -> None:
    if index > 0 and scene.entry_transition == "none":
        violations.append(Violation(
            rule="no-entry-transition",
            location=scene.name,
            issue="Scene has no entry transition and will pop in",
            fix="Set entry_transition, e.g. 'slide-up' or the direction replacing the previous exit",
        ))
        must_fix.append(f"{scene.name}: add an entry transition")

    for element in scene.elements:
        location = f"{scene.name}/{element.type}"
        if element.velocity is not None and element.velocity > policy.motion_blur_velocity and not _has_blur(scene, element):
            violations.append(Violation(
                rule="missing-motion-blur",
                location=location,
                issue=(
                    f"Velocity {element.velocity:g}px/frame exceeds {policy.motion_blur_velocity:g}px/frame "
                    "without motion blur"
                ),
                fix="Set has_motion_blur on the element or the scene",
            ))
            must_fix.append(f"{location}: add motion blur (velocity {element.velocity:g}px/frame)")

        if element.scale is None or element.scale == 1.0:
            continue
        if element.level != "shot":
            check = validate_transform(element.level, "scale")
            violations.append(Violation(
                rule="scale-isolation-violation",
                location=location,
                issue=f"Scale {element.scale:g}x at '{element.level}' level. {check.reason}",
                fix="Remove the element scale and zoom the enclosing shot instead",
            ))
            must_fix.append(f"{location}: remove scale (shot-level scale only)")
        elif element.scale > policy.max_shot_scale:
            violations.append(Violation(
                rule="scale-exceeds-ceiling",
                location=location,
                issue=f"Shot scale {element.scale:g}x exceeds the {policy.max_shot_scale:g}x ceiling and will crop",
                fix=f"Reduce the shot scale to {policy.max_shot_scale:g}x or less",
            ))
            must_fix.append(f"{location}: cap scale at {policy.max_shot_scale:g}x")


def _viewport(scene: SceneSpec) -> tuple[float, float]:
    shots = [e for e in scene.elements if e.level == "shot" and e.width and e.height]
    if not shots:
        return DEFAULT_VIEWPORT
    frame = max(shots, key=lambda e: e.width * e.height)
    return frame.width, frame.height


def _crop_tips(scene: SceneSpec) -> list[str]:
    """Elements whose compounded scale outgrows the shot frame."""
    viewport = _viewport(scene)
    shot_scale = 1.0
    for element in scene.elements:
        if element.level == "shot" and element.scale is not None:
            shot_scale *= element.scale

    tips: list[str] = []
    for element in scene.elements:
        if element.level == "shot" or not element.width or not element.height:
            continue
        effective = shot_scale * (element.scale or 1.0)
        if would_scale_crop(element.width, element.height, effective, viewport):
            safe = max_safe_scale(element.width, element.height, viewport)
            tips.append(
                f"{scene.name}/{element.type}: {element.width:g}x{element.height:g} at {effective:.2f}x "
                f"overflows the {viewport[0]:g}x{viewport[1]:g} frame; max safe scale is {safe:.2f}x"
            )
    return tips


def _recommendations(spec: AnimationSpec) -> list[str]:
    tips: list[str] = []
    for current, following in zip(spec.scenes, spec.scenes[1:]):
        expected = REPLACEMENT_ENTRY.get(current.exit_type or "")
        if expected and following.entry_transition != expected:
            tips.append(
                f"{following.name} should enter with {expected} to replace "
                f"{current.name} exiting {current.exit_type}"
            )

    for scene in spec.scenes:
        entries = [ScaleEntry(level=e.level, scale=e.scale) for e in scene.elements if e.scale is not None]
        compound = calculate_compound_scale(entries)
        if not compound.is_safe:
            tips.append(f"{scene.name}: {compound.recommendation}")
        tips.extend(_crop_tips(scene))
    return tips


def enforce_learned_rules(spec: AnimationSpec, policy: RulePolicy | None = None) -> EnforcementResult:
    """Check *spec* against the timeline validator and the learned rules.

    Args:
        spec: Candidate animation spec.
        policy: Thresholds; defaults to :data:`DEFAULT_POLICY`.

    Returns:
        EnforcementResult; ``valid`` is True iff there are no violations.
    """
    policy = policy or DEFAULT_POLICY
    violations: list[Violation] = []
    warnings: list[str] = []
    must_fix: list[str] = []

    timeline = validate_animation(spec.scene_definitions(), policy)
    for error in timeline.errors:
        location = " -> ".join(error.affected_scenes) or "timeline"
        violations.append(Violation(
            rule=error.kind,
            location=location,
            issue=error.message,
            fix=_TIMELINE_FIXES[error.kind],
        ))
        must_fix.append(f"{location}: {error.message}")
    warnings.extend(w.message for w in timeline.warnings)

    for index, scene in enumerate(spec.scenes):
        _check_scene(index, scene, policy, violations, must_fix)

    if spec.scenes:
        last_end = max(scene.end_frame for scene in spec.scenes)
        if spec.total_duration < last_end:
            warnings.append(
                f"Total duration {spec.total_duration} frames is shorter than the last scene end "
                f"({last_end}); trailing frames will be cut"
            )

    result = EnforcementResult(
        valid=not violations,
        violations=violations,
        warnings=warnings,
        recommendations=_recommendations(spec),
        must_fix=must_fix,
    )
    if not result.valid:
        logger.info("Enforcement failed with %d violation(s)", len(violations))
    return result


def can_generate(spec: AnimationSpec, policy: RulePolicy | None = None) -> bool:
    """Shorthand for ``enforce_learned_rules(spec).valid``."""
    return enforce_learned_rules(spec, policy).valid


def render_enforcement_report(result: EnforcementResult) -> str:
    """Render *result* as a markdown report listing what must be fixed."""
    lines = ["# Rule Enforcement Report", ""]
    if result.valid:
        lines += ["**ALL CRITICAL RULES PASSED**", ""]
    else:
        lines += [f"**{len(result.violations)} CRITICAL VIOLATION(S)**", "", "**Must fix before generating:**"]
        lines += [f"{i}. {item}" for i, item in enumerate(result.must_fix, 1)]
        lines.append("")

    if result.violations:
        lines += ["## Violations", ""]
        for i, violation in enumerate(result.violations, 1):
            lines += [
                f"### Violation {i}: {violation.rule}",
                f"**Location**: {violation.location}",
                f"**Issue**: {violation.issue}",
                f"**Fix**: {violation.fix}",
                "",
            ]
    if result.warnings:
        lines += ["## Warnings", ""]
        lines += [f"- {w}" for w in result.warnings]
        lines.append("")
    if result.recommendations:
        lines += ["## Recommendations", ""]
        lines += [f"- {r}" for r in result.recommendations]
    return "\n".join(lines) + "\n"
