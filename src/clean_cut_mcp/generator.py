"""Integrated generator — brief in, validated Remotion source out.

Pipeline: analyze content → pick template → resolve palette → synthesize
duration → assemble an AnimationSpec → enforce rules → render skeleton.
Code is only rendered after enforcement passes; a failing spec raises
:class:`EnforcementFailedError` and nothing is emitted. The generator never
retries with a modified spec.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from .brand import default_palette, extract_palette
from .content import analyze_content, analyze_scenes
from .duration import synthesize_duration
from .enforcement import enforce_learned_rules
from .errors import EnforcementFailedError, TemplateNotFoundError
from .models.brand import BrandPalette
from .models.content import SceneAnalysis
from .models.generation import GenerationMetadata, GenerationRequest, GenerationResult
from .models.policy import DEFAULT_POLICY, RulePolicy
from .models.templates import TemplateRecord
from .models.timeline import AnimationSpec, ElementSpec, SceneSpec
from .templates.registry import get_template, load_catalog
from .templates.selector import select_templates
from .templates.skeletons import CANVAS_SIZES, render_skeleton
from .types import EntryTransition, ExitType

logger = logging.getLogger(__name__)

PaletteExtractor = Callable[[str, str], BrandPalette]

WIPE_ROTATION: tuple[ExitType, ...] = ("wipe-left", "wipe-up", "wipe-right", "wipe-down")

# Entry that mirrors the previous scene's exit.
ENTRY_FOR_EXIT: dict[str, EntryTransition] = {
    "wipe-left": "wipe-right",
    "wipe-right": "wipe-left",
    "wipe-up": "slide-up",
    "wipe-down": "slide-down",
    "crossfade-scale": "crossfade-scale",
    "hard-cut": "slide-up",
}
FIRST_ENTRY: EntryTransition = "slide-up"

MAX_SHOT_ZOOM = 0.15
BASE_HEADLINE_TRAVEL = 40
ENERGY_HEADLINE_TRAVEL = 80
MAX_BLUR_PX = 8.0

_FENCE_RE = re.compile(r"```[\w-]*\n?(.*?)```", re.S)


def choose_exit(current: SceneAnalysis, following: SceneAnalysis, wipe_index: int, policy: RulePolicy) -> ExitType:
    """Pick the exit between two consecutive scenes.

    A large energy jump cuts hard, similar content crossfades, anything
    else gets the next directional wipe.
    """
    if round(abs(current.energy - following.energy), 4) >= policy.energy_cut_delta:
        return "hard-cut"
    if current.similarity_to_next >= policy.crossfade_similarity:
        return "crossfade-scale"
    return WIPE_ROTATION[wipe_index % len(WIPE_ROTATION)]


def split_code(text: str) -> tuple[str, str | None]:
    """Separate fenced code from the headline text."""
    blocks = [block.strip() for block in _FENCE_RE.findall(text)]
    headline = _FENCE_RE.sub(" ", text).strip()
    return " ".join(headline.split()), ("\n\n".join(blocks) if blocks else None)


def _scene_elements(
    analysis: SceneAnalysis,
    code: str | None,
    canvas: tuple[int, int],
    entry_frames: int,
    policy: RulePolicy,
) -> list[ElementSpec]:
    width, height = canvas
    travel = BASE_HEADLINE_TRAVEL + ENERGY_HEADLINE_TRAVEL * analysis.energy
    velocity = round(travel / max(1, entry_frames), 2)
    elements = [
        ElementSpec(
            type="shot",
            width=width,
            height=height,
            scale=round(1 + MAX_SHOT_ZOOM * analysis.energy, 4),
            level="shot",
        ),
        ElementSpec(
            type="headline",
            width=width * 0.75,
            height=height * 0.2,
            velocity=velocity,
            level="element",
            has_motion_blur=velocity > policy.motion_blur_velocity,
        ),
    ]
    if code:
        elements.append(ElementSpec(type="code-panel", width=width * 0.6, height=height * 0.35, level="element"))
    return elements


def build_spec(
    scene_analysis: Sequence[SceneAnalysis],
    frames_per_scene: int,
    transition_frames: int,
    total_frames: int,
    canvas: tuple[int, int] = CANVAS_SIZES["16:9"],
    policy: RulePolicy | None = None,
) -> AnimationSpec:
    """Lay scenes out back to back so the last end frame equals *total_frames*.

    Scene *i* starts at ``i * (F + T)``. Every scene but the last holds
    ``F + T`` frames with its exit tail inside its own window; the last
    holds ``F``.
    """
    policy = policy or DEFAULT_POLICY
    stride = frames_per_scene + transition_frames
    count = len(scene_analysis)
    scenes: list[SceneSpec] = []
    entry: EntryTransition = FIRST_ENTRY
    wipe_index = 0

    for index, analysis in enumerate(scene_analysis):
        start = index * stride
        is_last = index == count - 1
        if is_last:
            exit_type: ExitType = "hard-cut"
            end = start + frames_per_scene
        else:
            exit_type = choose_exit(analysis, scene_analysis[index + 1], wipe_index, policy)
            if exit_type.startswith("wipe-"):
                wipe_index += 1
            end = start + stride
        exit_duration = 0 if exit_type == "hard-cut" else transition_frames
        _, code = split_code(analysis.content)

        scenes.append(SceneSpec(
            name=f"{analysis.scene_role.capitalize()}{index + 1}",
            start_frame=start,
            end_frame=end,
            exit_type=exit_type,
            exit_duration=exit_duration,
            entry_transition=entry,
            elements=_scene_elements(analysis, code, canvas, transition_frames, policy),
            content=analysis.content,
        ))
        entry = ENTRY_FOR_EXIT.get(exit_type, FIRST_ENTRY)

    return AnimationSpec(scenes=scenes, total_duration=total_frames)


def _scene_payload(spec: AnimationSpec, entry_frames: int) -> list[dict]:
    payload = []
    for scene in spec.scenes:
        shot = next(e for e in scene.elements if e.level == "shot")
        headline = next(e for e in scene.elements if e.type == "headline")
        text, code = split_code(scene.content)
        blurred = bool(headline.has_motion_blur or scene.has_motion_blur)
        payload.append({
            "name": scene.name,
            "from": scene.start_frame,
            "duration": scene.length,
            "entry": scene.entry_transition,
            "exit": scene.exit_type,
            "exitDuration": scene.exit_duration,
            "text": text,
            "shotScale": shot.scale or 1.0,
            "travel": round((headline.velocity or 0) * max(1, entry_frames), 1),
            "blur": round(min(MAX_BLUR_PX, (headline.velocity or 0) / 2), 2) if blurred else 0,
            "code": code,
        })
    return payload


def _resolve_template(
    request: GenerationRequest,
    catalog: Sequence[TemplateRecord],
) -> tuple[TemplateRecord, float | None]:
    if request.template_id:
        template = get_template(catalog, request.template_id)
        if template is None:
            raise TemplateNotFoundError(request.template_id)
        return template, None
    if not catalog:
        raise ValueError("Template catalog is empty")
    prompt = request.prompt or " ".join(request.scenes)
    best = select_templates(catalog, prompt, top_n=1)[0]
    return best.template, best.score


def _resolve_palette(request: GenerationRequest, extractor: PaletteExtractor) -> BrandPalette:
    """Brand palette for *request*; any extractor failure degrades to the style default."""
    if not request.brand_asset:
        return default_palette(request.style)
    try:
        return extractor(request.brand_asset, request.style)
    except Exception as exc:
        logger.warning(
            "Brand extraction failed for %s (%s) — using %s palette",
            request.brand_asset, exc, request.style,
        )
        return default_palette(request.style)


def generate_animation(
    request: GenerationRequest,
    *,
    catalog: Sequence[TemplateRecord] | None = None,
    palette_extractor: PaletteExtractor | None = None,
    policy: RulePolicy | None = None,
) -> GenerationResult:
    """Turn a content brief into validated Remotion source.

    Args:
        request: Scene texts plus style, template and pacing options.
        catalog: Template catalog; defaults to the bundled catalog.
        palette_extractor: Brand collaborator, ``(path, style) -> BrandPalette``.
            Any exception it raises is logged and the style palette is used.
        policy: Rule thresholds; defaults to :data:`DEFAULT_POLICY`.

    Returns:
        GenerationResult with code, the validated spec, and stage metadata.

    Raises:
        TemplateNotFoundError: ``request.template_id`` is not in the catalog.
        EnforcementFailedError: The assembled spec violates a rule.
    """
    policy = policy or DEFAULT_POLICY
    catalog = load_catalog() if catalog is None else catalog
    extractor = palette_extractor or extract_palette

    analysis = analyze_content("\n\n".join(request.scenes), scene_count=len(request.scenes))
    scene_analysis = analyze_scenes(request.scenes)
    template, template_score = _resolve_template(request, catalog)

    palette = _resolve_palette(request, extractor)

    duration = synthesize_duration(
        len(request.scenes), request.frames_per_scene, request.transition_frames, request.fps,
    )
    canvas = CANVAS_SIZES.get(template.aspect_ratio, CANVAS_SIZES["16:9"])
    spec = build_spec(
        scene_analysis,
        request.frames_per_scene,
        request.transition_frames,
        duration.total_frames,
        canvas=canvas,
        policy=policy,
    )

    enforcement = enforce_learned_rules(spec, policy)
    if not enforcement.valid:
        logger.warning(
            "Rejected generation of %s: %d violation(s)",
            request.component_name, len(enforcement.violations),
        )
        raise EnforcementFailedError(enforcement)

    code = render_skeleton(
        template.skeleton,
        component_name=request.component_name,
        template_id=template.id,
        colors=palette.model_dump(include={"primary", "secondary", "accent", "background", "text"}),
        scenes=_scene_payload(spec, request.transition_frames),
        total_frames=duration.total_frames,
        fps=request.fps,
        entry_frames=request.transition_frames,
        aspect_ratio=template.aspect_ratio,
    )
    logger.info(
        "Generated %s: %d scene(s), %d frames, template=%s",
        request.component_name, len(spec.scenes), duration.total_frames, template.id,
    )
    return GenerationResult(
        code=code,
        spec=spec,
        metadata=GenerationMetadata(
            analysis=analysis,
            scene_analysis=scene_analysis,
            duration=duration,
            brand=palette,
            template=template,
            template_score=template_score,
            enforcement=enforcement,
        ),
    )
