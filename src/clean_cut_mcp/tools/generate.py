"""Content analysis and generation tools — 3 tools on a FastMCP sub-server."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import get_config
from ..content import analyze_content, analyze_scenes
from ..errors import WorkspaceNotConfiguredError, make_tool_error
from ..generator import generate_animation
from ..models.generation import GenerationRequest
from ..templates.registry import load_catalog
from ..templates.selector import analyze_user_request, select_templates
from ..types import ComponentName, PromptText, SceneTexts, coerce_json_param
from ..workspace.manifest import ManifestStore
from ..workspace.publish import publish_animation


generate_server = FastMCP("generate")


@generate_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def content_analyze(scenes: SceneTexts) -> dict:
    """Analyze scene texts — energy, keywords, features, roles, similarity.

    Args:
        scenes: Ordered scene texts.

    Returns:
        Dict with overall analysis and a per-scene breakdown.
    """
    try:
        scenes = coerce_json_param(scenes, list)
        overall = analyze_content("\n\n".join(scenes), scene_count=len(scenes))
        return {
            "analysis": overall.model_dump(mode="json"),
            "scenes": [s.model_dump(mode="json") for s in analyze_scenes(scenes)],
        }
    except Exception as exc:
        return make_tool_error(exc)


@generate_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def template_select(
    prompt: PromptText,
    top_n: Annotated[int, Field(ge=1, le=20, description="Number of matches to return")] = 3,
) -> dict:
    """Rank catalog templates against a free-text request.

    Args:
        prompt: Description of the desired animation.
        top_n: How many matches to return.

    Returns:
        Dict with the parsed request and ranked matches (score, reason, warnings).
    """
    try:
        catalog = load_catalog()
        matches = select_templates(catalog, prompt, top_n=top_n)
        return {
            "request": analyze_user_request(prompt).model_dump(mode="json"),
            "matches": [m.model_dump(mode="json") for m in matches],
            "catalog_size": len(catalog),
        }
    except Exception as exc:
        return make_tool_error(exc)


@generate_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def animation_generate(
    scenes: SceneTexts,
    prompt: Annotated[str, Field(description="Overall description used for template matching")] = "",
    style: Annotated[str | None, Field(
        description='Palette style: "tech", "elegant", "corporate" or "vibrant"',
    )] = None,
    brand_asset: Annotated[str | None, Field(description="Path to a JSON palette or SVG logo")] = None,
    template_id: Annotated[str | None, Field(description="Force a catalog template by id")] = None,
    component_name: ComponentName = "GeneratedAnimation",
    publish: Annotated[bool, Field(
        description="Write the component into the configured workspace and register it",
    )] = False,
) -> dict:
    """Generate Remotion source from scene texts — only if every rule passes.

    The assembled timeline is enforced before any code is produced. A
    failing spec returns an ENFORCEMENT_FAILED error whose details hold
    the full violation list; no code is returned in that case.

    Args:
        scenes: Ordered scene texts.
        prompt: Overall description; defaults to the joined scene texts.
        style: Palette style; defaults to config.
        brand_asset: Optional brand asset for palette extraction.
        template_id: Catalog template id; best match when omitted.
        component_name: PascalCase name of the generated component.
        publish: Also write and register the component in the workspace.

    Returns:
        Dict with code, spec, metadata and (when published) the file path.
    """
    try:
        cfg = get_config()
        if publish and not cfg.workspace_enabled:
            raise WorkspaceNotConfiguredError("Publishing requires CLEAN_CUT_WORKSPACE")

        request = GenerationRequest(
            scenes=coerce_json_param(scenes, list),
            prompt=prompt,
            style=style or cfg.default_style,
            brand_asset=brand_asset,
            template_id=template_id,
            component_name=component_name,
            frames_per_scene=cfg.frames_per_scene,
            transition_frames=cfg.transition_frames,
            fps=cfg.fps,
        )
        result = generate_animation(request, policy=cfg.rule_policy())
        payload = result.model_dump(mode="json")

        if publish:
            store = ManifestStore.from_config(cfg)
            path, manifest = await asyncio.to_thread(
                publish_animation, result, component_name, store, cfg.animations_dir,
            )
            payload["published_path"] = str(path)
            payload["manifest"] = manifest.model_dump(mode="json")
        return payload
    except Exception as exc:
        return make_tool_error(exc)
