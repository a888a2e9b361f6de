"""TSX skeletons for generated Remotion components.

HEADER_TEMPLATE and FOOTER_TEMPLATE are Python format strings (curly
braces escaped for TypeScript). MOTION_HELPERS and the layout bodies use
raw single braces and are inserted as-is. Scene data and colours are
embedded as JSON, so scene text never needs escaping by hand.

Scale is only ever applied to the scene wrapper (the shot); the headline
and code panel move by translation alone.
"""

from __future__ import annotations

import json

# ---------------------------------------------------------------------------
# Header: imports, palette, scene table
# ---------------------------------------------------------------------------

HEADER_TEMPLATE = '''/**
 * {component_name}
 *
 * Generated by clean-cut-mcp from template "{template_id}".
 * Duration: {total_frames} frames ({total_seconds:.1f}s @ {fps}fps)
 * Timeline validated: no overlaps, no gaps, entry transitions on every cut.
 */

import React from "react";
import {{ AbsoluteFill, interpolate, Sequence, useCurrentFrame }} from "remotion";

export const COLORS = {colors_json};

type SceneData = {{
  name: string;
  from: number;
  duration: number;
  entry: string;
  exit: string;
  exitDuration: number;
  text: string;
  shotScale: number;
  travel: number;
  blur: number;
  code: string | null;
}};

const SCENES: SceneData[] = {scenes_json};

const ENTRY_FRAMES = {entry_frames};
'''

# ---------------------------------------------------------------------------
# Motion helpers (raw TS)
# ---------------------------------------------------------------------------

MOTION_HELPERS = '''
const clamp = { extrapolateLeft: "clamp", extrapolateRight: "clamp" } as const;

// Entry offsets move the incoming shot from the side it replaces.
const entryOffset = (kind: string, progress: number): string => {
  const remaining = (1 - progress) * 100;
  switch (kind) {
    case "wipe-right":
      return `translateX(${remaining}%)`;
    case "wipe-left":
      return `translateX(${-remaining}%)`;
    case "slide-up":
      return `translateY(${remaining}%)`;
    case "slide-down":
      return `translateY(${-remaining}%)`;
    default:
      return "";
  }
};

const exitOffset = (kind: string, progress: number): string => {
  const travelled = progress * 100;
  switch (kind) {
    case "wipe-left":
      return `translateX(${-travelled}%)`;
    case "wipe-right":
      return `translateX(${travelled}%)`;
    case "wipe-up":
    case "slide-up":
      return `translateY(${-travelled}%)`;
    case "wipe-down":
    case "slide-down":
      return `translateY(${travelled}%)`;
    default:
      return "";
  }
};

const useShotStyle = (scene: SceneData): React.CSSProperties => {
  const frame = useCurrentFrame();
  const entryProgress = interpolate(frame, [0, ENTRY_FRAMES], [0, 1], clamp);
  const exitStart = scene.duration - scene.exitDuration;
  const exitProgress =
    scene.exitDuration > 0 ? interpolate(frame, [exitStart, scene.duration], [0, 1], clamp) : 0;
  const zoom = interpolate(frame, [0, scene.duration], [1, scene.shotScale], clamp);
  const fadingIn = scene.entry === "crossfade-scale";
  const fadingOut = scene.exit === "crossfade-scale" || scene.exit === "scale-out";
  const transform = [entryOffset(scene.entry, entryProgress), exitOffset(scene.exit, exitProgress), `scale(${zoom})`]
    .filter(Boolean)
    .join(" ");
  return {
    backgroundColor: COLORS.background,
    opacity: (fadingIn ? entryProgress : 1) * (fadingOut ? 1 - exitProgress : 1),
    transform,
  };
};

const useHeadlineMotion = (scene: SceneData): React.CSSProperties => {
  const frame = useCurrentFrame();
  const progress = interpolate(frame, [0, ENTRY_FRAMES], [0, 1], clamp);
  const blur = scene.blur * (1 - progress);
  return {
    transform: `translateY(${(1 - progress) * scene.travel}px)`,
    filter: blur > 0 ? `blur(${blur}px)` : undefined,
  };
};
'''

# ---------------------------------------------------------------------------
# Layout bodies (raw TSX)
# ---------------------------------------------------------------------------

SEQUENCE_LAYOUT = '''
const Scene: React.FC<{ scene: SceneData }> = ({ scene }) => {
  const shot = useShotStyle(scene);
  const headline = useHeadlineMotion(scene);
  return (
    <AbsoluteFill style={{ ...shot, justifyContent: "center", padding: 120 }}>
      <h1 style={{ ...headline, color: COLORS.text, fontSize: 72, fontWeight: 700, margin: 0, maxWidth: 1400 }}>
        {scene.text}
      </h1>
      <div style={{ width: 160, height: 6, marginTop: 32, backgroundColor: COLORS.accent }} />
      {scene.code ? (
        <pre
          style={{
            marginTop: 48,
            padding: 32,
            borderRadius: 12,
            backgroundColor: COLORS.secondary,
            color: COLORS.text,
            fontFamily: "SF Mono, Monaco, Consolas, monospace",
            fontSize: 28,
          }}
        >
          {scene.code}
        </pre>
      ) : null}
    </AbsoluteFill>
  );
};
'''

VERTICAL_LAYOUT = '''
const Scene: React.FC<{ scene: SceneData }> = ({ scene }) => {
  const shot = useShotStyle(scene);
  const headline = useHeadlineMotion(scene);
  return (
    <AbsoluteFill style={{ ...shot, alignItems: "center", justifyContent: "center", padding: 80 }}>
      <div style={{ width: 120, height: 8, marginBottom: 48, backgroundColor: COLORS.accent }} />
      <h1 style={{ ...headline, color: COLORS.text, fontSize: 96, fontWeight: 800, textAlign: "center", margin: 0 }}>
        {scene.text}
      </h1>
      {scene.code ? (
        <pre style={{ marginTop: 48, padding: 24, backgroundColor: COLORS.secondary, color: COLORS.text, fontSize: 24 }}>
          {scene.code}
        </pre>
      ) : null}
    </AbsoluteFill>
  );
};
'''

LAYOUTS = {
    "sequence": SEQUENCE_LAYOUT,
    "vertical": VERTICAL_LAYOUT,
}

# ---------------------------------------------------------------------------
# Footer: component + composition config
# ---------------------------------------------------------------------------

FOOTER_TEMPLATE = '''
export const {component_name}: React.FC = () => {{
  return (
    <AbsoluteFill style={{{{ backgroundColor: COLORS.background }}}}>
      {{SCENES.map((scene) => (
        <Sequence key={{scene.name}} from={{scene.from}} durationInFrames={{scene.duration}}>
          <Scene scene={{scene}} />
        </Sequence>
      ))}}
    </AbsoluteFill>
  );
}};

export const {component_name}Config = {{
  durationInFrames: {total_frames},
  fps: {fps},
  width: {width},
  height: {height},
}};

export default {component_name};
'''

CANVAS_SIZES = {
    "16:9": (1920, 1080),
    "9:16": (1080, 1920),
    "1:1": (1080, 1080),
    "4:5": (1080, 1350),
}


def render_skeleton(
    skeleton: str,
    *,
    component_name: str,
    template_id: str,
    colors: dict,
    scenes: list[dict],
    total_frames: int,
    fps: int,
    entry_frames: int,
    aspect_ratio: str = "16:9",
) -> str:
    """Fill a skeleton with palette and scene data.

    Raises:
        ValueError: If *skeleton* is not a known layout.
    """
    layout = LAYOUTS.get(skeleton)
    if layout is None:
        raise ValueError(f"Unknown skeleton '{skeleton}'. Available: {', '.join(LAYOUTS)}")
    width, height = CANVAS_SIZES.get(aspect_ratio, CANVAS_SIZES["16:9"])
    header = HEADER_TEMPLATE.format(
        component_name=component_name,
        template_id=template_id,
        total_frames=total_frames,
        total_seconds=total_frames / fps,
        fps=fps,
        colors_json=json.dumps(colors, indent=2),
        scenes_json=json.dumps(scenes, indent=2),
        entry_frames=max(1, entry_frames),
    )
    footer = FOOTER_TEMPLATE.format(
        component_name=component_name,
        total_frames=total_frames,
        fps=fps,
        width=width,
        height=height,
    )
    return header + MOTION_HELPERS + layout + footer
