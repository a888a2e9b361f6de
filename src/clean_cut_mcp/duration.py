"""Scene-count based frame budget.

``total = scenes * frames_per_scene + (scenes - 1) * transition_frames``

75 frames per scene (2.5s at 30fps) is a comfortable reading hold; 15
frames (0.5s) is the standard transition length.
"""

from __future__ import annotations

from .models.content import DurationBreakdown

DEFAULT_FRAMES_PER_SCENE = 75
DEFAULT_TRANSITION_FRAMES = 15
DEFAULT_FPS = 30


def synthesize_duration(
    scene_count: int,
    frames_per_scene: int = DEFAULT_FRAMES_PER_SCENE,
    transition_frames: int = DEFAULT_TRANSITION_FRAMES,
    fps: int = DEFAULT_FPS,
) -> DurationBreakdown:
    """Compute the total frame budget for *scene_count* scenes.

    Args:
        scene_count: Number of scenes, must be >= 1.
        frames_per_scene: Hold frames per scene.
        transition_frames: Frames per transition between adjacent scenes.
        fps: Frame rate used for the seconds figure.

    Returns:
        DurationBreakdown with frame totals and a readable derivation.

    Raises:
        ValueError: If ``scene_count <= 0`` or a frame argument is out of range.
    """
    if scene_count <= 0:
        raise ValueError(f"scene_count must be >= 1, got {scene_count}")
    if frames_per_scene <= 0:
        raise ValueError(f"frames_per_scene must be >= 1, got {frames_per_scene}")
    if transition_frames < 0:
        raise ValueError(f"transition_frames must be >= 0, got {transition_frames}")
    if fps <= 0:
        raise ValueError(f"fps must be >= 1, got {fps}")

    transitions = scene_count - 1
    scene_total = scene_count * frames_per_scene
    transition_total = transitions * transition_frames
    total = scene_total + transition_total
    seconds = total / fps

    return DurationBreakdown(
        total_frames=total,
        total_seconds=seconds,
        scene_frames=scene_total,
        transition_frames=transition_total,
        formula=(
            f"({scene_count} scenes x {frames_per_scene} frames) + "
            f"({transitions} transitions x {transition_frames} frames) = "
            f"{total} frames ({seconds:.1f}s @ {fps}fps)"
        ),
    )
