"""Learned-rule thresholds shared by the timeline validator and enforcer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RulePolicy(BaseModel):
    """Empirical thresholds, kept as policy rather than hard-coded physics.

    Defaults match the values learned from corrected animations: motion blur
    above 3 px/frame, no shot zoom past 1.21x, exits between 10 and 30
    frames, scenes of at least 30 frames.
    """

    model_config = ConfigDict(frozen=True)

    motion_blur_velocity: float = Field(default=3.0, gt=0, description="px/frame above which motion blur is required")
    max_shot_scale: float = Field(default=1.21, gt=0, description="Largest safe shot-level scale")
    min_exit_frames: int = Field(default=10, ge=0, description="Exit transitions shorter than this are too fast")
    max_exit_frames: int = Field(default=30, ge=0, description="Exit transitions longer than this are too slow")
    min_scene_frames: int = Field(default=30, ge=1, description="Scenes shorter than this are flagged")
    energy_cut_delta: float = Field(default=0.3, ge=0, le=1, description="Energy jump that forces a hard cut")
    crossfade_similarity: float = Field(default=0.5, ge=0, le=1, description="Similarity that selects a crossfade")


DEFAULT_POLICY = RulePolicy()
