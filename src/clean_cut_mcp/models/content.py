"""Content-analysis and duration result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..types import Complexity, SceneRole


class DurationBreakdown(BaseModel):
    """Frame budget derived from the scene-count formula."""

    total_frames: int
    total_seconds: float
    scene_frames: int
    transition_frames: int
    formula: str


class ContentFeatures(BaseModel):
    """Boolean content features used for template and element choices."""

    has_technical_content: bool = False
    has_code_examples: bool = False
    has_list_content: bool = False
    has_questions: bool = False
    has_call_to_action: bool = False


class ContentAnalysis(BaseModel):
    """Energy, keywords and features of a whole brief."""

    energy: float = Field(ge=0, le=1)
    keywords: list[str] = Field(default_factory=list)
    features: ContentFeatures = Field(default_factory=ContentFeatures)
    complexity: Complexity = "medium"
    scene_count: int = 1
    reading_seconds: float = 0.0
    calculated_duration: DurationBreakdown


class SceneAnalysis(BaseModel):
    """Per-scene narrative role, energy and hand-over similarity."""

    scene_index: int
    content: str
    energy: float = Field(ge=0, le=1)
    keywords: list[str] = Field(default_factory=list)
    scene_role: SceneRole
    similarity_to_next: float = Field(ge=0, le=1)
    recommended_duration: int
