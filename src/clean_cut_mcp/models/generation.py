"""Request/response models for the integrated generator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .brand import BrandPalette
from .content import ContentAnalysis, DurationBreakdown, SceneAnalysis
from .templates import TemplateRecord
from .timeline import AnimationSpec
from .validation import EnforcementResult


class GenerationRequest(BaseModel):
    """A loose content brief to turn into an animation."""

    scenes: list[str] = Field(min_length=1, description="Scene texts, in order")
    prompt: str = Field(default="", description="Overall description used for template matching")
    style: str = Field(default="tech")
    brand_asset: str | None = Field(default=None, description="Path to a logo/brand image")
    template_id: str | None = None
    component_name: str = Field(default="GeneratedAnimation", pattern=r"^[A-Z][A-Za-z0-9]*$")
    frames_per_scene: int = Field(default=75, ge=1)
    transition_frames: int = Field(default=15, ge=0)
    fps: int = Field(default=30, ge=1)


class GenerationMetadata(BaseModel):
    """Sub-results of every pipeline stage, kept for observability."""

    analysis: ContentAnalysis
    scene_analysis: list[SceneAnalysis]
    duration: DurationBreakdown
    brand: BrandPalette
    template: TemplateRecord
    template_score: float | None = None
    enforcement: EnforcementResult


class GenerationResult(BaseModel):
    """Emitted source plus the validated spec it was generated from."""

    code: str
    spec: AnimationSpec
    metadata: GenerationMetadata
