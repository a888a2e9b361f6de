"""Template catalog and request-matching models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..types import AspectRatio, Platform, TemplateCategory


class TemplateRecord(BaseModel):
    """A catalog entry; ratings use a 0-10 scale."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    category: TemplateCategory
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    default_duration: int = Field(ge=1, description="Frames at 30fps")
    aspect_ratio: AspectRatio = "16:9"
    energy: float = Field(ge=0, le=10)
    professional: float = Field(ge=0, le=10)
    colorfulness: float = Field(ge=0, le=10)
    platforms: list[Platform] = Field(default_factory=list)
    data_visualization: bool = False
    required_fields: list[str] = Field(default_factory=list)
    optional_fields: list[str] = Field(default_factory=list)
    component_path: str
    skeleton: str = "sequence"


class UserRequestAnalysis(BaseModel):
    """Matching criteria extracted from a free-text prompt; ratings are 0-1."""

    original_prompt: str
    keywords: list[str] = Field(default_factory=list)
    platform: Platform | None = None
    aspect_ratio: AspectRatio | None = None
    energy: float = Field(ge=0, le=1)
    professional: float = Field(ge=0, le=1)
    colorfulness: float = Field(default=0.5, ge=0, le=1)
    has_data: bool = False


class TemplateMatch(BaseModel):
    """A scored template with a human-readable explanation."""

    template: TemplateRecord
    score: float = Field(ge=0, le=1)
    reason: str
    matched_keywords: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
