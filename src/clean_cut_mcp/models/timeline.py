"""Timeline data model — scenes, elements and the full animation spec.

Field names are snake_case; the camelCase names used by the Remotion side
(``startFrame``, ``exitDuration`` …) are accepted as aliases on input so
specs can be passed through from the transport unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..types import EntryTransition, ExitType, TransformLevel

_ALIASED = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class SceneDefinition(BaseModel):
    """A named timeline segment with its exit/entry transition behaviour.

    Timing invariants (``end_frame > start_frame``, ``exit_duration`` within
    the scene) are reported by the timeline validator, not rejected here, so
    that validation of a malformed timeline returns errors instead of raising.
    """

    model_config = _ALIASED

    name: str = Field(min_length=1)
    start_frame: int
    end_frame: int
    exit_type: ExitType | None = "hard-cut"
    exit_duration: int = 0
    entry_transition: EntryTransition = "none"

    @property
    def length(self) -> int:
        return self.end_frame - self.start_frame

    @property
    def exit_start(self) -> int:
        """First frame of the exit-transition tail."""
        return self.end_frame - self.exit_duration


class ElementSpec(BaseModel):
    """A visual element placed in a scene at one level of the transform hierarchy."""

    model_config = _ALIASED

    type: str = Field(min_length=1)
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    velocity: float | None = Field(default=None, ge=0, description="Peak speed in px/frame")
    scale: float | None = Field(default=None, gt=0)
    level: TransformLevel = "element"
    has_motion_blur: bool | None = None


class SceneSpec(SceneDefinition):
    """Scene definition plus the elements rendered inside it."""

    elements: list[ElementSpec] = Field(default_factory=list)
    has_motion_blur: bool = False
    content: str = ""

    def to_definition(self) -> SceneDefinition:
        """Project onto the timing-only view consumed by the validator."""
        return SceneDefinition(
            name=self.name,
            start_frame=self.start_frame,
            end_frame=self.end_frame,
            exit_type=self.exit_type,
            exit_duration=self.exit_duration,
            entry_transition=self.entry_transition,
        )


class AnimationSpec(BaseModel):
    """Ordered scenes plus the total frame budget of one generation request."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, frozen=True)

    scenes: list[SceneSpec] = Field(default_factory=list)
    total_duration: int = Field(ge=0)

    @model_validator(mode="after")
    def _unique_scene_names(self) -> AnimationSpec:
        seen: set[str] = set()
        for scene in self.scenes:
            if scene.name in seen:
                raise ValueError(f"Duplicate scene name '{scene.name}'")
            seen.add(scene.name)
        return self

    def scene_definitions(self) -> list[SceneDefinition]:
        return [scene.to_definition() for scene in self.scenes]
