"""Workspace records exchanged with the scanner and manifest writer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SceneSourceRecord(BaseModel):
    """A scene component found on disk."""

    name: str
    path: str
    duration: int = Field(ge=1)
    has_schema: bool = False
    schema_fields: list[str] = Field(default_factory=list)


class ManifestRecord(BaseModel):
    """One registered composition in the workspace manifest."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    template_path: str
    duration: int = Field(ge=1)
    has_schema: bool = False
    schema_fields: list[str] = Field(default_factory=list)


class ManifestWriteResult(BaseModel):
    """Outcome of a serialized manifest write."""

    changed: bool
    records: int
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
