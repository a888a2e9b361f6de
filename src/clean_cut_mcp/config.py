"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .models.policy import RulePolicy

VALID_STYLES = {"tech", "elegant", "corporate", "vibrant"}


class ServerConfig(BaseModel):
    """Runtime configuration resolved from environment.

    ``workspace_path`` is optional: the validation and generation tools work
    without it, only the manifest/publish tools and the cleanup poller need
    a Remotion workspace on disk.
    """

    workspace_path: str = Field(default="", description="Remotion workspace root")
    fps: int = Field(default=30)
    frames_per_scene: int = Field(default=75)
    transition_frames: int = Field(default=15)
    default_style: str = Field(default="tech")
    motion_blur_velocity: float = Field(default=3.0)
    max_shot_scale: float = Field(default=1.21)
    min_exit_frames: int = Field(default=10)
    max_exit_frames: int = Field(default=30)
    min_scene_frames: int = Field(default=30)
    poll_interval: float = Field(default=5.0)
    cleanup_timeout: float = Field(default=10.0)

    @field_validator("fps", "frames_per_scene", "min_scene_frames")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Frame values must be >= 1")
        return value

    @field_validator("transition_frames", "min_exit_frames", "max_exit_frames")
    @classmethod
    def validate_non_negative_ints(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Transition frame values must be >= 0")
        return value

    @field_validator("motion_blur_velocity", "max_shot_scale", "poll_interval", "cleanup_timeout")
    @classmethod
    def validate_positive_floats(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Threshold and interval values must be > 0")
        return value

    @field_validator("default_style")
    @classmethod
    def validate_style(cls, value: str) -> str:
        style = value.strip().lower()
        if style not in VALID_STYLES:
            allowed = ", ".join(sorted(VALID_STYLES))
            raise ValueError(f"Invalid style '{value}'. Allowed: {allowed}")
        return style

    @property
    def workspace_enabled(self) -> bool:
        """True when a workspace path is configured (existence checked at use)."""
        return bool(self.workspace_path)

    @property
    def animations_dir(self) -> Path:
        """Directory holding generated scene components."""
        return Path(self.workspace_path).expanduser() / "src" / "assets" / "animations"

    @property
    def manifest_path(self) -> Path:
        """Structured manifest of registered compositions."""
        return Path(self.workspace_path).expanduser() / "src" / "compositions.json"

    @property
    def root_source_path(self) -> Path:
        """Generated Remotion ``Root.tsx`` registering every composition."""
        return Path(self.workspace_path).expanduser() / "src" / "Root.tsx"

    def rule_policy(self) -> RulePolicy:
        """Build the validator/enforcer thresholds from this config."""
        return RulePolicy(
            motion_blur_velocity=self.motion_blur_velocity,
            max_shot_scale=self.max_shot_scale,
            min_exit_frames=self.min_exit_frames,
            max_exit_frames=self.max_exit_frames,
            min_scene_frames=self.min_scene_frames,
        )

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        return cls(
            workspace_path=os.getenv("CLEAN_CUT_WORKSPACE", ""),
            fps=int(os.getenv("CLEAN_CUT_FPS", "30")),
            frames_per_scene=int(os.getenv("CLEAN_CUT_FRAMES_PER_SCENE", "75")),
            transition_frames=int(os.getenv("CLEAN_CUT_TRANSITION_FRAMES", "15")),
            default_style=os.getenv("CLEAN_CUT_DEFAULT_STYLE", "tech"),
            motion_blur_velocity=float(os.getenv("CLEAN_CUT_MOTION_BLUR_VELOCITY", "3.0")),
            max_shot_scale=float(os.getenv("CLEAN_CUT_MAX_SHOT_SCALE", "1.21")),
            min_exit_frames=int(os.getenv("CLEAN_CUT_MIN_EXIT_FRAMES", "10")),
            max_exit_frames=int(os.getenv("CLEAN_CUT_MAX_EXIT_FRAMES", "30")),
            min_scene_frames=int(os.getenv("CLEAN_CUT_MIN_SCENE_FRAMES", "30")),
            poll_interval=float(os.getenv("CLEAN_CUT_POLL_INTERVAL", "5.0")),
            cleanup_timeout=float(os.getenv("CLEAN_CUT_CLEANUP_TIMEOUT", "10.0")),
        )


# Singleton: initialised once on first access.
_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/clean-cut-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logger = logging.getLogger(__name__)
            logger.info("Loaded %d var(s) from config: %s", len(injected), ", ".join(injected))
        _config = ServerConfig.from_env()
    return _config


def update_config(**overrides: object) -> ServerConfig:
    """Patch the live config."""
    global _config
    cfg = get_config()
    data = cfg.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = ServerConfig(**data)
    return _config


def reset_config() -> None:
    """Reset the config singleton (for testing)."""
    global _config
    _config = None
