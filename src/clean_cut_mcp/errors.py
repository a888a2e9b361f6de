"""Structured error handling — error categories, classification, and tool error model."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from .models.validation import EnforcementResult


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    ENFORCEMENT_FAILED = "ENFORCEMENT_FAILED"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    WORKSPACE_NOT_CONFIGURED = "WORKSPACE_NOT_CONFIGURED"
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


class EnforcementFailedError(Exception):
    """Raised by the generator when a spec fails the enforcement gate.

    Carries the full :class:`EnforcementResult` so callers can render a
    report without re-running the rules.
    """

    def __init__(self, result: EnforcementResult) -> None:
        self.result = result
        blocking = len(result.violations)
        super().__init__(
            f"Animation spec violates {blocking} rule(s); no code was generated"
        )


class TemplateNotFoundError(LookupError):
    """Raised when a requested template id is not in the catalog."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class WorkspaceNotConfiguredError(RuntimeError):
    """Raised when a workspace tool runs without CLEAN_CUT_WORKSPACE."""


class ToolError(BaseModel):
    """Structured error returned from any tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False
    details: dict | None = None


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    s = str(error).lower()

    if isinstance(error, EnforcementFailedError):
        return (
            ErrorCategory.ENFORCEMENT_FAILED,
            "Spec failed the rule gate — fix every violation in details and resubmit",
        )
    if isinstance(error, TemplateNotFoundError):
        return (
            ErrorCategory.TEMPLATE_NOT_FOUND,
            "Unknown template id — call template_select to list matching templates",
        )
    if isinstance(error, WorkspaceNotConfiguredError):
        return (
            ErrorCategory.WORKSPACE_NOT_CONFIGURED,
            "Set CLEAN_CUT_WORKSPACE in ~/.config/clean-cut-mcp/.env",
        )
    if isinstance(error, ValidationError | ValueError):
        return (
            ErrorCategory.INVALID_INPUT,
            "Invalid input — check field names, frame numbers and enum values",
        )
    if isinstance(error, TimeoutError) or "timed out" in s or "timeout" in s:
        return (
            ErrorCategory.TIMEOUT,
            "Operation timed out — try again or raise CLEAN_CUT_CLEANUP_TIMEOUT",
        )
    if isinstance(error, FileNotFoundError):
        return (
            ErrorCategory.WORKSPACE_NOT_FOUND,
            "Workspace directory not found — check CLEAN_CUT_WORKSPACE",
        )
    if isinstance(error, PermissionError | IsADirectoryError):
        return (
            ErrorCategory.FILE_WRITE_ERROR,
            "Cannot write to the workspace — check directory permissions",
        )
    return (ErrorCategory.UNKNOWN, str(error))


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception."""
    cat, hint = categorize_error(error)
    details = None
    if isinstance(error, EnforcementFailedError):
        details = error.result.model_dump(mode="json")
    return ToolError(
        error=str(error),
        category=cat.value,
        hint=hint,
        retryable=cat == ErrorCategory.TIMEOUT,
        details=details,
    ).model_dump(mode="json")
