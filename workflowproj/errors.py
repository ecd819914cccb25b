"""
errors.py - Exception types raised while building a workflow project.

All errors surface synchronously to the caller of the builder operation
that detected them. Nothing here is logged or retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union


# =============================================================================
# Structured Issues
# =============================================================================


@dataclass
class ValidationIssue:
    """A single problem found while validating an input document."""

    path: str  # Dotted path to the offending field ("" for document level)
    message: str
    value: Optional[Any] = None

    def __str__(self) -> str:
        if self.path:
            return f"[{self.path}] {self.message}"
        return self.message


# =============================================================================
# Error Types
# =============================================================================


class ProjectError(Exception):
    """Base exception for workflow project errors."""

    pass


class ParseError(ProjectError):
    """Raised when a workflow document (or manifest) cannot be parsed."""

    def __init__(
        self,
        message: str,
        issues: Optional[List[ValidationIssue]] = None,
        source_name: Optional[str] = None,
    ):
        self.issues = issues or []
        self.source_name = source_name
        msg = message
        if source_name:
            msg = f"{source_name}: {msg}"
        if self.issues:
            msg += ": " + "; ".join(str(i) for i in self.issues)
        super().__init__(msg)


class ValidationError(ProjectError):
    """Raised when a required input is missing or an input value is invalid."""

    pass


class BuilderStateError(ValidationError):
    """Raised when a materialized builder is asked to change."""

    pass


class ProjectIOError(ProjectError, OSError):
    """Raised when reading an input source or writing a manifest fails."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)
