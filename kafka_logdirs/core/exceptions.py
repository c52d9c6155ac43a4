"""Exception hierarchy plus the RFC 7807 body the REST surface returns."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LogDirsError(Exception):
    """Base class for every fatal log-dir command failure."""


class SpecSyntaxError(LogDirsError, ValueError):
    """Raised when a topic/partition token cannot be parsed."""

    def __init__(self, token: str | None, reason: str) -> None:
        self.token = token
        self.reason = reason
        if token is None:
            super().__init__(reason)
        else:
            super().__init__(f"improper topic partitions format on {token!r}: {reason}")


class DestinationFormatError(SpecSyntaxError):
    """Raised when a move token is not exactly one `=` split into two parts."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        LogDirsError.__init__(self, f"improper format for dest-dir = split on {token!r}: {reason}")


class MetadataLookupError(LogDirsError):
    """Raised when topic partitions cannot be resolved from cluster metadata."""


class DispatchError(LogDirsError):
    """Raised when an admin request cannot be delivered or answered."""


class ProblemDetail(BaseModel):
    """Data model that serialises to RFC 7807 JSON.

    Attributes
    ----------
    type : str
        A URI reference that identifies the problem type.
    title : str
        A short human-readable summary of the problem type.
    status : int
        The HTTP status code.
    detail : str | None
        A human-readable explanation specific to this occurrence.
    """

    type: str = Field(default="about:blank", examples=["/spec-syntax"])
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: Optional[str] = None
