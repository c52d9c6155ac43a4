"""Log-directory DTOs for CLI tables, JSON output and REST payloads."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PartitionDirEntry(BaseModel):
    """One partition replica stored in a log directory."""

    partition: int = Field(..., ge=0)
    size: int = Field(..., description="Bytes of log segments in this dir")
    offset_lag: int = Field(..., description="As reported by the broker")
    is_future: bool = False


class TopicDirEntry(BaseModel):
    topic: str
    partitions: List[PartitionDirEntry] = Field(default_factory=list)


class LogDirDescriptor(BaseModel):
    """A single log directory on a single broker."""

    dir: str
    error_code: int = 0
    broker: int | None = Field(default=None, description="Broker that reported the dir")
    topics: List[TopicDirEntry] = Field(default_factory=list)


class MoveOutcome(BaseModel):
    """Result of moving one partition replica."""

    topic: str
    partition: int
    error_code: int = 0


def offset_lag_for(
    *,
    is_future: bool,
    log_end_offset: int,
    high_watermark: int = 0,
    local_log_end_offset: int = 0,
) -> int:
    """Compute offset lag the way a broker reports it.

    A future replica lags the current replica's log end offset; any other
    replica lags the high watermark, floored at zero.
    """
    if is_future:
        return local_log_end_offset - log_end_offset
    return max(high_watermark - log_end_offset, 0)
