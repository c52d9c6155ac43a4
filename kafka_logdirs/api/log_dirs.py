"""Log-dir endpoints: describe dirs and move replicas between them."""
from __future__ import annotations

from typing import Iterator, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from kafka_logdirs.domain.models.log_dirs import LogDirDescriptor, MoveOutcome
from kafka_logdirs.domain.services.logdir_service import LogDirService
from kafka_logdirs.infra.kafka.admin import KafkaAdminFacade
from kafka_logdirs.infra.kafka.targets import UNSCOPED_BROKER

router = APIRouter(tags=["log-dirs"])


class MoveReplicasRequest(BaseModel):
    assignments: List[str] = Field(..., min_length=1, examples=[["orders:0,1=/data/disk2"]])
    broker: int = UNSCOPED_BROKER


# ---------- dependency helpers -------------------------------------------------
def get_log_dir_service() -> Iterator[LogDirService]:
    """Yield a LogDirService bound to a fresh admin connection."""
    with KafkaAdminFacade() as admin:
        yield LogDirService(admin)


# ---------- routes -------------------------------------------------------------
@router.get("/log-dirs", response_model=list[LogDirDescriptor])
def describe_log_dirs(
    topic: list[str] | None = Query(default=None, description="topic or topic:1,2 (repeatable)"),
    broker: int = Query(UNSCOPED_BROKER, description="Broker to ask; negative means the leaders"),
    svc: LogDirService = Depends(get_log_dir_service),
) -> list[LogDirDescriptor]:
    """Describe log dirs; no topics describes everything."""
    return svc.describe(topic or [], broker=broker)


@router.post("/replica-log-dirs", response_model=list[MoveOutcome])
def alter_replica_log_dirs(
    body: MoveReplicasRequest,
    svc: LogDirService = Depends(get_log_dir_service),
) -> list[MoveOutcome]:
    """Move replicas; per-partition failures are returned, not raised."""
    return svc.alter_replica_log_dirs(body.assignments, broker=body.broker)
