"""Use-case coordination for describing and moving replica log dirs."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from kafka_logdirs.core.exceptions import SpecSyntaxError
from kafka_logdirs.domain.models.log_dirs import LogDirDescriptor, MoveOutcome
from kafka_logdirs.domain.models.partitions import DestinationGroup
from kafka_logdirs.domain.services.partition_resolver import PartitionResolver
from kafka_logdirs.domain.services.spec_parser import (
    parse_destination_tokens,
    parse_topic_partitions,
)
from kafka_logdirs.infra.kafka.admin import KafkaAdminFacade
from kafka_logdirs.infra.kafka.protocol import DescribeTopics
from kafka_logdirs.infra.kafka.targets import (
    UNSCOPED_BROKER,
    DispatchTarget,
    target_for,
)

logger = logging.getLogger(__name__)

TargetFactory = Callable[[KafkaAdminFacade, int], DispatchTarget]


def build_describe_request_topics(resolved: Optional[Dict[str, List[int]]]) -> DescribeTopics:
    """Return the wire topic list; None (unscoped) when nothing was asked for."""
    if resolved is None:
        return None
    return [(topic, partitions) for topic, partitions in resolved.items()]


def normalize_log_dirs(dirs: List[LogDirDescriptor]) -> List[LogDirDescriptor]:
    """Sort dirs by path, topics by name and partitions by index.

    Sorting is stable, so entries with equal keys (the same path reported by
    two brokers) keep their relative order and re-normalizing is a no-op.
    """
    out = sorted(dirs, key=lambda d: d.dir)
    for d in out:
        d.topics.sort(key=lambda t: t.topic)
        for t in d.topics:
            t.partitions.sort(key=lambda p: p.partition)
    return out


def normalize_move_outcomes(outcomes: List[MoveOutcome]) -> List[MoveOutcome]:
    return sorted(outcomes, key=lambda o: (o.topic, o.partition))


class LogDirService:
    """Stateless wrapper combining parsing, resolution and dispatch."""

    def __init__(
        self,
        admin: KafkaAdminFacade,
        target_factory: TargetFactory = target_for,
    ) -> None:
        self._admin = admin
        self._target_factory = target_factory
        self._resolver = PartitionResolver(admin)

    # ------------------------------------------------------------------ #
    # Queries                                                             #
    # ------------------------------------------------------------------ #
    def describe(
        self, tokens: Sequence[str], broker: int = UNSCOPED_BROKER
    ) -> List[LogDirDescriptor]:
        """Describe log dirs for *tokens* (``topic`` or ``topic:1,2``).

        No tokens describes every directory, topic and partition.
        """
        resolved = None
        if tokens:
            spec = parse_topic_partitions(tokens)
            resolved = self._resolver.resolve(spec)
        topics = build_describe_request_topics(resolved)
        logger.debug("describe log dirs topics=%s broker=%s", topics, broker)

        target = self._target_factory(self._admin, broker)
        return normalize_log_dirs(target.describe_log_dirs(topics))

    # ------------------------------------------------------------------ #
    # Commands                                                            #
    # ------------------------------------------------------------------ #
    def plan_moves(self, tokens: Sequence[str]) -> DestinationGroup:
        """Group ``topic:1,2=/dir`` tokens by destination directory."""
        if not tokens:
            raise SpecSyntaxError(None, "at least one topic:partitions=dir assignment is required")
        return parse_destination_tokens(tokens)

    def alter_replica_log_dirs(
        self, tokens: Sequence[str], broker: int = UNSCOPED_BROKER
    ) -> List[MoveOutcome]:
        """Move partition replicas to the directories named in *tokens*."""
        dirs = self.plan_moves(tokens)
        logger.debug("alter replica log dirs dirs=%s broker=%s", dirs, broker)

        target = self._target_factory(self._admin, broker)
        return normalize_move_outcomes(target.alter_replica_log_dirs(dirs))
