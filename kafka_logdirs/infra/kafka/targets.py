"""Where a log-dir request is sent: one broker, or the partition leaders."""
from __future__ import annotations

import abc
import logging
from typing import Dict, List, Tuple

from kafka_logdirs.core.exceptions import DispatchError
from kafka_logdirs.domain.models.log_dirs import LogDirDescriptor, MoveOutcome
from kafka_logdirs.domain.models.partitions import DestinationGroup
from kafka_logdirs.infra.kafka.admin import KafkaAdminFacade, leaders_by_broker, resolve_leader
from kafka_logdirs.infra.kafka.errors import error_message
from kafka_logdirs.infra.kafka.protocol import (
    AlterReplicaLogDirsRequest,
    DescribeLogDirsRequest,
    DescribeTopics,
    alter_replica_log_dirs_request,
    describe_log_dirs_request,
    iter_request_partitions,
    log_dirs_from_response,
    move_outcomes_from_response,
)

logger = logging.getLogger(__name__)

# Any negative broker id means "no explicit broker".
UNSCOPED_BROKER = -1


class DispatchTarget(abc.ABC):
    """Sends log-dir requests and returns decoded results."""

    def __init__(self, admin: KafkaAdminFacade) -> None:
        self._admin = admin

    @abc.abstractmethod
    def describe_log_dirs(self, topics: DescribeTopics) -> List[LogDirDescriptor]:
        """Describe *topics*, or every partition when *topics* is None."""

    @abc.abstractmethod
    def alter_replica_log_dirs(self, dirs: DestinationGroup) -> List[MoveOutcome]:
        """Move the replicas in *dirs* to their destination directories."""


class BrokerTarget(DispatchTarget):
    """Send every request to one fixed broker."""

    def __init__(self, admin: KafkaAdminFacade, broker_id: int) -> None:
        super().__init__(admin)
        self.broker_id = broker_id

    def _check_broker(self) -> None:
        if not self._admin.has_broker(self.broker_id):
            raise DispatchError(f"broker {self.broker_id} is not part of the cluster")

    def describe_log_dirs(self, topics: DescribeTopics) -> List[LogDirDescriptor]:
        self._check_broker()
        version = self._admin.api_version(DescribeLogDirsRequest)
        resp = self._admin.send(self.broker_id, describe_log_dirs_request(version, topics))
        return log_dirs_from_response(resp, broker=self.broker_id)

    def alter_replica_log_dirs(self, dirs: DestinationGroup) -> List[MoveOutcome]:
        self._check_broker()
        version = self._admin.api_version(AlterReplicaLogDirsRequest)
        resp = self._admin.send(self.broker_id, alter_replica_log_dirs_request(version, dirs))
        return move_outcomes_from_response(resp)


class ClusterTarget(DispatchTarget):
    """Split a request across partition leaders and merge the responses.

    An unscoped describe goes to every broker, so the merged result covers
    all replicas, not only leaders.
    """

    def describe_log_dirs(self, topics: DescribeTopics) -> List[LogDirDescriptor]:
        version = self._admin.api_version(DescribeLogDirsRequest)
        out: List[LogDirDescriptor] = []

        if topics is None:
            for broker in self._admin.broker_ids():
                resp = self._admin.send(broker, describe_log_dirs_request(version, None))
                out.extend(log_dirs_from_response(resp, broker=broker))
            return out

        leaders = self._admin.partition_leaders(topic for topic, _ in topics)
        by_broker, failed = leaders_by_broker(leaders, iter_request_partitions(topics))
        for topic, partition, code in failed:
            logger.warning("skipping %s[%d]: %s", topic, partition, error_message(code))

        for broker, pairs in sorted(by_broker.items()):
            resp = self._admin.send(broker, describe_log_dirs_request(version, _regroup(pairs)))
            out.extend(log_dirs_from_response(resp, broker=broker))
        return out

    def alter_replica_log_dirs(self, dirs: DestinationGroup) -> List[MoveOutcome]:
        version = self._admin.api_version(AlterReplicaLogDirsRequest)

        wanted = [
            (dest, topic, partition)
            for dest, topics in dirs.items()
            for topic, partition in iter_request_partitions(topics.items())
        ]
        leaders = self._admin.partition_leaders(topic for _, topic, _ in wanted)

        per_broker: Dict[int, DestinationGroup] = {}
        outcomes: List[MoveOutcome] = []
        for dest, topic, partition in wanted:
            leader, code = resolve_leader(leaders, topic, partition)
            if code:
                outcomes.append(MoveOutcome(topic=topic, partition=partition, error_code=code))
                continue
            (per_broker.setdefault(leader, {})
                .setdefault(dest, {})
                .setdefault(topic, [])
                .append(partition))

        for broker, group in sorted(per_broker.items()):
            resp = self._admin.send(broker, alter_replica_log_dirs_request(version, group))
            outcomes.extend(move_outcomes_from_response(resp))
        return outcomes


def _regroup(pairs: List[Tuple[str, int]]) -> List[Tuple[str, List[int]]]:
    grouped: Dict[str, List[int]] = {}
    for topic, partition in pairs:
        grouped.setdefault(topic, []).append(partition)
    return list(grouped.items())


def target_for(admin: KafkaAdminFacade, broker: int = UNSCOPED_BROKER) -> DispatchTarget:
    """Return a BrokerTarget for ``broker >= 0``, else a ClusterTarget."""
    if broker is not None and broker >= 0:
        return BrokerTarget(admin, broker)
    return ClusterTarget(admin)
