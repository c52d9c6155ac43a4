"""
Shared pytest fixtures.

Provides an in-memory stand-in for KafkaAdminFacade that records every
request it is asked to send and answers with canned protocol responses.
"""

from typing import Any, Callable

import pytest

from kafka_logdirs.core.exceptions import MetadataLookupError
from kafka_logdirs.infra.kafka.admin import TopicLeaders
from kafka_logdirs.infra.kafka.protocol import (
    AlterReplicaLogDirsResponse_v1,
    DescribeLogDirsResponse_v1,
)


def describe_response(*dirs: tuple) -> DescribeLogDirsResponse_v1:
    """dirs: (error_code, path, [(topic, [(partition, size, lag, is_future)])])"""
    return DescribeLogDirsResponse_v1(throttle_time_ms=0, log_dirs=list(dirs))


def alter_response(*results: tuple) -> AlterReplicaLogDirsResponse_v1:
    """results: (topic, [(partition, error_code)])"""
    return AlterReplicaLogDirsResponse_v1(throttle_time_ms=0, results=list(results))


class FakeAdmin:
    """Duck-typed KafkaAdminFacade."""

    def __init__(
        self,
        partitions: dict[str, list[int]] | None = None,
        leaders: dict[str, dict[int, int]] | None = None,
        brokers: tuple[int, ...] = (1, 2, 3),
        responses: dict[int, Any] | None = None,
        version: int = 1,
        topic_errors: dict[str, int] | None = None,
    ) -> None:
        self.partitions = partitions or {}
        self.leaders = leaders or {}
        self.topic_errors = topic_errors or {}
        self.brokers = list(brokers)
        self.responses = responses or {}
        self.version = version
        self.metadata_calls: list[list[str]] = []
        self.sent: list[tuple[int, Any]] = []
        self.send_error: Exception | None = None
        self.closed = False

    def topic_partitions(self, topics):
        topics = list(topics)
        self.metadata_calls.append(topics)
        missing = [t for t in topics if t not in self.partitions]
        if missing:
            raise MetadataLookupError(f"unknown topics {missing}")
        return {t: self.partitions[t] for t in topics}

    def partition_leaders(self, topics):
        # topics the cluster does not know are left out, as in a real response
        return {
            t: TopicLeaders(self.topic_errors.get(t, 0), dict(self.leaders.get(t, {})))
            for t in set(topics)
            if t in self.leaders or t in self.topic_errors
        }

    def broker_ids(self):
        return sorted(self.brokers)

    def has_broker(self, node_id):
        return node_id in self.brokers

    def api_version(self, request_versions):
        return min(self.version, len(request_versions) - 1)

    def send(self, node_id, request):
        self.sent.append((node_id, request))
        if self.send_error is not None:
            raise self.send_error
        resp = self.responses.get(node_id)
        if callable(resp):
            return resp(request)
        if resp is None:
            return type(request).RESPONSE_TYPE(throttle_time_ms=0, **{
                name: [] for name in type(request).RESPONSE_TYPE.SCHEMA.names
                if name != "throttle_time_ms"
            })
        return resp

    def close(self):
        self.closed = True


@pytest.fixture
def fake_admin() -> FakeAdmin:
    return FakeAdmin()


@pytest.fixture
def admin_factory(fake_admin: FakeAdmin) -> Callable[[str], FakeAdmin]:
    return lambda _servers: fake_admin
