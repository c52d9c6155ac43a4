"""Tests for broker vs cluster-wide request dispatch."""

import pytest
from kafka.errors import (
    LeaderNotAvailableError,
    TopicAuthorizationFailedError,
    UnknownTopicOrPartitionError,
)

from conftest import FakeAdmin, alter_response, describe_response
from kafka_logdirs.core.exceptions import DispatchError
from kafka_logdirs.infra.kafka.admin import TopicLeaders, resolve_leader
from kafka_logdirs.infra.kafka.targets import (
    UNSCOPED_BROKER,
    BrokerTarget,
    ClusterTarget,
    target_for,
)


@pytest.mark.parametrize(
    ("broker", "expected"),
    [(UNSCOPED_BROKER, ClusterTarget), (-7, ClusterTarget), (0, BrokerTarget), (3, BrokerTarget)],
)
def test_target_selection(broker: int, expected: type) -> None:
    assert isinstance(target_for(FakeAdmin(), broker), expected)


class TestBrokerTarget:
    def test_unknown_broker_rejected(self) -> None:
        admin = FakeAdmin(brokers=(1, 2))
        with pytest.raises(DispatchError, match="broker 9"):
            BrokerTarget(admin, 9).describe_log_dirs(None)
        assert admin.sent == []

    def test_uses_negotiated_version(self) -> None:
        admin = FakeAdmin(brokers=(1,), version=0)
        BrokerTarget(admin, 1).describe_log_dirs([("t", [0])])
        (_, request), = admin.sent
        assert request.API_VERSION == 0

    def test_move_sent_to_that_broker(self) -> None:
        admin = FakeAdmin(brokers=(1, 4), responses={4: alter_response(("t", [(0, 0)]))})
        outcomes = BrokerTarget(admin, 4).alter_replica_log_dirs({"/d": {"t": [0]}})
        assert [node for node, _ in admin.sent] == [4]
        assert [(o.topic, o.partition, o.error_code) for o in outcomes] == [("t", 0, 0)]


class TestClusterTarget:
    def test_unscoped_describe_goes_to_every_broker(self) -> None:
        admin = FakeAdmin(brokers=(3, 1), responses={
            1: describe_response((0, "/data", [("t", [(0, 10, 0, False)])])),
            3: describe_response((0, "/data", [("t", [(0, 10, 0, False)])])),
        })
        dirs = ClusterTarget(admin).describe_log_dirs(None)
        assert [node for node, _ in admin.sent] == [1, 3]
        assert all(req.topics is None for _, req in admin.sent)
        assert sorted(d.broker for d in dirs) == [1, 3]

    def test_scoped_describe_split_by_leader(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: 1, 1: 2, 2: 1}, "u": {0: 2}})
        ClusterTarget(admin).describe_log_dirs([("t", [0, 1, 2]), ("u", [0])])
        sent = {node: req.topics for node, req in admin.sent}
        assert sent == {1: [("t", [0, 2])], 2: [("t", [1]), ("u", [0])]}

    def test_leaderless_partition_skipped_on_describe(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: -1, 1: 2}})
        ClusterTarget(admin).describe_log_dirs([("t", [0, 1])])
        assert [(node, req.topics) for node, req in admin.sent] == [(2, [("t", [1])])]

    def test_move_split_by_leader_keeps_one_entry_per_dir(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: 1, 1: 2}, "u": {0: 1}})
        ClusterTarget(admin).alter_replica_log_dirs({
            "/a": {"t": [0, 1], "u": [0]},
            "/b": {"t": [1]},
        })
        sent = {node: req.dirs for node, req in admin.sent}
        assert sent == {
            1: [("/a", [("t", [0]), ("u", [0])])],
            2: [("/a", [("t", [1])]), ("/b", [("t", [1])])],
        }

    def test_leaderless_partition_reported_on_move(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: -1}})
        outcomes = ClusterTarget(admin).alter_replica_log_dirs({"/a": {"t": [0]}})
        assert admin.sent == []
        assert [(o.topic, o.partition, o.error_code) for o in outcomes] == [
            ("t", 0, LeaderNotAvailableError.errno)
        ]

    def test_unknown_topic_reported_on_move_without_aborting(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: 1}})
        outcomes = ClusterTarget(admin).alter_replica_log_dirs({
            "/a": {"missing": [0], "t": [0]},
        })
        assert [(node, req.dirs) for node, req in admin.sent] == [(1, [("/a", [("t", [0])])])]
        assert ("missing", 0, UnknownTopicOrPartitionError.errno) in [
            (o.topic, o.partition, o.error_code) for o in outcomes
        ]

    def test_nonexistent_partition_reported_as_unknown(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: 1}})
        outcomes = ClusterTarget(admin).alter_replica_log_dirs({"/a": {"t": [99]}})
        assert admin.sent == []
        assert [(o.topic, o.partition, o.error_code) for o in outcomes] == [
            ("t", 99, UnknownTopicOrPartitionError.errno)
        ]

    def test_topic_error_code_carried_into_outcome(self) -> None:
        code = TopicAuthorizationFailedError.errno
        admin = FakeAdmin(topic_errors={"secret": code})
        outcomes = ClusterTarget(admin).alter_replica_log_dirs({"/a": {"secret": [0, 1]}})
        assert admin.sent == []
        assert [(o.partition, o.error_code) for o in outcomes] == [(0, code), (1, code)]

    def test_unknown_topic_skipped_on_describe(self) -> None:
        admin = FakeAdmin(leaders={"t": {0: 2}})
        ClusterTarget(admin).describe_log_dirs([("missing", [0]), ("t", [0, 99])])
        assert [(node, req.topics) for node, req in admin.sent] == [(2, [("t", [0])])]


class TestResolveLeader:
    leaders = {
        "t": TopicLeaders(error_code=0, leaders={0: 4, 1: -1}),
        "denied": TopicLeaders(error_code=TopicAuthorizationFailedError.errno, leaders={}),
    }

    @pytest.mark.parametrize(
        ("topic", "partition", "expected"),
        [
            ("t", 0, (4, 0)),
            ("t", 1, (-1, LeaderNotAvailableError.errno)),
            ("t", 7, (-1, UnknownTopicOrPartitionError.errno)),
            ("nope", 0, (-1, UnknownTopicOrPartitionError.errno)),
            ("denied", 0, (-1, TopicAuthorizationFailedError.errno)),
        ],
    )
    def test_codes(self, topic: str, partition: int, expected: tuple) -> None:
        assert resolve_leader(self.leaders, topic, partition) == expected
