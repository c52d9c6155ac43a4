"""Tests for wire message construction, error text and offset lag."""

from kafka.errors import UnknownTopicOrPartitionError

from conftest import describe_response
from kafka_logdirs.domain.models.log_dirs import offset_lag_for
from kafka_logdirs.infra.kafka.errors import error_message
from kafka_logdirs.infra.kafka.protocol import (
    AlterReplicaLogDirsRequest_v1,
    DescribeLogDirsRequest_v1,
    alter_replica_log_dirs_request,
    describe_log_dirs_request,
    log_dirs_from_response,
)


def test_unscoped_request_encodes_null_array() -> None:
    assert describe_log_dirs_request(1, None).encode() == b"\xff\xff\xff\xff"
    assert describe_log_dirs_request(1, []).encode() == b"\x00\x00\x00\x00"


def test_request_versions() -> None:
    assert isinstance(describe_log_dirs_request(1, None), DescribeLogDirsRequest_v1)
    assert isinstance(alter_replica_log_dirs_request(1, {}), AlterReplicaLogDirsRequest_v1)
    assert describe_log_dirs_request(0, None).API_VERSION == 0


def test_log_dirs_decoded() -> None:
    resp = describe_response(
        (56, "/offline", []),
        (0, "/data", [("t", [(0, 4096, 0, False), (1, 20, 3, True)])]),
    )
    offline, data = log_dirs_from_response(resp, broker=2)
    assert offline.error_code == 56 and offline.topics == []
    assert data.broker == 2
    assert [(p.partition, p.size, p.offset_lag, p.is_future) for p in data.topics[0].partitions] == [
        (0, 4096, 0, False),
        (1, 20, 3, True),
    ]


class TestErrorMessage:
    def test_no_error(self) -> None:
        assert error_message(0) is None

    def test_known_code(self) -> None:
        msg = error_message(UnknownTopicOrPartitionError.errno)
        assert msg.startswith("UNKNOWN_TOPIC_OR_PARTITION")

    def test_unmapped_code_keeps_number(self) -> None:
        assert "error code 31999" in error_message(31999)


class TestOffsetLag:
    def test_current_replica_floored_at_zero(self) -> None:
        assert offset_lag_for(is_future=False, high_watermark=100, log_end_offset=120) == 0

    def test_current_replica_behind_high_watermark(self) -> None:
        assert offset_lag_for(is_future=False, high_watermark=100, log_end_offset=80) == 20

    def test_future_replica_against_local_log_end(self) -> None:
        assert offset_lag_for(is_future=True, local_log_end_offset=500, log_end_offset=450) == 50
