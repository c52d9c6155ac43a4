"""DescribeLogDirs (key 35) and AlterReplicaLogDirs (key 34) wire messages.

Declared with kafka-python's protocol types so they can be sent through a
``KafkaAdminClient`` connection like any built-in request. Only the
non-flexible versions (v0, v1) are declared; their schemas are identical.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from kafka.protocol.api import Request, Response
from kafka.protocol.types import Array, Boolean, Int16, Int32, Int64, Schema, String

from kafka_logdirs.domain.models.log_dirs import (
    LogDirDescriptor,
    MoveOutcome,
    PartitionDirEntry,
    TopicDirEntry,
)
from kafka_logdirs.domain.models.partitions import DestinationGroup


class DescribeLogDirsResponse_v0(Response):
    API_KEY = 35
    API_VERSION = 0
    SCHEMA = Schema(
        ('throttle_time_ms', Int32),
        ('log_dirs', Array(
            ('error_code', Int16),
            ('log_dir', String('utf-8')),
            ('topics', Array(
                ('name', String('utf-8')),
                ('partitions', Array(
                    ('partition_index', Int32),
                    ('partition_size', Int64),
                    ('offset_lag', Int64),
                    ('is_future_key', Boolean))))))),
    )


class DescribeLogDirsResponse_v1(Response):
    API_KEY = 35
    API_VERSION = 1
    SCHEMA = DescribeLogDirsResponse_v0.SCHEMA


class DescribeLogDirsRequest_v0(Request):
    API_KEY = 35
    API_VERSION = 0
    RESPONSE_TYPE = DescribeLogDirsResponse_v0
    # a null topics array asks for every partition on the broker
    SCHEMA = Schema(
        ('topics', Array(
            ('topic', String('utf-8')),
            ('partitions', Array(Int32)))),
    )


class DescribeLogDirsRequest_v1(Request):
    API_KEY = 35
    API_VERSION = 1
    RESPONSE_TYPE = DescribeLogDirsResponse_v1
    SCHEMA = DescribeLogDirsRequest_v0.SCHEMA


class AlterReplicaLogDirsResponse_v0(Response):
    API_KEY = 34
    API_VERSION = 0
    SCHEMA = Schema(
        ('throttle_time_ms', Int32),
        ('results', Array(
            ('topic_name', String('utf-8')),
            ('partitions', Array(
                ('partition_index', Int32),
                ('error_code', Int16))))),
    )


class AlterReplicaLogDirsResponse_v1(Response):
    API_KEY = 34
    API_VERSION = 1
    SCHEMA = AlterReplicaLogDirsResponse_v0.SCHEMA


class AlterReplicaLogDirsRequest_v0(Request):
    API_KEY = 34
    API_VERSION = 0
    RESPONSE_TYPE = AlterReplicaLogDirsResponse_v0
    SCHEMA = Schema(
        ('dirs', Array(
            ('path', String('utf-8')),
            ('topics', Array(
                ('name', String('utf-8')),
                ('partitions', Array(Int32)))))),
    )


class AlterReplicaLogDirsRequest_v1(Request):
    API_KEY = 34
    API_VERSION = 1
    RESPONSE_TYPE = AlterReplicaLogDirsResponse_v1
    SCHEMA = AlterReplicaLogDirsRequest_v0.SCHEMA


DescribeLogDirsRequest = [DescribeLogDirsRequest_v0, DescribeLogDirsRequest_v1]
DescribeLogDirsResponse = [DescribeLogDirsResponse_v0, DescribeLogDirsResponse_v1]
AlterReplicaLogDirsRequest = [AlterReplicaLogDirsRequest_v0, AlterReplicaLogDirsRequest_v1]
AlterReplicaLogDirsResponse = [AlterReplicaLogDirsResponse_v0, AlterReplicaLogDirsResponse_v1]


# (topic, [partition, ...]) pairs; None means "everything"
DescribeTopics = Optional[List[Tuple[str, List[int]]]]


# ---------- request builders ----------

def describe_log_dirs_request(version: int, topics: DescribeTopics) -> Request:
    """Build a DescribeLogDirs request; ``topics=None`` stays a null array."""
    if topics is not None:
        topics = [(topic, list(partitions)) for topic, partitions in topics]
    return DescribeLogDirsRequest[version](topics=topics)


def alter_replica_log_dirs_request(version: int, dirs: DestinationGroup) -> Request:
    """Build an AlterReplicaLogDirs request with one entry per destination dir."""
    return AlterReplicaLogDirsRequest[version](
        dirs=[
            (path, [(topic, list(partitions)) for topic, partitions in topics.items()])
            for path, topics in dirs.items()
        ]
    )


# ---------- response decoders ----------

def log_dirs_from_response(response, broker: int | None = None) -> List[LogDirDescriptor]:
    """Convert a DescribeLogDirs response into descriptors tagged with *broker*."""
    out: List[LogDirDescriptor] = []
    for error_code, log_dir, topics in response.log_dirs:
        out.append(
            LogDirDescriptor(
                dir=log_dir,
                error_code=error_code,
                broker=broker,
                topics=[
                    TopicDirEntry(
                        topic=name,
                        partitions=[
                            PartitionDirEntry(
                                partition=partition,
                                size=size,
                                offset_lag=lag,
                                is_future=is_future,
                            )
                            for partition, size, lag, is_future in (partitions or [])
                        ],
                    )
                    for name, partitions in (topics or [])
                ],
            )
        )
    return out


def move_outcomes_from_response(response) -> List[MoveOutcome]:
    """Flatten an AlterReplicaLogDirs response to one outcome per partition."""
    return [
        MoveOutcome(topic=topic, partition=partition, error_code=error_code)
        for topic, partitions in response.results
        for partition, error_code in (partitions or [])
    ]


def iter_request_partitions(
    topics: Iterable[Tuple[str, Sequence[int]]]
) -> Iterable[Tuple[str, int]]:
    for topic, partitions in topics:
        for partition in partitions:
            yield topic, partition
