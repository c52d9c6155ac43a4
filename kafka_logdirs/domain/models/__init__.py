from .log_dirs import (
    LogDirDescriptor,
    MoveOutcome,
    PartitionDirEntry,
    TopicDirEntry,
    offset_lag_for,
)
from .partitions import (
    AllPartitions,
    DestinationGroup,
    ExplicitPartitions,
    PartitionSelector,
    TopicPartitionSpec,
)

__all__ = [
    "AllPartitions",
    "DestinationGroup",
    "ExplicitPartitions",
    "LogDirDescriptor",
    "MoveOutcome",
    "PartitionDirEntry",
    "PartitionSelector",
    "TopicDirEntry",
    "TopicPartitionSpec",
    "offset_lag_for",
]
