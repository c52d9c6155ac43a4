"""Parse compact ``topic:1,2,3`` and ``topic:1,2=/dir`` tokens."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List

from kafka_logdirs.core.exceptions import DestinationFormatError, SpecSyntaxError
from kafka_logdirs.domain.models.partitions import (
    AllPartitions,
    DestinationGroup,
    ExplicitPartitions,
    PartitionSelector,
    TopicPartitionSpec,
)

logger = logging.getLogger(__name__)

_PARTITION = re.compile(r"[0-9]+")


def _parse_partitions(token: str, raw: str) -> List[int]:
    if raw == "":
        raise SpecSyntaxError(token, "missing partitions after ':'")
    out: List[int] = []
    for elem in raw.split(","):
        if not _PARTITION.fullmatch(elem):
            raise SpecSyntaxError(token, f"partition {elem!r} is not a non-negative integer")
        partition = int(elem)
        if partition not in out:
            out.append(partition)
    return out


def _merge(existing: PartitionSelector | None, new: PartitionSelector) -> PartitionSelector:
    if existing is None:
        return new
    if isinstance(existing, AllPartitions) or isinstance(new, AllPartitions):
        return AllPartitions()
    return existing.union(new)


def parse_topic_partitions(tokens: Iterable[str]) -> TopicPartitionSpec:
    """Parse ``topic`` / ``topic:p1,p2`` tokens into a topic -> selector map.

    A bare topic selects all of its partitions. Tokens naming the same topic
    are unioned, and selecting all partitions absorbs any explicit list.

    Raises
    ------
    SpecSyntaxError
        On an empty topic, an empty partition list, or a partition that is
        not a non-negative integer.
    """
    spec: Dict[str, PartitionSelector] = {}
    for token in tokens:
        topic, sep, raw = token.partition(":")
        if not topic:
            raise SpecSyntaxError(token, "empty topic name")
        if sep:
            selector: PartitionSelector = ExplicitPartitions(
                partitions=_parse_partitions(token, raw)
            )
        else:
            selector = AllPartitions()
        spec[topic] = _merge(spec.get(topic), selector)
    return spec


def parse_destination_tokens(tokens: Iterable[str]) -> DestinationGroup:
    """Group ``topic:p1,p2=/dest`` tokens by destination directory.

    The same topic moved to the same destination in several tokens has its
    partitions unioned under that one destination.
    """
    dests: DestinationGroup = {}
    for token in tokens:
        parts = token.split("=")
        if len(parts) != 2:
            raise DestinationFormatError(
                token, f"expected two strings after split, got {len(parts)}"
            )
        left, dest = parts
        if not dest:
            raise DestinationFormatError(token, "empty destination directory")

        for topic, selector in parse_topic_partitions([left]).items():
            if not isinstance(selector, ExplicitPartitions):
                raise SpecSyntaxError(token, "moving replicas requires explicit partitions")
            per_dest = dests.setdefault(dest, {})
            current = per_dest.setdefault(topic, [])
            current.extend(p for p in selector.partitions if p not in current)

    logger.debug("grouped %d destination dir(s)", len(dests))
    return dests
