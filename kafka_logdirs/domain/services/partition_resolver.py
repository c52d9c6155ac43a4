"""Expand "all partitions" selections through one metadata lookup."""
from __future__ import annotations

import logging
from typing import Dict, List, Protocol, Sequence

from kafka_logdirs.core.exceptions import MetadataLookupError
from kafka_logdirs.domain.models.partitions import AllPartitions, TopicPartitionSpec

logger = logging.getLogger(__name__)


class MetadataLookup(Protocol):
    def topic_partitions(self, topics: Sequence[str]) -> Dict[str, List[int]]: ...


class PartitionResolver:
    """Turns a TopicPartitionSpec into concrete partition lists."""

    def __init__(self, lookup: MetadataLookup) -> None:
        self._lookup = lookup

    def resolve(self, spec: TopicPartitionSpec) -> Dict[str, List[int]]:
        """Return topic -> partitions, in the topic order of *spec*.

        Topics that select all partitions are batched into a single metadata
        request; none is issued when every topic lists its partitions.
        """
        batch = [t for t, sel in spec.items() if isinstance(sel, AllPartitions)]
        found: Dict[str, List[int]] = {}
        if batch:
            logger.debug("resolving partitions for %s", batch)
            found = self._lookup.topic_partitions(batch)

        resolved: Dict[str, List[int]] = {}
        for topic, selector in spec.items():
            if isinstance(selector, AllPartitions):
                if topic not in found:
                    raise MetadataLookupError(f"no metadata returned for topic {topic!r}")
                resolved[topic] = sorted(found[topic])
            else:
                resolved[topic] = list(selector.partitions)
        return resolved
