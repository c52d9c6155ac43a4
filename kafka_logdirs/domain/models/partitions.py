"""Partition selection models shared by the describe and move commands."""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, Field

PartitionIndex = Annotated[int, Field(ge=0)]


class AllPartitions(BaseModel):
    """Every partition of a topic; resolved through cluster metadata."""

    kind: Literal["all"] = "all"


class ExplicitPartitions(BaseModel):
    """A non-empty ordered set of partition indices."""

    kind: Literal["explicit"] = "explicit"
    partitions: List[PartitionIndex] = Field(..., min_length=1)

    def union(self, other: "ExplicitPartitions") -> "ExplicitPartitions":
        """Return the ordered union, keeping first-seen order."""
        merged = list(self.partitions)
        seen = set(merged)
        for p in other.partitions:
            if p not in seen:
                merged.append(p)
                seen.add(p)
        return ExplicitPartitions(partitions=merged)


PartitionSelector = Annotated[
    Union[AllPartitions, ExplicitPartitions], Field(discriminator="kind")
]

# topic -> selector, in first-seen topic order
TopicPartitionSpec = Dict[str, PartitionSelector]

# destination dir -> topic -> partitions
DestinationGroup = Dict[str, Dict[str, List[int]]]
