"""Kafka admin façade built on kafka-python."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from kafka.admin import KafkaAdminClient  # kafka-python
from kafka.errors import KafkaError, LeaderNotAvailableError, UnknownTopicOrPartitionError

from kafka_logdirs.core.config import Settings, get_settings
from kafka_logdirs.core.exceptions import DispatchError, MetadataLookupError
from kafka_logdirs.infra.kafka.errors import error_message

logger = logging.getLogger(__name__)


class TopicLeaders(NamedTuple):
    error_code: int
    # partition -> leader broker id (-1 when leaderless)
    leaders: Dict[int, int]


PartitionLeaders = Dict[str, TopicLeaders]


class KafkaAdminFacade:
    """Encapsulates the admin calls the log-dir commands need.

    The kafka-python client is created lazily on first use so that parsing
    errors never open a connection; `close()` releases it.
    """

    def __init__(
        self,
        bootstrap_servers: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.bootstrap_servers = bootstrap_servers or self._settings.bootstrap_servers
        self._client: KafkaAdminClient | None = None

    # ---------- connection -------------------------------------------------

    def _common_kwargs(self) -> dict:
        s = self._settings
        kw = dict(
            bootstrap_servers=self.bootstrap_servers,
            client_id=s.client_id,
            request_timeout_ms=s.request_timeout_ms,
            api_version_auto_timeout_ms=s.api_version_auto_timeout_ms,
            security_protocol=s.security_protocol,
        )
        if s.api_version_tuple():
            kw["api_version"] = s.api_version_tuple()
        if s.security_protocol.startswith("SASL"):
            kw.update(
                sasl_mechanism=s.sasl_mechanism,
                sasl_plain_username=s.sasl_plain_username,
                sasl_plain_password=s.sasl_plain_password,
            )
        if s.security_protocol.endswith("SSL"):
            kw.update(ssl_cafile=s.ssl_cafile)
        return kw

    def _ensure_client(self) -> KafkaAdminClient:
        if self._client is None:
            logger.debug("connecting admin client to %s", self.bootstrap_servers)
            try:
                self._client = KafkaAdminClient(**self._common_kwargs())
            except KafkaError as exc:
                raise DispatchError(
                    f"unable to connect to {self.bootstrap_servers}: {exc}"
                ) from exc
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "KafkaAdminFacade":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---------- metadata ---------------------------------------------------

    def _fetch_topics(self, topics: Sequence[str]) -> List[dict]:
        try:
            return self._ensure_client().describe_topics(list(topics))
        except (KafkaError, DispatchError) as exc:
            raise MetadataLookupError(
                f"unable to request metadata to determine partitions on topics: {exc}"
            ) from exc

    def topic_partitions(self, topics: Sequence[str]) -> Dict[str, List[int]]:
        """Return every partition index the cluster reports for *topics*.

        Raises
        ------
        MetadataLookupError
            If the request fails, a topic carries an error code, or a topic
            is absent from the response.
        """
        described = self._fetch_topics(topics)
        for t in described:
            code = t.get("error_code", 0)
            if code:
                raise MetadataLookupError(
                    f"metadata for topic {t['topic']!r} failed: {error_message(code)}"
                )
        missing = set(topics) - {t["topic"] for t in described}
        if missing:
            raise MetadataLookupError(
                f"metadata response did not include topics: {sorted(missing)}"
            )
        return {
            t["topic"]: [p["partition"] for p in t.get("partitions", [])]
            for t in described
        }

    def partition_leaders(self, topics: Iterable[str]) -> PartitionLeaders:
        """Return each topic's metadata error code and partition leaders.

        Topic-level errors are returned, not raised; only a failed request
        is fatal.
        """
        return {
            t["topic"]: TopicLeaders(
                error_code=t.get("error_code", 0),
                leaders={p["partition"]: p.get("leader", -1) for p in t.get("partitions", [])},
            )
            for t in self._fetch_topics(sorted(set(topics)))
        }

    def broker_ids(self) -> List[int]:
        """Return the ids of all live brokers."""
        try:
            meta = self._ensure_client().describe_cluster()
        except KafkaError as exc:
            raise DispatchError(f"unable to describe cluster: {exc}") from exc
        return sorted(b["node_id"] for b in meta.get("brokers", []))

    def has_broker(self, node_id: int) -> bool:
        """Check *node_id* against the client's cached cluster metadata.

        Only asks the cluster when the cache does not know the broker.
        """
        cached = self._ensure_client()._client.cluster.brokers()
        if any(b.nodeId == node_id for b in cached):
            return True
        return node_id in self.broker_ids()

    # ---------- raw requests -----------------------------------------------

    def api_version(self, request_versions: Sequence[type]) -> int:
        """Return the highest version in *request_versions* the cluster supports."""
        admin = self._ensure_client()
        try:
            try:
                return admin._client.api_version(list(request_versions))
            except AttributeError:
                # older kafka-python: negotiate through the admin client
                return admin._matching_api_version(list(request_versions))
        except KafkaError as exc:
            name = request_versions[0].__name__.rsplit("_", 1)[0]
            raise DispatchError(f"brokers do not support {name}: {exc}") from exc

    def send(self, node_id: int, request):
        """Send *request* to broker *node_id* and block for its response."""
        client = self._ensure_client()
        logger.info("sending %s to broker %d", type(request).__name__, node_id)
        try:
            future = client._send_request_to_node(node_id, request)
            client._wait_for_futures([future])
        except KafkaError as exc:
            raise DispatchError(
                f"request {type(request).__name__} to broker {node_id} failed: {exc}"
            ) from exc
        return future.value


def resolve_leader(leaders: PartitionLeaders, topic: str, partition: int) -> Tuple[int, int]:
    """Return ``(leader, error_code)`` for one partition.

    The leader is -1 whenever the error code is non-zero: the topic's own
    metadata error, UNKNOWN_TOPIC_OR_PARTITION for a topic or partition the
    cluster does not report, or LEADER_NOT_AVAILABLE for a leaderless one.
    """
    meta = leaders.get(topic)
    if meta is None:
        return -1, UnknownTopicOrPartitionError.errno
    if meta.error_code:
        return -1, meta.error_code
    leader = meta.leaders.get(partition)
    if leader is None:
        return -1, UnknownTopicOrPartitionError.errno
    if leader < 0:
        return -1, LeaderNotAvailableError.errno
    return leader, 0


def leaders_by_broker(
    leaders: PartitionLeaders, wanted: Iterable[Tuple[str, int]]
) -> Tuple[Dict[int, List[Tuple[str, int]]], List[Tuple[str, int, int]]]:
    """Split *wanted* (topic, partition) pairs by leader.

    Returns the per-broker assignment and the ``(topic, partition, error_code)``
    triples that cannot be routed.
    """
    by_broker: Dict[int, List[Tuple[str, int]]] = {}
    failed: List[Tuple[str, int, int]] = []
    for topic, partition in wanted:
        leader, code = resolve_leader(leaders, topic, partition)
        if code:
            failed.append((topic, partition, code))
            continue
        by_broker.setdefault(leader, []).append((topic, partition))
    return by_broker, failed
