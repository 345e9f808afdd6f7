"""Kafka connection probe: builds the producer, fetches cluster metadata and cleans up."""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from kafka import KafkaAdminClient, KafkaProducer
from kafka.errors import IllegalStateError, KafkaError
from config import ConnectionConfig
from kafka_errors import ProduceFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrokerInfo:
    node_id: Any
    host: str
    port: int


@dataclass(frozen=True)
class ClusterMetadata:
    """Snapshot of the cluster at the time of the query."""
    cluster_id: Optional[str]
    controller_id: Optional[int]
    brokers: List[BrokerInfo] = field(default_factory=list)
    topic_count: int = 0


@dataclass(frozen=True)
class ProbeResult:
    topic: str
    partition: int
    offset: int


class KafkaConnectionProbe:
    """Single-use connection to a Kafka cluster for diagnostics."""

    def __init__(self, config: ConnectionConfig):
        """
        Initialize the probe. Nothing is opened until connect() is called.

        Args:
            config: Connection configuration for the run
        """
        self.config = config
        self.producer = None
        self.admin_client = None
        self.closed = False

    @property
    def has_handle(self) -> bool:
        return self.producer is not None or self.admin_client is not None

    def connect(self):
        """
        Build the Kafka producer.

        KafkaProducer bootstraps against the cluster while probing the
        broker version, so bad addresses or credentials fail here.
        """
        logger.info(f"Building Kafka producer for {','.join(self.config.bootstrap_servers)}")
        self.producer = KafkaProducer(**self.config.producer_configs())
        logger.debug("Kafka producer built")

    def fetch_metadata(self, timeout: float) -> ClusterMetadata:
        """
        Fetch cluster metadata using the same connection settings as the producer.

        Args:
            timeout: Request timeout in seconds

        Returns:
            ClusterMetadata with brokers and topic count
        """
        if self.admin_client is None:
            self.admin_client = KafkaAdminClient(
                **self.config.admin_configs(request_timeout_ms=int(timeout * 1000))
            )

        started = time.monotonic()
        cluster = self.admin_client.describe_cluster()
        topics = self.admin_client.list_topics()
        logger.debug(f"Metadata fetched in {time.monotonic() - started:.2f}s")

        return ClusterMetadata(
            cluster_id=cluster.get('cluster_id'),
            controller_id=cluster.get('controller_id'),
            brokers=[self._broker_info(broker) for broker in cluster.get('brokers', [])],
            topic_count=len(topics),
        )

    @staticmethod
    def _broker_info(broker: Dict[str, Any]) -> BrokerInfo:
        return BrokerInfo(
            node_id=broker.get('node_id'),
            host=broker.get('host'),
            port=broker.get('port'),
        )

    def send_probe(self, topic: str, timeout: float) -> ProbeResult:
        """
        Send one probe message and wait for the acknowledgement.

        Args:
            topic: Topic to send to
            timeout: Seconds to wait for the acknowledgement

        Returns:
            ProbeResult with the partition and offset written

        Raises:
            ProduceFailedError: If the send fails or is not acknowledged in time
        """
        if self.producer is None:
            raise IllegalStateError("connect() must be called before send_probe()")

        payload = f"kafka-check probe {time.time():.0f}".encode('utf-8')
        try:
            future = self.producer.send(topic, key=b'kafka-check', value=payload)
            record_metadata = future.get(timeout=timeout)
        except KafkaError as e:
            raise ProduceFailedError(topic, e) from e

        logger.debug(f"Probe sent to topic {record_metadata.topic} "
                     f"partition {record_metadata.partition} "
                     f"offset {record_metadata.offset}")
        return ProbeResult(record_metadata.topic, record_metadata.partition, record_metadata.offset)

    def close(self, flush_timeout: float):
        """
        Flush and close the producer, then close the admin client.

        Safe to call when nothing was opened. Errors are logged, not raised.

        Args:
            flush_timeout: Seconds to wait for pending messages
        """
        if self.closed:
            return
        self.closed = True

        if self.producer is not None:
            try:
                self.producer.flush(timeout=flush_timeout)
            except Exception as e:
                logger.warning(f"Error flushing producer: {e}")
            try:
                self.producer.close(timeout=flush_timeout)
            except Exception as e:
                logger.warning(f"Error closing producer: {e}")
            logger.info("Kafka producer closed")

        if self.admin_client is not None:
            try:
                self.admin_client.close()
            except Exception as e:
                logger.warning(f"Error closing admin client: {e}")
