"""
Kafka publishing of simulated observations.
"""

import json

import structlog
from kafka import KafkaProducer

from src.timeseries.models import MetricId, Observation, metric_key

from .config import SimulatorConfig

logger = structlog.get_logger(__name__)


class ObservationPublisher:
    """Sends every tick's observation to a Kafka topic for downstream consumers"""

    def __init__(self, config: SimulatorConfig):
        self.topic = config.kafka_topic
        try:
            self.producer = KafkaProducer(
                bootstrap_servers=config.kafka_bootstrap_servers,
                value_serializer=lambda v: json.dumps(v).encode("utf-8"),
                compression_type="gzip",
            )
            logger.info(
                "Kafka producer initialized",
                bootstrap_servers=config.kafka_bootstrap_servers,
                topic=self.topic,
            )
        except Exception as e:
            logger.error("Failed to initialize Kafka producer", error=str(e))
            raise

    def publish(self, metric: MetricId | str, obs: Observation) -> bool:
        message = {"type": "kpi_observation", "metric": metric_key(metric), **obs.to_dict()}
        try:
            self.producer.send(self.topic, value=message)
            return True
        except Exception as e:
            logger.error("Failed to publish observation", metric=metric_key(metric), error=str(e))
            return False

    def flush(self):
        self.producer.flush()

    def close(self):
        self.producer.close()
