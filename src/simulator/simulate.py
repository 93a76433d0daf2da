"""
KPI Simulator - CLI Entry Point
Runs the bounded random walk for every configured metric on a fixed interval.
"""

import argparse
import json
import logging
import os
import sys

import structlog

from src.core.logger import setup_logging
from src.timeseries.models import MetricId

from .backends import list_backends
from .config import SimulatorConfig, preset
from .scheduler import TickScheduler

logger = structlog.get_logger(__name__)

PRESETS = ["live", "refresh", "dev"]


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Business KPI simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
            # Live dashboard ticks (60s), state kept in a local JSON file
            python -m src.simulator.simulate --config live

            # Fast ticks for 30 seconds
            python -m src.simulator.simulate --config dev --duration 30

            # Resume from Redis and publish every observation to Kafka
            python -m src.simulator.simulate --store redis --kafka --topic kpi-observations

            # Generate one day of 5 minute history and print the final snapshot
            python -m src.simulator.simulate --backfill \\
                --backfill-points 288 --backfill-interval 300
        """,
    )

    parser.add_argument("--config", choices=PRESETS, help="Use a predefined configuration")

    # Simulation settings
    parser.add_argument("--interval", type=float, help="Seconds between ticks")
    parser.add_argument(
        "--metrics",
        nargs="+",
        choices=[m.value for m in MetricId],
        help="Metrics to simulate (default: all)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible walks")
    parser.add_argument("--retention", type=int, help="Points kept in memory per metric")

    # State persistence
    parser.add_argument("--store", choices=list_backends(), help="State store backend")
    parser.add_argument("--state-file", help="State file for the 'file' backend")
    parser.add_argument(
        "--redis-host",
        default=os.getenv("REDIS_HOST", "localhost"),
        help="Redis host (default: localhost or REDIS_HOST env var)",
    )
    parser.add_argument(
        "--postgres-host",
        default=os.getenv("POSTGRES_HOST", "localhost"),
        help="PostgreSQL host",
    )
    parser.add_argument(
        "--postgres-port",
        type=int,
        default=int(os.getenv("POSTGRES_PORT", "5432")),
        help="PostgreSQL port",
    )
    parser.add_argument(
        "--postgres-db",
        default=os.getenv("POSTGRES_DB", "kpi_db"),
        help="PostgreSQL database",
    )
    parser.add_argument(
        "--postgres-user",
        default=os.getenv("POSTGRES_USER", "kpi"),
        help="PostgreSQL user",
    )
    parser.add_argument(
        "--postgres-password",
        default=os.getenv("POSTGRES_PASSWORD", "kpi_password"),
        help="PostgreSQL password",
    )

    # Kafka settings
    parser.add_argument("--kafka", action="store_true", help="Publish observations to Kafka")
    parser.add_argument(
        "--kafka-servers",
        default=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
        help="Kafka bootstrap servers (default: localhost:9092)",
    )
    parser.add_argument(
        "--topic",
        default=os.getenv("KAFKA_TOPIC", "kpi-observations"),
        help="Kafka topic name (default: kpi-observations)",
    )

    # Runtime settings
    parser.add_argument(
        "--duration", type=int, help="Duration to run in seconds (default: infinite)"
    )
    parser.add_argument(
        "--backfill",
        action="store_true",
        help="Generate historical ticks quickly instead of running in real time",
    )
    parser.add_argument(
        "--backfill-points",
        type=int,
        default=1440,
        help="Number of historical ticks in backfill mode (default: 1440)",
    )
    parser.add_argument(
        "--backfill-interval",
        type=int,
        default=60,
        help="Seconds between backfill ticks (default: 60)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit log events as JSON lines"
    )

    return parser.parse_args(argv)


def build_config_from_args(args) -> SimulatorConfig:
    """Build a SimulatorConfig from command-line arguments"""
    if args.config:
        config = preset(args.config)
        logger.info("Using predefined configuration", config_name=args.config)
    else:
        config = SimulatorConfig()
        logger.info("Using default configuration")

    if args.interval:
        config.tick_interval_seconds = args.interval
    if args.metrics:
        config.metrics = [MetricId(m) for m in args.metrics]
    if args.seed is not None:
        config.seed = args.seed
    if args.retention is not None:
        config.retention_points = args.retention

    if args.store:
        config.store_backend = args.store
    if args.state_file:
        config.state_file = args.state_file
    config.redis_host = args.redis_host
    config.postgres_host = args.postgres_host
    config.postgres_port = args.postgres_port
    config.postgres_database = args.postgres_db
    config.postgres_user = args.postgres_user
    config.postgres_password = args.postgres_password

    config.kafka_enabled = args.kafka
    config.kafka_bootstrap_servers = args.kafka_servers
    config.kafka_topic = args.topic

    # Re-run validation on the overridden values
    config.__post_init__()
    return config


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    setup_logging(level=getattr(logging, args.log_level), json_output=args.json_logs)

    logger.info("Starting KPI simulator")

    try:
        config = build_config_from_args(args)
        scheduler = TickScheduler(config)

        if args.backfill:
            logger.info("Running in BACKFILL mode")
            try:
                scheduler.backfill(args.backfill_points, args.backfill_interval)
            finally:
                scheduler.close()
            print(json.dumps(scheduler.snapshot(), indent=2))
        else:
            logger.info("Running in REAL-TIME mode")
            scheduler.run(duration_seconds=args.duration)

        logger.info("Simulator completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.error("Simulator failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
