"""
CLI for running anomaly detection and a forecast over demo data.

Usage:
    python -m src.analytics.analyze [options]
"""

import argparse
import json
import logging
import os
import random
import sys

import structlog

from src.core.logger import setup_logging
from src.simulator.config import DEFAULT_BASELINES
from src.simulator.demo import generate_daily_history, generate_monthly_history
from src.timeseries.models import MetricId

from .config import AnalyticsConfig, monthly_rate_from_annual
from .detector import AnomalyDetector
from .forecaster import Forecaster
from .models import TIMEFRAMES, SensitivityLevel, window_for_timeframe

logger = structlog.get_logger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Detect anomalies and forecast a KPI over generated demo data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Revenue over the last 30 days, medium sensitivity
        python -m src.analytics.analyze --metric revenue

        # Churn over 90 days, high sensitivity, 12 month forecast
        python -m src.analytics.analyze --metric churn_rate --timeframe 90d \\
            --sensitivity high --horizon 12
        """,
    )

    parser.add_argument(
        "--metric",
        choices=[m.value for m in MetricId],
        default=MetricId.REVENUE.value,
        help="Metric to analyse (default: revenue)",
    )
    parser.add_argument(
        "--timeframe",
        choices=list(TIMEFRAMES.keys()),
        default="30d",
        help="Detection window (default: 30d)",
    )
    parser.add_argument(
        "--sensitivity",
        choices=[s.value for s in SensitivityLevel],
        default=SensitivityLevel.MEDIUM.value,
        help="Detection sensitivity (default: medium)",
    )
    parser.add_argument(
        "--anomaly-prob",
        type=float,
        default=0.05,
        help="Probability of an injected anomaly per demo day (default: 0.05)",
    )

    parser.add_argument(
        "--history", type=int, default=6, help="Historical months to show (default: 6)"
    )
    parser.add_argument(
        "--horizon", type=int, default=3, help="Months to forecast (default: 3)"
    )
    parser.add_argument(
        "--annual-growth",
        type=float,
        help="Annual growth in percent (default: the metric's dashboard growth rate)",
    )

    parser.add_argument("--seed", type=int, help="Random seed for reproducible demo data")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Logging level (default: WARNING)",
    )

    return parser.parse_args(argv)


def build_config(args) -> AnalyticsConfig:
    """Build configuration from arguments"""
    metric = MetricId(args.metric)
    config = AnalyticsConfig(
        window_size=window_for_timeframe(args.timeframe),
        sensitivity=SensitivityLevel(args.sensitivity),
        history_months=args.history,
        horizon_months=args.horizon,
    )
    if args.annual_growth is not None:
        config.growth_rates[metric] = monthly_rate_from_annual(args.annual_growth)
    return config


def analyze(metric: MetricId, config: AnalyticsConfig, anomaly_probability: float, rng) -> dict:
    """Run detection and forecasting for one metric and return a JSON-ready report"""
    baseline = DEFAULT_BASELINES[metric]

    demo = generate_daily_history(
        metric,
        days=config.window_size,
        baseline=baseline,
        anomaly_probability=anomaly_probability,
        rng=rng,
    )
    detector = AnomalyDetector.from_config(config)
    bands = detector.bands(demo.series, config.window_size, config.sensitivity)
    anomalies = detector.detect(demo.series, config.window_size, config.sensitivity)

    growth = config.growth_rate_for(metric)
    monthly = generate_monthly_history(metric, config.history_months, baseline, growth, rng=rng)
    forecaster = Forecaster.from_config(config)
    points = forecaster.forecast(monthly, growth, config.history_months, config.horizon_months)

    return {
        "metric": metric.value,
        "detection": {
            "window_size": config.window_size,
            "sensitivity": config.sensitivity.value,
            "mean": bands.mean if bands else None,
            "stddev": bands.stddev if bands else None,
            "lower_bound": bands.lower_bound if bands else None,
            "upper_bound": bands.upper_bound if bands else None,
            "injected": [
                {"index": a.index, "kind": a.kind.value, "factor": a.factor} for a in demo.injected
            ],
            "anomalies": [a.to_dict() for a in anomalies],
        },
        "forecast": {
            "monthly_growth_rate": growth,
            "points": [p.to_dict() for p in points],
            "summary": forecaster.summarize(points).to_dict(),
        },
    }


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    setup_logging(level=getattr(logging, args.log_level))

    try:
        config = build_config(args)
        rng = random.Random(args.seed)
        report = analyze(MetricId(args.metric), config, args.anomaly_prob, rng)
        print(json.dumps(report, indent=2))
        return 0

    except Exception as e:
        logger.error("Analysis failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
