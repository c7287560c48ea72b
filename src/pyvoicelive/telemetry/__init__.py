"""Usage and latency telemetry."""

from pyvoicelive.telemetry.aggregator import TelemetryAggregator, latency_stats, nearest_rank_percentile
from pyvoicelive.telemetry.export import cache_rate, calculator_params, calculator_url, statistics_params

__all__ = [
    "TelemetryAggregator",
    "cache_rate",
    "calculator_params",
    "calculator_url",
    "latency_stats",
    "nearest_rank_percentile",
    "statistics_params",
]
