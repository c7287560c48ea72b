"""Running token counters and latency statistics for a session."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from pyvoicelive.models.telemetry import LatencyStats, Metrics, UsageSample

_logger = logging.getLogger(__name__)

P90 = 0.9


def nearest_rank_percentile(values: Sequence[float], fraction: float) -> float:
    """Nearest-rank percentile: ``sorted(values)[ceil(n * fraction) - 1]``.

    No interpolation. The index is clamped to the sequence bounds and an
    empty sequence yields ``0``.
    """
    if not values:
        return 0
    ordered = sorted(values)
    index = math.ceil(len(ordered) * fraction) - 1
    index = max(0, min(index, len(ordered) - 1))
    return ordered[index]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def latency_stats(values: Sequence[float]) -> LatencyStats:
    if not values:
        return LatencyStats(values=list(values))
    return LatencyStats(
        values=list(values),
        min=min(values),
        avg=round_half_up(sum(values) / len(values)),
        max=max(values),
        p90=nearest_rank_percentile(values, P90),
    )


class TelemetryAggregator:
    """Accumulates :class:`UsageSample`s into :class:`Metrics`.

    :meth:`record` never raises; a sample that somehow fails to apply is
    logged and still counts as a turn.
    """

    def __init__(self, metrics: Metrics | None = None) -> None:
        self._metrics = metrics if metrics is not None else Metrics()

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    def snapshot(self) -> Metrics:
        """Deep copy safe to hand to readers."""
        return self._metrics.model_copy(deep=True)

    def record(self, sample: UsageSample) -> None:
        metrics = self._metrics
        try:
            tokens = metrics.tokens
            tokens.input_text += sample.input_text
            tokens.input_audio += sample.input_audio
            tokens.output_text += sample.output_text
            tokens.output_audio += sample.output_audio
            tokens.cached += sample.cached
            tokens.cached_text += sample.cached_text
            tokens.cached_audio += sample.cached_audio
            tokens.total += sample.total

            if sample.latency_ms is not None:
                values = [*metrics.latency.values, sample.latency_ms]
                metrics.latency = latency_stats(values)
        except Exception:
            _logger.warning("Failed to record usage sample %r", sample, exc_info=True)
        finally:
            metrics.turns += 1
