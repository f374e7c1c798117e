import math
import logging
from collections import defaultdict

from .models import Outcome, Report

logger = logging.getLogger(__name__)

OK_STATUS = 200


def percentile(sorted_samples: list[float], p: float) -> float | None:
    n = len(sorted_samples)
    if n == 0:
        return None
    # Nearest rank: smallest sample with at least p of the data at or below it
    rank = math.ceil(p * n)
    return sorted_samples[max(0, min(n - 1, rank - 1))]


class ReportBuilder:
    """Folds outcomes into a Report, one at a time.

    Not thread-safe: a single consumer owns the builder while producers hand
    their outcomes over through a queue.
    """

    def __init__(self, total_requests: int) -> None:
        self.total_requests = total_requests
        self.outcomes_seen = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.status_code_counts: dict[int, int] = defaultdict(int)
        self.error_counts: dict[str, int] = defaultdict(int)
        self.latencies: list[float] = []
        self._sum = 0.0
        self._min: float | None = None
        self._max: float | None = None

    def add(self, outcome: Outcome) -> None:
        self.outcomes_seen += 1

        if not outcome.ok:
            self.failed_requests += 1
            self.error_counts[outcome.error_type or "unknown"] += 1
            return

        self.status_code_counts[outcome.status_code] += 1
        if outcome.status_code == OK_STATUS:
            self.successful_requests += 1

        d = outcome.duration
        self.latencies.append(d)
        self._sum += d
        if self._min is None or d < self._min:
            self._min = d
        if self._max is None or d > self._max:
            self._max = d

    def finalize(self, total_duration: float) -> Report:
        if self.outcomes_seen != self.total_requests:
            logger.error(
                f"Collected {self.outcomes_seen} outcomes for "
                f"{self.total_requests} requests"
            )

        n = len(self.latencies)
        mean = std = None
        sl: list[float] = []
        if n:
            mean = self._sum / n
            sum_sq = sum(x * x for x in self.latencies)
            std = math.sqrt(max(0.0, (sum_sq / n) - (mean * mean)))
            sl = sorted(self.latencies)
            # Float rounding in the sum can push the mean a hair outside [min, max].
            mean = min(max(mean, self._min), self._max)
        else:
            logger.warning("No successful latencies recorded.")

        return Report(
            total_requests=self.total_requests,
            total_duration=total_duration,
            status_code_counts=dict(self.status_code_counts),
            successful_requests=self.successful_requests,
            failed_requests=self.failed_requests,
            average_duration=mean,
            min_duration=self._min,
            max_duration=self._max,
            std_duration=std,
            p50=percentile(sl, 0.50),
            p90=percentile(sl, 0.90),
            p95=percentile(sl, 0.95),
            p99=percentile(sl, 0.99),
            error_counts=dict(self.error_counts),
            durations=tuple(self.latencies),
        )
