from dataclasses import dataclass, field, asdict
from typing import Any
from collections.abc import Callable


@dataclass(frozen=True)
class Outcome:
    """Result of a single GET attempt. ``status_code`` is None when ``error`` is set."""

    duration: float
    status_code: int | None = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException, duration: float) -> "Outcome":
        name = type(exc).__name__
        message = str(exc)
        return cls(
            duration=duration,
            error=f"{name}: {message}" if message else name,
            error_type=name,
        )

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Report:
    total_requests: int
    total_duration: float
    status_code_counts: dict[int, int]
    successful_requests: int
    failed_requests: int
    # Timing fields cover non-error outcomes only and stay None without samples.
    average_duration: float | None
    min_duration: float | None
    max_duration: float | None
    std_duration: float | None = None
    p50: float | None = None
    p90: float | None = None
    p95: float | None = None
    p99: float | None = None
    error_counts: dict[str, int] = field(default_factory=dict)
    durations: tuple[float, ...] = ()

    @property
    def completed_requests(self) -> int:
        return self.total_requests - self.failed_requests

    @property
    def has_samples(self) -> bool:
        return len(self.durations) > 0

    @property
    def requests_per_second(self) -> float:
        if self.total_duration <= 0:
            return 0.0
        return self.total_requests / self.total_duration

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("durations")
        data["completed_requests"] = self.completed_requests
        data["has_samples"] = self.has_samples
        data["requests_per_second"] = self.requests_per_second
        return data


# Metrics callback: callable accepting report dict
MetricsCallback = Callable[[dict[str, Any]], None]
