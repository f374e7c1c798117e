from .models import Report


def format_duration(seconds: float | None) -> str:
    if seconds is None:
        return "n/a"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f}µs"
    if seconds < 1.0:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds:.3f}s"


def render_latency_histogram(latencies: list[float], bins: int = 20) -> str:
    if not latencies:
        return "No latency data."
    lo, hi = min(latencies), max(latencies)
    if hi <= lo:
        return f"Histogram: single value {format_duration(lo)}"

    width = 40
    counts = [0] * bins
    for x in latencies:
        j = int((x - lo) / (hi - lo) * bins)
        if j == bins:
            j -= 1
        counts[j] += 1

    peak = max(counts)
    lines = []
    for i, c in enumerate(counts):
        left = lo + (hi - lo) * (i / bins)
        right = lo + (hi - lo) * ((i + 1) / bins)
        bar = "#" * max(1, int((c / peak) * width)) if c else ""
        lines.append(f"{left:.3f}s - {right:.3f}s | {bar} ({c})")
    return "Latency Histogram\n" + "\n".join(lines)


def render_report(report: Report) -> str:
    lines = [
        "=== Load Test Report ===",
        f"Total time: {format_duration(report.total_duration)}",
        f"Total requests: {report.total_requests}",
        f"Successful requests (HTTP 200): {report.successful_requests}",
        f"Failed requests: {report.failed_requests}",
        f"Requests per second: {report.requests_per_second:.2f}",
        f"Average response time: {format_duration(report.average_duration)}",
        f"Min response time: {format_duration(report.min_duration)}",
        f"Max response time: {format_duration(report.max_duration)}",
    ]
    if report.has_samples:
        lines.append(
            "Percentiles: "
            f"p50={format_duration(report.p50)} "
            f"p90={format_duration(report.p90)} "
            f"p95={format_duration(report.p95)} "
            f"p99={format_duration(report.p99)}"
        )
    else:
        lines.append("No response times recorded (every request failed).")

    lines.append("")
    lines.append("Status code distribution:")
    for code, count in report.status_code_counts.items():
        lines.append(f"  [{code}]: {count} responses")

    if report.error_counts:
        lines.append("")
        lines.append("Errors:")
        for name, count in report.error_counts.items():
            lines.append(f"  {name}: {count}")

    return "\n".join(lines)
