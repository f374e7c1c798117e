"""
Quick sanity run: a small bounded-concurrency load test from Python.
Run: uv run examples/load_test_example.py [URL]
"""
import asyncio
import os
import sys

from downpour import LoadTester, render_report

URL = sys.argv[1] if len(sys.argv) > 1 else "https://example.com/"


async def main():
    tester = LoadTester(
        URL,
        total_requests=20,
        concurrency=4,
        request_timeout_s=float(os.getenv("HTTP_REQUEST_TIMEOUT_S", "10")),
        metrics_callback=lambda stats: print("\nStats:", stats),
    )
    report = await tester.run()
    print(render_report(report))


if __name__ == "__main__":
    asyncio.run(main())
