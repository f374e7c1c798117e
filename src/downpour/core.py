import asyncio
import logging
from collections.abc import Awaitable, Callable

import aiohttp
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)

from .models import Outcome, Report, MetricsCallback
from .metrics import ReportBuilder
from .utils import now, normalize_host
from .worker import fetch_once

logger = logging.getLogger(__name__)

Fetcher = Callable[[aiohttp.ClientSession, str], Awaitable[Outcome]]


class LoadTester:
    def __init__(
        self,
        url: str,
        total_requests: int,
        concurrency: int,
        request_timeout_s: float = 30.0,
        fetcher: Fetcher = fetch_once,
        metrics_callback: MetricsCallback | None = None,
        use_progress_bar: bool = True,
    ) -> None:
        if total_requests <= 0 or concurrency <= 0:
            raise ValueError(
                f"total_requests and concurrency must be positive, "
                f"got {total_requests} and {concurrency}"
            )
        self.url = url
        self.total_requests = total_requests
        self.concurrency = concurrency
        self.request_timeout_s = request_timeout_s
        self.fetcher = fetcher
        self.metrics_callback = metrics_callback
        self.use_progress_bar = use_progress_bar

        # Admission accounting, only touched from the event loop thread
        self.in_flight = 0
        self.peak_in_flight = 0

        logger.info(
            f"Initialized load test against {normalize_host(url)}: "
            f"requests={total_requests}, concurrency={concurrency}, "
            f"timeout={request_timeout_s}s"
        )

    # ────────────────────────────────
    # Request Unit
    # ────────────────────────────────

    async def _run_unit(
        self,
        unit_id: int,
        session: aiohttp.ClientSession,
        gate: asyncio.Semaphore,
        results: asyncio.Queue,
    ) -> None:
        async with gate:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            start = now()
            try:
                outcome = await self.fetcher(session, self.url)
            except Exception as e:
                logger.error(f"[R{unit_id}] Fetcher raised for {self.url}: {e}")
                outcome = Outcome.from_exception(e, now() - start)
            finally:
                self.in_flight -= 1
        logger.debug(f"[R{unit_id}] Completed: {outcome}")
        results.put_nowait(outcome)

    # ────────────────────────────────
    # Main Runner
    # ────────────────────────────────

    async def run(self) -> Report:
        logger.info(f"Starting load test for {self.url}")

        self.in_flight = 0
        self.peak_in_flight = 0
        builder = ReportBuilder(self.total_requests)
        gate = asyncio.Semaphore(self.concurrency)
        results: asyncio.Queue = asyncio.Queue()

        progress = None
        task_id = None
        if self.use_progress_bar:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                transient=True,
            )
            progress.start()
            task_id = progress.add_task("[cyan]Requesting...", total=self.total_requests)

        # The semaphore is the only limit on open connections
        connector = aiohttp.TCPConnector(limit=0)
        timeout = aiohttp.ClientTimeout(total=self.request_timeout_s)
        try:
            async with aiohttp.ClientSession(
                connector=connector, timeout=timeout
            ) as session:
                t0 = now()
                units = [
                    asyncio.create_task(self._run_unit(i, session, gate, results))
                    for i in range(self.total_requests)
                ]
                try:
                    for _ in range(self.total_requests):
                        builder.add(await results.get())
                        if progress is not None and task_id is not None:
                            progress.advance(task_id)
                    total_duration = now() - t0
                finally:
                    for u in units:
                        if not u.done():
                            u.cancel()
                    await asyncio.gather(*units, return_exceptions=True)
        finally:
            if progress is not None:
                progress.stop()

        report = builder.finalize(total_duration)

        if self.metrics_callback:
            self.metrics_callback(report.to_dict())

        logger.info(
            f"Run completed: {report.successful_requests} ok (200), "
            f"{report.failed_requests} failed, peak in-flight {self.peak_in_flight}, "
            f"{report.requests_per_second:.2f} req/s"
        )
        return report
