import logging
import sys

import pytest

from downpour import cli
from downpour.models import Report


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "url,requests,concurrency,timeout",
    [
        ("", 10, 1, 30.0),
        ("localhost:8080", 10, 1, 30.0),
        ("ftp://example.com/", 10, 1, 30.0),
        ("http://example.com/", 0, 1, 30.0),
        ("http://example.com/", -5, 1, 30.0),
        ("http://example.com/", 10, 0, 30.0),
        ("http://example.com/", 10, 11, 30.0),
        ("http://example.com/", 10, 5, 0.0),
    ],
)
def test_validate_config_rejects(url, requests, concurrency, timeout):
    with pytest.raises(cli.ConfigurationError):
        cli.validate_config(url, requests, concurrency, timeout)


def test_validate_config_accepts_full_fan_out():
    cli.validate_config("http://example.com/", 10, 10)


class _NeverDispatch:
    def __init__(self, *args, **kwargs):
        raise AssertionError("load test must not start on invalid configuration")


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--url", "http://example.com/", "--concurrency", "0"],
        ["--url", "http://example.com/", "--requests", "5", "--concurrency", "6"],
        ["--url", "http://example.com/", "--requests", "0"],
        ["--url", "http://example.com/", "--histogram", "--histogram-bins", "0"],
    ],
)
def test_main_rejects_before_dispatch(monkeypatch, capsys, argv):
    monkeypatch.setattr(cli, "LoadTester", _NeverDispatch)
    assert cli.main(argv) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_prints_report_and_exits_zero_despite_failures(monkeypatch, capsys):
    captured = {}

    class FakeTester:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        async def run(self):
            return Report(
                total_requests=4,
                total_duration=1.0,
                status_code_counts={200: 1},
                successful_requests=1,
                failed_requests=3,
                average_duration=0.1,
                min_duration=0.1,
                max_duration=0.1,
                error_counts={"ClientConnectorError": 3},
                durations=(0.1,),
            )

    monkeypatch.setattr(cli, "LoadTester", FakeTester)
    code = cli.main(
        [
            "--url", "http://example.com/",
            "--requests", "4",
            "--concurrency", "2",
            "--no-progress",
            "--histogram",
        ]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert captured["total_requests"] == 4
    assert captured["concurrency"] == 2
    assert captured["use_progress_bar"] is False
    assert "Starting load test for http://example.com/" in out
    assert "Failed requests: 3" in out
    assert "Histogram: single value" in out
