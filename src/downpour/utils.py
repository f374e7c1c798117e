import time
from urllib.parse import urlparse

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


# ────────────────────────────────
# URL Helpers
# ────────────────────────────────


def normalize_host(url: str) -> str:
    netloc = urlparse(url).netloc
    if not netloc:
        return "default"
    return netloc.lower()


def is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
