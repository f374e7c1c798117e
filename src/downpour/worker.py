import asyncio
import logging

import aiohttp

from .models import Outcome
from .utils import now

logger = logging.getLogger(__name__)


async def fetch_once(session: aiohttp.ClientSession, url: str) -> Outcome:
    """Issue one timed GET against ``url`` and turn whatever happens into an Outcome.

    The clock stops as soon as the response head arrives; the body is then
    drained so the connection goes back to the pool. Transport failures are
    never raised to the caller.
    """
    start = now()
    try:
        async with session.get(url) as resp:
            latency = now() - start
            content = await resp.read()
            logger.debug(
                f"Fetched {url}: status={resp.status}, size={len(content)} bytes, "
                f"latency={latency:.3f}s"
            )
            return Outcome(duration=latency, status_code=resp.status)
    except aiohttp.ClientConnectorError as e:
        logger.warning(f"Connection error for {url}: {e}")
        return Outcome.from_exception(e, now() - start)
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout for {url}")
        return Outcome.from_exception(e, now() - start)
    except (aiohttp.ClientError, ValueError) as e:
        logger.warning(f"Request to {url} failed: {e}")
        return Outcome.from_exception(e, now() - start)
    except Exception as e:
        logger.error(f"Unexpected error fetching {url}: {e}")
        return Outcome.from_exception(e, now() - start)
