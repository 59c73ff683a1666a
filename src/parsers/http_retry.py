"""GET-with-retry loop shared by the keyless JSON providers.

Jupiter, Raydium and Rugcheck all answer plain JSON over GET and signal
"not found" with a non-200 status, so they share one retry policy:
429/5xx and connect/timeout errors are retried once per entry in
``retry_delays``; everything else ends the request with None.
"""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.parsers.rate_limiter import RateLimiter


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    tag: str,
    rate_limiter: RateLimiter,
    retry_delays: list[float],
    params: dict[str, Any] | None = None,
) -> Any | None:
    """Decoded JSON body, or None when the upstream cannot answer."""
    attempts = len(retry_delays) + 1

    for attempt in range(attempts):
        await rate_limiter.acquire()
        try:
            resp = await client.get(url, params=params)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            if attempt < attempts - 1:
                delay = retry_delays[attempt]
                logger.debug(f"[{tag}] {type(e).__name__}, retry in {delay}s")
                await asyncio.sleep(delay)
                continue
            logger.warning(f"[{tag}] Failed after {attempts} attempts: {e}")
            return None

        if resp.status_code == 429 or resp.status_code >= 500:
            if attempt < attempts - 1:
                delay = retry_delays[attempt]
                logger.debug(f"[{tag}] HTTP {resp.status_code}, retry in {delay}s")
                await asyncio.sleep(delay)
                continue
            break
        if resp.status_code != 200:
            logger.debug(f"[{tag}] HTTP {resp.status_code} for {url}")
            return None

        try:
            return resp.json()
        except ValueError:
            logger.debug(f"[{tag}] Non-JSON body from {url}")
            return None

    logger.warning(f"[{tag}] Gave up on {url} after {attempts} attempts")
    return None
