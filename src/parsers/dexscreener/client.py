import asyncio

import httpx
from loguru import logger

from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api.dexscreener.com"
CHAIN_ID = "solana"
MAX_RETRIES = 3
RETRY_DELAYS = [1.0, 2.0, 4.0]


class DexScreenerClient:
    """Async REST client for DexScreener public API (no auth required)."""

    def __init__(self, rate_limiter: RateLimiter | None = None, max_rps: float = 1.0) -> None:
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=10.0,
            headers={"Accept": "application/json"},
        )
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)

    async def _get_json(self, path: str) -> dict | list | None:
        """GET with retry on 429/5xx/timeout. None when the API cannot answer."""
        for attempt in range(MAX_RETRIES):
            await self._rate_limiter.acquire()
            try:
                response = await self._client.get(path)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES - 1:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[DEXSCREENER] {type(e).__name__}, retrying in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                logger.warning(f"[DEXSCREENER] Failed after {MAX_RETRIES} attempts: {e}")
                return None

            if response.status_code == 429 or response.status_code >= 500:
                delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                retry_after = response.headers.get("Retry-After")
                if retry_after:
                    try:
                        delay = max(float(retry_after), delay)
                    except ValueError:
                        pass
                logger.debug(f"[DEXSCREENER] HTTP {response.status_code}, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue
            if response.status_code != 200:
                logger.debug(f"[DEXSCREENER] HTTP {response.status_code} for {path}")
                return None
            return response.json()

        logger.warning(f"[DEXSCREENER] Gave up on {path} after {MAX_RETRIES} attempts")
        return None

    async def get_token_pairs(self, token_address: str) -> list[DexScreenerPair] | None:
        """All Solana pairs trading the token.

        Empty list means the token has no pairs; None means the request failed.
        """
        data = await self._get_json(f"/latest/dex/tokens/{token_address}")
        if data is None:
            return None
        if isinstance(data, list):
            raw = data
        elif isinstance(data, dict):
            raw = data.get("pairs") or []
        else:
            return None
        if not isinstance(raw, list):
            return None
        pairs = [DexScreenerPair.model_validate(p) for p in raw if isinstance(p, dict)]
        return [p for p in pairs if not p.chainId or p.chainId == CHAIN_ID]

    async def close(self) -> None:
        await self._client.aclose()
