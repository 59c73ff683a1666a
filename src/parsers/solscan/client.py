"""Solscan Pro API v2 client: holder lists, token meta and account history.

Used as the holder indexer, as a secondary earliest-transaction source for
token age, and to read LP-mint holders for lock/burn detection.
"""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.parsers.exceptions import UpstreamUnavailable
from src.parsers.rate_limiter import RateLimiter
from src.parsers.solscan.models import (
    SolscanHolderPage,
    SolscanTokenMeta,
    SolscanTransaction,
)

BASE_URL = "https://pro-api.solscan.io/v2.0"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]
# Solscan caps page_size at 40 for these endpoints
MAX_PAGE_SIZE = 40


class SolscanApiError(UpstreamUnavailable):
    def __init__(self, message: str) -> None:
        super().__init__("solscan", message)


class SolscanClient:
    """Async client for Solscan Pro API (requires API key)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 5.0,
    ) -> None:
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        headers = {"Accept": "application/json"}
        if api_key:
            headers["token"] = api_key
        self._client = httpx.AsyncClient(base_url=base_url, timeout=15.0, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str, params: dict[str, Any]) -> Any:
        """Rate-limited GET with retry for transient errors. Returns ``data``."""
        last_exc: Exception | None = None

        for attempt in range(MAX_RETRIES + 1):
            await self._rate_limiter.acquire()
            try:
                resp = await self._client.get(path, params=params)

                if resp.status_code == 429 or resp.status_code >= 500:
                    if attempt < MAX_RETRIES:
                        delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                        logger.debug(f"[SOLSCAN] HTTP {resp.status_code}, retry {attempt + 1} in {delay}s: {path}")
                        await asyncio.sleep(delay)
                        continue
                    raise SolscanApiError(f"HTTP {resp.status_code} after retries: {path}")

                if resp.status_code in (401, 403):
                    raise SolscanApiError(f"Unauthorized ({resp.status_code})")
                if resp.status_code != 200:
                    raise SolscanApiError(f"HTTP {resp.status_code}: {path}")

                body = resp.json()
                if not isinstance(body, dict):
                    raise SolscanApiError(f"Unexpected response body: {path}")
                if not body.get("success", True):
                    raise SolscanApiError(f"API error: {body.get('errors') or body.get('message', 'unknown')}")
                return body.get("data")

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                last_exc = e
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[SOLSCAN] {type(e).__name__}, retry {attempt + 1} in {delay}s: {path}")
                    await asyncio.sleep(delay)
                    continue
                raise SolscanApiError(f"Request failed after {MAX_RETRIES + 1} attempts: {path}: {e}") from e

        raise SolscanApiError(f"Request failed after retries: {path}") from last_exc

    async def get_token_meta(self, mint: str) -> SolscanTokenMeta | None:
        data = await self._request("/token/meta", {"address": mint})
        if not isinstance(data, dict):
            return None
        data.setdefault("address", mint)
        return SolscanTokenMeta.model_validate(data)

    async def get_token_holders(self, mint: str, *, page_size: int = 10) -> SolscanHolderPage:
        """Top holders of a token (largest first), plus the total count."""
        data = await self._request(
            "/token/holders",
            {"address": mint, "page": 1, "page_size": min(page_size, MAX_PAGE_SIZE)},
        )
        if not isinstance(data, dict):
            return SolscanHolderPage()
        return SolscanHolderPage.model_validate(data)

    async def get_account_transactions(
        self, address: str, *, limit: int = MAX_PAGE_SIZE
    ) -> list[SolscanTransaction]:
        """Most recent transactions touching an account, newest first."""
        data = await self._request(
            "/account/transactions", {"address": address, "limit": min(limit, MAX_PAGE_SIZE)}
        )
        if not isinstance(data, list):
            return []
        return [SolscanTransaction.model_validate(tx) for tx in data if isinstance(tx, dict) and tx.get("tx_hash")]
