"""Solana JSON-RPC client (Helius endpoint or any mainnet RPC)."""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.parsers.helius.models import EarliestTransaction, HeliusMintInfo, HeliusSignature
from src.parsers.rate_limiter import RateLimiter

MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]
SIGNATURE_PAGE_LIMIT = 1000
SIGNATURE_MAX_PAGES = 5


class HeliusClient:
    """Async JSON-RPC client for mint accounts and signature history."""

    def __init__(self, rpc_url: str, max_rps: float = 10.0, timeout: float = 15.0) -> None:
        self._rpc_url = rpc_url
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def _rpc(self, method: str, params: list[Any]) -> Any | None:
        """POST one JSON-RPC call. Returns ``result`` or None on any failure."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.post(self._rpc_url, json=payload)

                if resp.status_code == 429 or resp.status_code >= 500:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[HELIUS] {method} HTTP {resp.status_code}, retry in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                if resp.status_code != 200:
                    logger.debug(f"[HELIUS] {method} HTTP {resp.status_code}")
                    return None

                data = resp.json()
                if not isinstance(data, dict):
                    logger.debug(f"[HELIUS] {method} unexpected body")
                    return None
                if "error" in data:
                    logger.debug(f"[HELIUS] {method} RPC error: {data['error']}")
                    return None
                return data.get("result")

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    await asyncio.sleep(RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)])
                else:
                    logger.warning(f"[HELIUS] {method} failed after {MAX_RETRIES + 1} attempts: {e}")
                    return None

        logger.warning(f"[HELIUS] {method} still rate limited after {MAX_RETRIES + 1} attempts")
        return None

    async def get_mint_info(self, mint: str) -> HeliusMintInfo | None:
        """Fetch authorities, supply and decimals of an SPL mint."""
        result = await self._rpc("getAccountInfo", [mint, {"encoding": "jsonParsed"}])
        if not isinstance(result, dict):
            return None
        return _parse_mint_account(result.get("value"), mint)

    async def get_signatures_for_address(
        self, address: str, *, limit: int = SIGNATURE_PAGE_LIMIT, before: str = ""
    ) -> list[HeliusSignature] | None:
        """One newest-first page of signatures. None means the call failed."""
        opts: dict[str, Any] = {"limit": min(limit, SIGNATURE_PAGE_LIMIT)}
        if before:
            opts["before"] = before

        result = await self._rpc("getSignaturesForAddress", [address, opts])
        if not isinstance(result, list):
            return None
        return [
            HeliusSignature(
                signature=sig.get("signature", ""),
                slot=sig.get("slot", 0),
                timestamp=sig.get("blockTime"),
                err=sig.get("err"),
            )
            for sig in result
            if isinstance(sig, dict)
        ]

    async def find_earliest_transaction(
        self,
        address: str,
        *,
        page_limit: int = SIGNATURE_PAGE_LIMIT,
        max_pages: int = SIGNATURE_MAX_PAGES,
    ) -> EarliestTransaction | None:
        """Walk signature pages backwards and return the oldest one seen.

        Pages come newest-first; a page shorter than ``page_limit`` is the
        last one. Stops after ``max_pages`` even if history continues.
        """
        earliest: HeliusSignature | None = None
        before = ""
        pages = 0
        exhausted = False

        while pages < max_pages:
            page = await self.get_signatures_for_address(address, limit=page_limit, before=before)
            if page is None:
                if pages == 0:
                    return None
                break
            pages += 1

            for sig in page:
                if sig.timestamp is None:
                    continue
                if earliest is None or sig.timestamp < (earliest.timestamp or 0):
                    earliest = sig

            if len(page) < page_limit:
                exhausted = True
                break
            before = page[-1].signature

        if earliest is None or earliest.timestamp is None:
            return None

        logger.debug(
            f"[HELIUS] Earliest tx for {address[:12]} after {pages} page(s), "
            f"exhausted={exhausted}"
        )
        return EarliestTransaction(
            signature=earliest.signature,
            block_time=earliest.timestamp,
            pages_fetched=pages,
            exhausted=exhausted,
        )


def _parse_mint_account(value: dict | None, mint: str) -> HeliusMintInfo | None:
    """Map a jsonParsed account value into HeliusMintInfo. None if not a mint."""
    if not isinstance(value, dict):
        return None
    data = value.get("data")
    if not isinstance(data, dict):
        return None
    parsed = data.get("parsed")
    if not isinstance(parsed, dict) or parsed.get("type") not in (None, "mint"):
        return None
    info = parsed.get("info")
    if not isinstance(info, dict) or "decimals" not in info:
        return None

    try:
        supply = int(info.get("supply") or 0)
    except (TypeError, ValueError):
        supply = 0

    return HeliusMintInfo(
        mint=mint,
        mint_authority=info.get("mintAuthority"),
        freeze_authority=info.get("freezeAuthority"),
        supply=supply,
        decimals=int(info.get("decimals") or 0),
        is_initialized=bool(info.get("isInitialized", True)),
        owner_program=value.get("owner", ""),
    )
