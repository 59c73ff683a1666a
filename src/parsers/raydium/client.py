"""Raydium API v3 client for the on-chain pool index, looked up by mint."""

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from loguru import logger

from src.parsers.http_retry import get_json
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api-v3.raydium.io"
RETRY_DELAYS = [1.0, 3.0]
POOL_PAGE_SIZE = 20


class RaydiumClient:
    """Async HTTP client for Raydium API v3 (free, no key)."""

    def __init__(self, max_rps: float = 5.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(timeout=10.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_pools_by_mint(self, mint: str) -> list[RaydiumPoolInfo] | None:
        """Pools that have ``mint`` on either side. None if the API failed."""
        url = f"{BASE_URL}/pools/info/mint"
        params = {
            "mint1": mint,
            "poolType": "all",
            "poolSortField": "liquidity",
            "sortType": "desc",
            "pageSize": str(POOL_PAGE_SIZE),
            "page": "1",
        }

        data = await get_json(
            self._client, url, tag="RAYDIUM", rate_limiter=self._rate_limiter,
            retry_delays=RETRY_DELAYS, params=params,
        )
        if not isinstance(data, dict):
            return None
        if not data.get("success", True):
            logger.debug(f"[RAYDIUM] API error for {mint[:12]}: {data.get('msg', '')}")
            return None
        return _parse_pools(data)


def select_largest_pool(pools: list[RaydiumPoolInfo], mint: str) -> RaydiumPoolInfo | None:
    """Largest-TVL pool whose base or quote mint is ``mint``."""
    matching = [p for p in pools if p.involves(mint)]
    if not matching:
        return None
    return max(matching, key=lambda p: p.tvl)


def _decimal(value: object) -> Decimal:
    try:
        return Decimal(str(value or 0))
    except InvalidOperation:
        return Decimal(0)


def _mint_address(value: object) -> str:
    if isinstance(value, dict):
        return value.get("address", "")
    return str(value or "")


def _parse_pools(data: dict[str, Any]) -> list[RaydiumPoolInfo]:
    """Pool list from ``{"data": {"data": [...]}}``; malformed entries are skipped."""
    page = data.get("data")
    raw_pools = page.get("data") if isinstance(page, dict) else None
    if not isinstance(raw_pools, list):
        return []
    pools: list[RaydiumPoolInfo] = []

    for pool in raw_pools:
        if not isinstance(pool, dict):
            continue
        try:
            burn_pct = float(pool.get("burnPercent") or 0)
        except (ValueError, TypeError):
            burn_pct = 0.0

        day = pool.get("day") or {}
        pools.append(RaydiumPoolInfo(
            pool_id=pool.get("id", ""),
            pool_type=pool.get("type", ""),
            base_mint=_mint_address(pool.get("mintA")),
            quote_mint=_mint_address(pool.get("mintB")),
            lp_mint=_mint_address(pool.get("lpMint")),
            lp_supply=_decimal(pool.get("lpAmount")),
            tvl=_decimal(pool.get("tvl")),
            volume_24h=_decimal(day.get("volume") if isinstance(day, dict) else 0),
            price=_decimal(pool.get("price")),
            burn_percent=burn_pct,
        ))

    return pools
