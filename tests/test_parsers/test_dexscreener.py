"""Tests for DexScreener client and pair models."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import DexScreenerPair

TOKEN = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _pair(chain: str = "solana", liquidity: float = 250_000.0, **extra: object) -> dict:
    data = {
        "chainId": chain,
        "dexId": "raydium",
        "pairAddress": f"Pair{chain}{liquidity:.0f}",
        "baseToken": {"address": TOKEN, "name": "Bonk", "symbol": "Bonk"},
        "quoteToken": {"address": "So11111111111111111111111111111111111111112", "symbol": "SOL"},
        "priceUsd": "0.00002",
        "volume": {"h24": 1_000_000},
        "liquidity": {"usd": liquidity},
        "fdv": 1_800_000_000,
        "pairCreatedAt": 1_672_531_200_000,
    }
    data.update(extra)
    return data


def _resp(status: int, payload: object = None, headers: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.headers = headers or {}
    return resp


class TestPairModel:
    def test_numeric_properties(self) -> None:
        pair = DexScreenerPair.model_validate(_pair(marketCap=1_500_000_000))
        assert pair.liquidity_usd == 250_000.0
        assert pair.volume_24h == 1_000_000.0
        assert pair.market_cap == 1_500_000_000.0
        assert pair.price_usd == pytest.approx(0.00002)

    def test_market_cap_falls_back_to_fdv(self) -> None:
        pair = DexScreenerPair.model_validate(_pair())
        assert pair.market_cap == 1_800_000_000.0

    def test_missing_sections(self) -> None:
        pair = DexScreenerPair.model_validate({"pairAddress": "x", "priceUsd": "n/a"})
        assert pair.liquidity_usd == 0.0
        assert pair.volume_24h == 0.0
        assert pair.market_cap == 0.0
        assert pair.price_usd is None


class TestDexScreenerClient:
    @pytest.mark.asyncio
    async def test_filters_to_solana_pairs(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=_resp(200, {
            "pairs": [_pair(), _pair(chain="ethereum"), _pair(liquidity=10_000.0)],
        }))

        pairs = await client.get_token_pairs(TOKEN)

        assert pairs is not None
        assert len(pairs) == 2
        assert all(p.chainId == "solana" for p in pairs)
        assert client._client.get.call_args.args[0] == f"/latest/dex/tokens/{TOKEN}"

    @pytest.mark.asyncio
    async def test_no_pairs_is_empty_list(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=_resp(200, {"pairs": None}))

        assert await client.get_token_pairs(TOKEN) == []

    @pytest.mark.asyncio
    async def test_malformed_body_is_none(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=[_resp(200, "oops"), _resp(200, {"pairs": {"a": 1}})])

        assert await client.get_token_pairs(TOKEN) is None
        assert await client.get_token_pairs(TOKEN) is None

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_to_none(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=_resp(503))

        with patch("src.parsers.dexscreener.client.asyncio.sleep", new=AsyncMock()):
            assert await client.get_token_pairs(TOKEN) is None
        assert client._client.get.call_count == 3

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=[
            _resp(429, headers={"Retry-After": "7"}),
            _resp(200, {"pairs": [_pair()]}),
        ])

        sleep = AsyncMock()
        with patch("src.parsers.dexscreener.client.asyncio.sleep", new=sleep):
            pairs = await client.get_token_pairs(TOKEN)

        assert pairs is not None and len(pairs) == 1
        sleep.assert_any_await(7.0)

    @pytest.mark.asyncio
    async def test_connect_error_then_success(self) -> None:
        client = DexScreenerClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=[
            httpx.ConnectError("refused"),
            _resp(200, [_pair()]),
        ])

        with patch("src.parsers.dexscreener.client.asyncio.sleep", new=AsyncMock()):
            pairs = await client.get_token_pairs(TOKEN)

        assert pairs is not None and len(pairs) == 1
