"""Tests for Jupiter token registry client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.parsers.jupiter.client import JupiterClient

BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _resp(status: int, payload: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


@pytest.mark.asyncio
async def test_get_token_listed() -> None:
    client = JupiterClient(max_rps=100.0)
    client._client = AsyncMock()
    client._client.get = AsyncMock(return_value=_resp(200, {
        "address": BONK,
        "name": "Bonk",
        "symbol": "Bonk",
        "decimals": 5,
        "logoURI": "https://arweave.net/bonk.png",
        "tags": ["verified", "strict", "community"],
        "daily_volume": 12345.6,
    }))

    token = await client.get_token(BONK)

    assert token is not None
    assert token.symbol == "Bonk"
    assert token.decimals == 5
    assert token.logo_uri == "https://arweave.net/bonk.png"
    assert token.is_strict is True
    assert client._client.get.call_args.args[0].endswith(f"/{BONK}")


@pytest.mark.asyncio
async def test_get_token_not_listed() -> None:
    client = JupiterClient(max_rps=100.0)
    client._client = AsyncMock()
    client._client.get = AsyncMock(return_value=_resp(404))

    assert await client.get_token(BONK) is None


@pytest.mark.asyncio
async def test_payload_without_symbol_is_ignored() -> None:
    client = JupiterClient(max_rps=100.0)
    client._client = AsyncMock()
    client._client.get = AsyncMock(return_value=_resp(200, {"address": BONK}))

    assert await client.get_token(BONK) is None


@pytest.mark.asyncio
async def test_retries_after_rate_limit() -> None:
    client = JupiterClient(max_rps=100.0)
    client._client = AsyncMock()
    client._client.get = AsyncMock(side_effect=[
        _resp(429),
        _resp(200, {"name": "Bonk", "symbol": "Bonk", "decimals": 5}),
    ])

    with patch("src.parsers.http_retry.asyncio.sleep", new=AsyncMock()):
        token = await client.get_token(BONK)

    assert token is not None
    assert token.address == BONK
    assert token.is_strict is False
