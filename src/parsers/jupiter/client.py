"""Jupiter token API client: name, symbol and logo of listed tokens."""

import httpx

from src.parsers.http_retry import get_json
from src.parsers.jupiter.models import JupiterToken
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://lite-api.jup.ag/tokens/v1/token"
RETRY_DELAYS = [1.0, 3.0]


class JupiterClient:
    """Async HTTP client for Jupiter token lookups (free tier: 1 RPS)."""

    def __init__(self, base_url: str = BASE_URL, api_key: str = "", max_rps: float = 1.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._rate_limiter = RateLimiter(max_rps)
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self._client = httpx.AsyncClient(timeout=10.0, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token(self, mint: str) -> JupiterToken | None:
        """Fetch token registry entry. None if the token is not listed."""
        data = await get_json(
            self._client,
            f"{self._base_url}/{mint}",
            tag="JUPITER",
            rate_limiter=self._rate_limiter,
            retry_delays=RETRY_DELAYS,
        )
        if not isinstance(data, dict) or not data.get("symbol"):
            return None
        data.setdefault("address", mint)
        return JupiterToken.model_validate(data)
