"""Rugcheck.xyz API client, a free third-party audit signal for Solana tokens."""

from typing import Any

import httpx

from src.parsers.http_retry import get_json
from src.parsers.rate_limiter import RateLimiter
from src.parsers.rugcheck.models import RugcheckReport, RugcheckRisk

BASE_URL = "https://api.rugcheck.xyz/v1"
RETRY_DELAYS = [2.0, 5.0]


class RugcheckClient:
    """Summary reports from Rugcheck.xyz (free, no API key)."""

    def __init__(self, max_rps: float = 2.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(timeout=15.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token_report(self, mint: str) -> RugcheckReport | None:
        """None when the token is unknown to Rugcheck or the API is down."""
        data = await get_json(
            self._client,
            f"{BASE_URL}/tokens/{mint}/report/summary",
            tag="RUGCHECK",
            rate_limiter=self._rate_limiter,
            retry_delays=RETRY_DELAYS,
        )
        if not isinstance(data, dict):
            return None
        return _parse_report(data, mint)


def _parse_risk(raw: dict[str, Any]) -> RugcheckRisk:
    return RugcheckRisk(
        name=raw.get("name") or "unknown",
        description=raw.get("description") or "",
        level=(raw.get("level") or "info").lower(),
        score=int(raw.get("score") or 0),
        value=str(raw.get("value") or ""),
    )


def _parse_report(data: dict[str, Any], mint: str) -> RugcheckReport:
    raw_risks = data.get("risks")
    risks = [_parse_risk(r) for r in raw_risks if isinstance(r, dict)] if isinstance(raw_risks, list) else []

    score = int(data.get("score") or 0)
    normalised = data.get("score_normalised")
    if normalised is None:
        normalised = min(score, 100)

    meta = data.get("tokenMeta")
    if not isinstance(meta, dict):
        meta = {}
    return RugcheckReport(
        mint=mint,
        score=score,
        score_normalised=max(0, min(100, int(normalised))),
        rugged=bool(data.get("rugged", False)),
        risks=risks,
        token_name=meta.get("name") or "",
        token_symbol=meta.get("symbol") or "",
    )
