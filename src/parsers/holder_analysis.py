"""Holder distribution analysis: concentration, whales and suspicious holders.

Pure functions over a fixed holder list. Total supply is the sum of the
fetched holder amounts, never a value reported by the upstream API, so all
percentages are relative to the analyzed slice.
"""

import math
from collections import Counter
from dataclasses import dataclass

from src.models.snapshot import (
    DistributionMetrics,
    HolderEntry,
    SuspiciousActivity,
    WhaleAnalysis,
)

BURN_ADDRESS = "11111111111111111111111111111111"
SYSTEM_ADDRESSES = frozenset({
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",  # SPL Token program
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL",  # Associated Token program
    "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM",  # Pyth oracle
})

WHALE_THRESHOLD_PCT = 5.0
LARGE_HOLDER_PCT = 10.0
SELL_OFF_HOLDER_PCT = 25.0
CONTRACT_HOLDER_PCT = 5.0
REPEATED_CHAR_LIMIT = 15


@dataclass(frozen=True)
class RawHolder:
    """Provider-neutral holder row, before analysis."""

    address: str
    amount: float


@dataclass(frozen=True)
class HolderAnalysis:
    top_holders: tuple[HolderEntry, ...]
    distribution: DistributionMetrics
    whales: WhaleAnalysis
    suspicious_activity: SuspiciousActivity


def is_likely_contract_address(address: str) -> bool:
    """Known program suffixes or a vanity-style repeated character."""
    if address.endswith("DA") or address.endswith("Program"):
        return True
    if not address:
        return False
    return max(Counter(address).values()) > REPEATED_CHAR_LIMIT


def concentration_bucket(top_holder_pct: float) -> str:
    if top_holder_pct > 50:
        return "very_high"
    if top_holder_pct > 25:
        return "high"
    if top_holder_pct > 10:
        return "medium"
    return "low"


def analyze_holders(holders: list[RawHolder]) -> HolderAnalysis:
    """Concentration metrics, whale set and suspicious-activity flags."""
    ordered = sorted(holders, key=lambda h: h.amount, reverse=True)
    total = sum(h.amount for h in ordered)

    if not ordered or total <= 0:
        return HolderAnalysis(
            top_holders=(),
            distribution=DistributionMetrics(analyzed_holders=len(ordered)),
            whales=WhaleAnalysis(),
            suspicious_activity=SuspiciousActivity(),
        )

    pcts = [h.amount / total * 100 for h in ordered]

    entries = tuple(
        HolderEntry(
            rank=i + 1,
            address=h.address,
            amount=h.amount,
            percentage=round(pct, 4),
            is_suspicious=h.address == BURN_ADDRESS or is_likely_contract_address(h.address),
        )
        for i, (h, pct) in enumerate(zip(ordered, pcts))
    )

    top1 = pcts[0]
    top5 = sum(pcts[:5])
    whale_pcts = [p for p in pcts if p > WHALE_THRESHOLD_PCT]

    return HolderAnalysis(
        top_holders=entries,
        distribution=DistributionMetrics(
            top_holder_percentage=top1,
            top_5_holders_percentage=top5,
            analyzed_holders=len(ordered),
            analyzed_supply=total,
        ),
        whales=WhaleAnalysis(
            whale_count=len(whale_pcts),
            whale_concentration=sum(whale_pcts),
            largest_whale_percentage=top1,
        ),
        suspicious_activity=_detect_suspicious(ordered, pcts, concentration_bucket(top1)),
    )


def _detect_suspicious(
    ordered: list[RawHolder], pcts: list[float], concentration_risk: str
) -> SuspiciousActivity:
    suspicious = 0
    large_concentration = 0.0
    sell_off = 0.0

    for holder, pct in zip(ordered, pcts):
        if holder.address in SYSTEM_ADDRESSES or holder.address == BURN_ADDRESS:
            continue

        if pct > LARGE_HOLDER_PCT:
            large_concentration += pct

        flagged = False
        if pct > SELL_OFF_HOLDER_PCT:
            flagged = True
            sell_off += pct
        if pct > CONTRACT_HOLDER_PCT and is_likely_contract_address(holder.address):
            flagged = True
        if flagged:
            suspicious += 1

    return SuspiciousActivity(
        sell_off_percent=min(sell_off, 100.0),
        affected_wallets_percent=suspicious / len(ordered) * 100,
        large_holder_concentration=large_concentration,
        suspicious_holder_count=suspicious,
        concentration_risk=concentration_risk,
    )


def estimate_active_wallets(
    volume_24h: float, market_cap: float, analyzed_holders: int
) -> int:
    """Active-wallet estimate from 24h volume, else from the holder sample.

    Volume buckets assume a typical trade size per market tier. Without
    market data the analyzed top holders are assumed to be ~70% of actives.
    """
    if volume_24h > 0 and market_cap > 0:
        if volume_24h > 1_000_000:
            return math.floor(volume_24h / 50_000) + 50
        if volume_24h > 100_000:
            return math.floor(volume_24h / 20_000) + 30
        if volume_24h > 10_000:
            return math.floor(volume_24h / 5_000) + 15
        return math.floor(volume_24h / 2_000) + 5

    if analyzed_holders <= 0:
        return 0
    return max(math.floor(analyzed_holders / 0.7), analyzed_holders)
