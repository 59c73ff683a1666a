"""Token snapshot: the immutable unit of work assembled per vetting request."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, Field


class Confidence(StrEnum):
    """How a facet value was obtained."""

    VERIFIED = "verified"
    ESTIMATED = "estimated"
    UNKNOWN = "unknown"


class FacetProvenance(BaseModel):
    """Which provider (or fallback level) produced a facet."""

    source: str
    confidence: Confidence
    failed_sources: tuple[str, ...] = ()
    detail: str = ""

    model_config = {"frozen": True}


def unknown_provenance(detail: str = "", failed: tuple[str, ...] = ()) -> FacetProvenance:
    return FacetProvenance(
        source="fallback", confidence=Confidence.UNKNOWN, failed_sources=failed, detail=detail,
    )


class Provenance(BaseModel):
    metadata: FacetProvenance
    authorities: FacetProvenance
    age: FacetProvenance
    holders: FacetProvenance
    liquidity: FacetProvenance
    lp_lock: FacetProvenance
    audit: FacetProvenance

    model_config = {"frozen": True}

    # Facets whose loss makes the snapshot degraded (audit is optional).
    CORE_FACETS: ClassVar[tuple[str, ...]] = ("metadata", "authorities", "age", "holders", "liquidity")

    @property
    def degraded(self) -> bool:
        return any(
            getattr(self, name).confidence == Confidence.UNKNOWN for name in self.CORE_FACETS
        )


class HolderEntry(BaseModel):
    rank: int
    address: str
    amount: float
    percentage: float  # of analyzed supply, 0-100
    is_suspicious: bool = False

    model_config = {"frozen": True}


class DistributionMetrics(BaseModel):
    top_holder_percentage: float = 0.0
    top_5_holders_percentage: float = 0.0
    analyzed_holders: int = 0
    analyzed_supply: float = 0.0

    model_config = {"frozen": True}


class WhaleAnalysis(BaseModel):
    whale_count: int = 0
    whale_concentration: float = 0.0
    largest_whale_percentage: float = 0.0

    model_config = {"frozen": True}


class SuspiciousActivity(BaseModel):
    sell_off_percent: float = 0.0
    affected_wallets_percent: float = 0.0
    large_holder_concentration: float = 0.0
    suspicious_holder_count: int = 0
    concentration_risk: str = "low"  # low | medium | high | very_high

    model_config = {"frozen": True}


class LiquidityInfo(BaseModel):
    """LP facet. ``lp_burned`` / ``lp_locked`` are None when unknown."""

    lp_amount_usd: float = 0.0
    lp_lock_months: int = 0
    lp_burned: bool | None = None
    lp_locked: bool | None = None
    lock_contract: str | None = None
    lock_analysis: str = ""
    largest_lp_holder: str | None = None
    pair_address: str | None = None
    dex_id: str | None = None
    token_price: float | None = None
    volume_24h: float = 0.0
    market_cap: float = 0.0
    pool_count: int = 0

    model_config = {"frozen": True}


class SecurityIssue(BaseModel):
    type: str
    severity: str  # critical | high | medium
    description: str

    model_config = {"frozen": True}


class ContractRisk(BaseModel):
    critical_vulnerabilities: int = 0
    high_vulnerabilities: int = 0
    medium_vulnerabilities: int = 0
    mint_authority_active: bool = False
    freeze_authority_active: bool = False
    authority_risk_level: str = "low"
    overall_risk_level: str = "low"
    full_audit: bool | None = None
    bug_bounty: bool | None = None
    audit_available: bool = False
    audit_score: float | None = None
    security_score: int = 100
    security_issues: tuple[SecurityIssue, ...] = ()
    risk_summary: str = ""

    model_config = {"frozen": True}


class TokenSnapshot(BaseModel):
    """Everything the classifier and scorer need about one token."""

    address: str
    symbol: str = "UNKNOWN"
    name: str = "Unknown Token"
    decimals: int = 0
    total_supply: float = 0.0
    verified: bool = False
    logo_uri: str | None = None

    mint_authority: str | None = None
    freeze_authority: str | None = None

    creation_date: datetime | None = None
    creation_transaction: str | None = None
    project_age_days: float = Field(default=0.0, ge=0.0)
    age_confidence: Confidence = Confidence.UNKNOWN

    liquidity: LiquidityInfo = LiquidityInfo()

    top_holders: tuple[HolderEntry, ...] = ()
    holder_count: int = 0
    active_wallets: int = 0
    distribution: DistributionMetrics = DistributionMetrics()
    whales: WhaleAnalysis = WhaleAnalysis()
    suspicious_activity: SuspiciousActivity = SuspiciousActivity()

    contract_risk: ContractRisk = ContractRisk()

    provenance: Provenance

    model_config = {"frozen": True}

    @property
    def degraded(self) -> bool:
        return self.provenance.degraded

    @property
    def max_holder_percentage(self) -> float:
        return max((h.percentage for h in self.top_holders), default=0.0)
