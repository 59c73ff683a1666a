"""Shared test fixtures."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from src.models.snapshot import (
    Confidence,
    ContractRisk,
    FacetProvenance,
    LiquidityInfo,
    Provenance,
    TokenSnapshot,
)
from src.parsers.contract_risk import analyze_contract_risk
from src.parsers.holder_analysis import RawHolder, analyze_holders
from src.vetting.tier_classifier import TierClassifier
from src.vetting.tiers import TierConfig, load_tier_config

TIERS_PATH = Path(__file__).resolve().parent.parent / "config" / "tiers.json"
NOW = datetime(2025, 6, 1, tzinfo=UTC)
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def verified_provenance(**overrides: FacetProvenance) -> Provenance:
    facets = {
        name: FacetProvenance(source="test", confidence=Confidence.VERIFIED)
        for name in ("metadata", "authorities", "age", "holders", "liquidity", "lp_lock", "audit")
    }
    facets.update(overrides)
    return Provenance(**facets)


def build_snapshot(
    address: str = BONK,
    *,
    symbol: str = "BONK",
    name: str = "Bonk",
    age_days: float = 365.0,
    age_confidence: Confidence = Confidence.VERIFIED,
    lp_usd: float = 500_000.0,
    lp_burned: bool | None = True,
    lp_locked: bool | None = False,
    lock_months: int = 0,
    holder_amounts: tuple[float, ...] = (10.0,) * 10,
    holder_count: int = 100_000,
    active_wallets: int = 40,
    mint_authority: str | None = None,
    freeze_authority: str | None = None,
    contract_risk: ContractRisk | None = None,
    provenance: Provenance | None = None,
) -> TokenSnapshot:
    """Consistent snapshot: holder metrics come from the real analyzer."""
    analysis = analyze_holders([
        RawHolder(address=f"Holder{i:02d}xKXtg2CW87d97TXJSDpbD5jBkh", amount=amount)
        for i, amount in enumerate(holder_amounts)
    ])
    return TokenSnapshot(
        address=address,
        symbol=symbol,
        name=name,
        decimals=5,
        total_supply=88_000_000_000.0,
        verified=True,
        mint_authority=mint_authority,
        freeze_authority=freeze_authority,
        creation_date=NOW - timedelta(days=age_days),
        project_age_days=age_days,
        age_confidence=age_confidence,
        liquidity=LiquidityInfo(
            lp_amount_usd=lp_usd,
            lp_lock_months=lock_months,
            lp_burned=lp_burned,
            lp_locked=lp_locked,
            pair_address="Pair1111111111111111111111111111",
            dex_id="raydium",
            volume_24h=200_000.0,
            market_cap=1_500_000_000.0,
            pool_count=3,
        ),
        top_holders=analysis.top_holders,
        holder_count=holder_count,
        active_wallets=active_wallets,
        distribution=analysis.distribution,
        whales=analysis.whales,
        suspicious_activity=analysis.suspicious_activity,
        contract_risk=contract_risk or analyze_contract_risk(mint_authority, freeze_authority),
        provenance=provenance or verified_provenance(),
    )


@pytest.fixture
def make_snapshot() -> Callable[..., TokenSnapshot]:
    return build_snapshot


@pytest.fixture(scope="session")
def tier_config() -> TierConfig:
    return load_tier_config(TIERS_PATH)


@pytest.fixture
def classifier(tier_config: TierConfig) -> TierClassifier:
    return TierClassifier(tier_config)
