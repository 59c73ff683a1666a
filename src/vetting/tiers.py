"""Tier definitions: one versioned JSON artifact, loaded once, immutable."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, model_validator

_FROZEN = {"frozen": True, "extra": "forbid"}


class Range(BaseModel):
    min: float | None = None
    max: float | None = None

    model_config = _FROZEN

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class FlagIfOver(BaseModel):
    active_wallets: int | None = None
    sell_off_percent: float | None = None
    affected_wallets_percent: float | None = None

    model_config = _FROZEN


class FlagIfSellOff(BaseModel):
    sell_off_percent: float | None = None

    model_config = _FROZEN


class WalletActivityCriteria(BaseModel):
    min_active_wallets: int | None = None
    max_active_wallets: int | None = None
    flag_if_over: FlagIfOver | None = None
    flag_if_sell_off: FlagIfSellOff | None = None
    max_wallet_supply_percent: float | None = None
    # informational: vesting of large holders is not observable on-chain here
    require_vesting_for_large_holders: bool = False

    model_config = _FROZEN


class SmartContractCriteria(BaseModel):
    critical_vulnerabilities: int | None = None
    high_vulnerabilities: int | None = None
    medium_vulnerabilities: int | None = None
    max_medium_vulnerabilities: int | None = None
    full_audit: bool = False
    bug_bounty: bool = False

    model_config = _FROZEN


class TierCriteria(BaseModel):
    project_age_days: Range = Range()
    lp_amount_usd: Range = Range()
    lp_lock_months: Range = Range()
    wallet_activity: WalletActivityCriteria = WalletActivityCriteria()
    smart_contract: SmartContractCriteria = SmartContractCriteria()

    model_config = _FROZEN


class TierWeights(BaseModel):
    lp_amount: float
    lp_lock_burn: float
    wallet_activity: float
    smart_contract: float

    model_config = _FROZEN

    @property
    def total(self) -> float:
        return self.lp_amount + self.lp_lock_burn + self.wallet_activity + self.smart_contract


class TierDefinition(BaseModel):
    name: str
    description: str = ""
    criteria: TierCriteria
    risk_score_target: int
    weighting: TierWeights

    model_config = _FROZEN

    @model_validator(mode="after")
    def _weights_sum_to_100(self) -> TierDefinition:
        if abs(self.weighting.total - 100) > 1e-6:
            raise ValueError(f"tier {self.name}: weights sum to {self.weighting.total}, expected 100")
        return self


class TierConfig(BaseModel):
    """Ordered least to most strict (Seed -> ... -> Stellar)."""

    version: str
    min_project_age_days: float = 14
    tiers: tuple[TierDefinition, ...]

    model_config = _FROZEN

    @model_validator(mode="after")
    def _unique_names(self) -> TierConfig:
        names = [t.name for t in self.tiers]
        if len(names) != len(set(names)):
            raise ValueError("duplicate tier names")
        if not names:
            raise ValueError("at least one tier is required")
        return self

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.tiers)

    def get(self, name: str) -> TierDefinition | None:
        for tier in self.tiers:
            if tier.name == name:
                return tier
        return None


def load_tier_config(path: str | Path) -> TierConfig:
    return TierConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))


@lru_cache(maxsize=4)
def default_tier_config(path: str) -> TierConfig:
    """Process-wide cached load; the returned object is immutable."""
    return load_tier_config(path)
