"""Tier classification rules engine.

Every tier is evaluated in order (least to most strict) and the LAST one
whose full criteria set passes is kept, so a token meeting Stellar is
never reported as a lower tier. Pure and deterministic given the config.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from src.models.snapshot import TokenSnapshot
from src.vetting.tiers import (
    SmartContractCriteria,
    TierConfig,
    TierDefinition,
    WalletActivityCriteria,
)


@dataclass(frozen=True)
class TierEvaluation:
    tier: str
    matched: bool
    failures: tuple[str, ...]


def _check_wallet_activity(snapshot: TokenSnapshot, c: WalletActivityCriteria) -> list[str]:
    failures: list[str] = []
    active = snapshot.active_wallets
    activity = snapshot.suspicious_activity

    if c.min_active_wallets is not None and active < c.min_active_wallets:
        failures.append(f"active_wallets {active} < {c.min_active_wallets}")
    if c.max_active_wallets is not None and active > c.max_active_wallets:
        failures.append(f"active_wallets {active} > {c.max_active_wallets}")

    if c.flag_if_over is not None:
        over = c.flag_if_over
        if over.active_wallets is not None and active > over.active_wallets:
            failures.append(f"active_wallets {active} over flag {over.active_wallets}")
        if over.sell_off_percent is not None and activity.sell_off_percent > over.sell_off_percent:
            failures.append(f"sell_off {activity.sell_off_percent:.1f}% over {over.sell_off_percent}%")
        if (
            over.affected_wallets_percent is not None
            and activity.affected_wallets_percent > over.affected_wallets_percent
        ):
            failures.append(
                f"affected_wallets {activity.affected_wallets_percent:.1f}% over {over.affected_wallets_percent}%"
            )

    if c.flag_if_sell_off is not None and c.flag_if_sell_off.sell_off_percent is not None:
        if activity.sell_off_percent > c.flag_if_sell_off.sell_off_percent:
            failures.append(
                f"sell_off {activity.sell_off_percent:.1f}% over {c.flag_if_sell_off.sell_off_percent}%"
            )

    if c.max_wallet_supply_percent is not None:
        top = snapshot.max_holder_percentage
        if top > c.max_wallet_supply_percent:
            failures.append(f"largest holder {top:.1f}% > {c.max_wallet_supply_percent}%")

    return failures


def _check_smart_contract(snapshot: TokenSnapshot, c: SmartContractCriteria) -> list[str]:
    failures: list[str] = []
    risk = snapshot.contract_risk

    if c.critical_vulnerabilities is not None and risk.critical_vulnerabilities > c.critical_vulnerabilities:
        failures.append(f"critical vulnerabilities {risk.critical_vulnerabilities} > {c.critical_vulnerabilities}")
    if c.high_vulnerabilities is not None and risk.high_vulnerabilities > c.high_vulnerabilities:
        failures.append(f"high vulnerabilities {risk.high_vulnerabilities} > {c.high_vulnerabilities}")
    if c.medium_vulnerabilities is not None and risk.medium_vulnerabilities > c.medium_vulnerabilities:
        failures.append(f"medium vulnerabilities {risk.medium_vulnerabilities} > {c.medium_vulnerabilities}")
    if c.max_medium_vulnerabilities is not None and risk.medium_vulnerabilities > c.max_medium_vulnerabilities:
        failures.append(f"medium vulnerabilities {risk.medium_vulnerabilities} > {c.max_medium_vulnerabilities}")

    # only an explicit False fails; None means no audit data
    if c.full_audit and risk.full_audit is False:
        failures.append("full audit required")
    if c.bug_bounty and risk.bug_bounty is False:
        failures.append("bug bounty required")

    return failures


def evaluate_tier(snapshot: TokenSnapshot, tier: TierDefinition) -> TierEvaluation:
    c = tier.criteria
    failures: list[str] = []

    if not c.project_age_days.contains(snapshot.project_age_days):
        failures.append(f"project age {snapshot.project_age_days:.1f}d outside range")

    # LP max is informational; large pools are never penalised
    lp_min = c.lp_amount_usd.min
    if lp_min is not None and snapshot.liquidity.lp_amount_usd < lp_min:
        failures.append(f"LP ${snapshot.liquidity.lp_amount_usd:,.0f} < ${lp_min:,.0f}")

    if not c.lp_lock_months.contains(snapshot.liquidity.lp_lock_months):
        failures.append(f"LP lock {snapshot.liquidity.lp_lock_months}mo outside range")

    failures.extend(_check_wallet_activity(snapshot, c.wallet_activity))
    failures.extend(_check_smart_contract(snapshot, c.smart_contract))

    return TierEvaluation(tier=tier.name, matched=not failures, failures=tuple(failures))


class TierClassifier:
    def __init__(self, config: TierConfig) -> None:
        self._config = config

    @property
    def config(self) -> TierConfig:
        return self._config

    def evaluate(self, snapshot: TokenSnapshot) -> list[TierEvaluation]:
        return [evaluate_tier(snapshot, tier) for tier in self._config.tiers]

    def classify(self, snapshot: TokenSnapshot) -> TierDefinition | None:
        return self.matched_tier(self.evaluate(snapshot))

    def matched_tier(self, evaluations: Sequence[TierEvaluation]) -> TierDefinition | None:
        """Strictest tier among already computed ``evaluations``, in config order."""
        matched: TierDefinition | None = None
        for tier, evaluation in zip(self._config.tiers, evaluations):
            if evaluation.matched:
                matched = tier
        return matched
