"""Composite risk score, 0 (safest) to 100 (riskiest).

Weighted average of four sub-risks using the matched tier's weight vector:

    lp_amount       pool size relative to the tier LP minimum
    lp_lock_burn    burned LP, or lock duration relative to the tier minimum
    wallet_activity active wallets, holder concentration, suspicious flags
    smart_contract  vulnerabilities, audit / bounty, live authorities
"""

import math

from src.models.snapshot import TokenSnapshot
from src.vetting.tiers import TierDefinition

LOW_RISK_MAX = 39
MEDIUM_RISK_MAX = 69


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def lp_amount_risk(snapshot: TokenSnapshot, tier: TierDefinition) -> float:
    minimum = tier.criteria.lp_amount_usd.min
    if not minimum:
        return 0
    lp = snapshot.liquidity.lp_amount_usd
    if lp >= minimum * 2:
        return 10
    if lp >= minimum * 1.5:
        return 25
    if lp >= minimum:
        return 50
    return 80


def lock_burn_risk(snapshot: TokenSnapshot, tier: TierDefinition) -> float:
    if snapshot.liquidity.lp_burned:
        return 5
    minimum = tier.criteria.lp_lock_months.min
    if not minimum:
        return 50
    months = snapshot.liquidity.lp_lock_months
    if months >= minimum * 2:
        return 15
    if months >= minimum * 1.5:
        return 30
    if months >= minimum:
        return 50
    return 85


def wallet_activity_risk(snapshot: TokenSnapshot, tier: TierDefinition) -> float:
    criteria = tier.criteria.wallet_activity
    activity = snapshot.suspicious_activity
    score = 50.0

    minimum = criteria.min_active_wallets
    if minimum:
        if snapshot.active_wallets >= minimum * 2:
            score -= 20
        elif snapshot.active_wallets >= minimum:
            score -= 10
        else:
            score += 30

    top = snapshot.top_holders[0].percentage if snapshot.top_holders else 0.0
    if top > 15:
        score += 25
    elif top > 10:
        score += 15
    elif top > 5:
        score += 5

    if activity.sell_off_percent > 20:
        score += 30
    elif activity.sell_off_percent > 10:
        score += 15

    if activity.affected_wallets_percent > 25:
        score += 20
    elif activity.affected_wallets_percent > 15:
        score += 10

    flagged = sum(1 for h in snapshot.top_holders if h.is_suspicious)
    if flagged > 2:
        score += 25
    elif flagged > 0:
        score += 10

    return _clamp(score)


def smart_contract_risk(snapshot: TokenSnapshot) -> float:
    risk = snapshot.contract_risk
    score = 30.0

    if risk.critical_vulnerabilities > 0:
        score += 60
    score += risk.high_vulnerabilities * 20
    score += risk.medium_vulnerabilities * 8

    if risk.full_audit:
        score -= 20
    if risk.bug_bounty:
        score -= 15

    if snapshot.mint_authority:
        score += 15
    if snapshot.freeze_authority:
        score += 10

    return _clamp(score)


def calculate_risk_score(snapshot: TokenSnapshot, tier: TierDefinition) -> int:
    w = tier.weighting
    weighted = (
        lp_amount_risk(snapshot, tier) * w.lp_amount
        + lock_burn_risk(snapshot, tier) * w.lp_lock_burn
        + wallet_activity_risk(snapshot, tier) * w.wallet_activity
        + smart_contract_risk(snapshot) * w.smart_contract
    ) / 100
    return int(_clamp(_round_half_up(weighted)))


def risk_level(score: int) -> str:
    if score <= LOW_RISK_MAX:
        return "Low Risk"
    if score <= MEDIUM_RISK_MAX:
        return "Medium Risk"
    return "High Risk"
