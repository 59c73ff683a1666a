"""Rule-based plain-language summary for an eligible token.

Four sentences (age, liquidity, tier, risk) followed by the first warning
if any apply, otherwise the first positive note.
"""

from src.models.snapshot import Confidence, TokenSnapshot
from src.vetting.risk_scoring import risk_level

TIER_SENTENCES = {
    "Seed": "Classified as Seed tier, suitable for early-stage investors comfortable with higher risk.",
    "Sprout": "Classified as Sprout tier, showing growth and development beyond initial stages.",
    "Bloom": "Classified as Bloom tier, demonstrating maturity and strong fundamentals.",
    "Stellar": "Classified as Stellar tier, representing the highest quality projects with excellent credentials.",
}


def _age_sentence(age_days: float) -> str:
    if age_days < 14:
        return "This is a very new project that doesn't meet minimum age requirements."
    if age_days < 30:
        return "This is a relatively new project in early development."
    if age_days < 90:
        return "This project has been active for several weeks and shows growth potential."
    return "This is an established project with a proven track record."


def _liquidity_sentence(lp_usd: float, lock_months: int) -> str:
    if lp_usd < 10_000:
        liquidity = "minimal liquidity"
    elif lp_usd < 50_000:
        liquidity = "moderate liquidity"
    elif lp_usd < 150_000:
        liquidity = "strong liquidity"
    else:
        liquidity = "excellent liquidity"

    if lock_months < 6:
        lock = "short-term LP commitment"
    elif lock_months < 12:
        lock = "medium-term LP lock"
    elif lock_months < 24:
        lock = "long-term LP commitment"
    else:
        lock = "extended LP lock period"

    return f"It features {liquidity} with {lock}."


def _risk_sentence(score: int) -> str:
    level = risk_level(score)
    if level == "Low Risk":
        return f"Risk assessment shows low concern ({score}/100) with solid fundamentals."
    if level == "Medium Risk":
        return f"Risk assessment indicates moderate caution needed ({score}/100)."
    return f"Risk assessment suggests high caution required ({score}/100)."


def warnings_for(snapshot: TokenSnapshot) -> list[str]:
    warnings: list[str] = []
    if snapshot.top_holders and snapshot.top_holders[0].percentage > 15:
        warnings.append("High concentration risk with large holder dominance.")
    if snapshot.suspicious_activity.sell_off_percent > 20:
        warnings.append("Recent suspicious selling activity detected.")
    if snapshot.contract_risk.critical_vulnerabilities > 0:
        warnings.append("Critical smart contract vulnerabilities found.")
    if snapshot.mint_authority and snapshot.freeze_authority:
        warnings.append("Both mint and freeze authorities are active.")
    if snapshot.liquidity.lp_amount_usd < 10_000:
        warnings.append("Limited liquidity may affect trading.")
    return warnings


def positives_for(snapshot: TokenSnapshot) -> list[str]:
    positives: list[str] = []
    if snapshot.liquidity.lp_burned:
        positives.append("Liquidity pool has been burned, providing additional security.")
    authorities_read = snapshot.provenance.authorities.confidence != Confidence.UNKNOWN
    if authorities_read and not snapshot.mint_authority and not snapshot.freeze_authority:
        positives.append("No mint or freeze authorities, enhancing decentralization.")
    if snapshot.contract_risk.full_audit:
        positives.append("Smart contract has undergone a full security audit.")
    if snapshot.contract_risk.bug_bounty:
        positives.append("Active bug bounty program demonstrates commitment to security.")
    if snapshot.liquidity.lp_amount_usd > 100_000:
        positives.append("Strong liquidity pool supports stable trading.")
    return positives


def generate_summary(snapshot: TokenSnapshot, tier_name: str, risk_score: int) -> str:
    parts = [
        _age_sentence(snapshot.project_age_days),
        _liquidity_sentence(snapshot.liquidity.lp_amount_usd, snapshot.liquidity.lp_lock_months),
        TIER_SENTENCES.get(tier_name, "Classification pending further analysis."),
        _risk_sentence(risk_score),
    ]
    summary = " ".join(parts)

    warnings = warnings_for(snapshot)
    if warnings:
        return f"{summary} ⚠️ {warnings[0]}"
    positives = positives_for(snapshot)
    if positives:
        return f"{summary} ✅ {positives[0]}"
    return summary
