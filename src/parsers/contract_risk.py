"""Smart-contract risk: on-chain authorities blended with the Rugcheck signal.

Internal score starts at 100:
    -40 per critical, -20 per high, -10 per medium vulnerability
    -30 if mint authority is active, -15 if freeze authority is active
When a Rugcheck report is available:
    final = 0.7 * internal + 0.3 * rugcheck_safety
Clamped to [0, 100].
"""

from src.models.snapshot import ContractRisk, SecurityIssue
from src.parsers.rugcheck.models import RugcheckReport

INTERNAL_WEIGHT = 0.7
EXTERNAL_WEIGHT = 0.3

PENALTY_CRITICAL = 40
PENALTY_HIGH = 20
PENALTY_MEDIUM = 10
PENALTY_MINT_AUTHORITY = 30
PENALTY_FREEZE_AUTHORITY = 15

# Rugcheck reports authorities too; those come from RPC and are not counted twice.
_AUTHORITY_RISK_MARKERS = ("mint authority", "freeze authority")


def _rugcheck_severity(name: str, level: str) -> str | None:
    level = level.lower()
    if level == "critical" or "critical" in name.lower():
        return "critical"
    if level == "danger":
        return "high"
    if level == "warn":
        return "medium"
    return None


def _is_authority_risk(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in _AUTHORITY_RISK_MARKERS)


def authority_risk_level(mint_active: bool, freeze_active: bool, known: bool = True) -> str:
    if not known:
        return "unknown"
    if mint_active and freeze_active:
        return "critical"
    if mint_active:
        return "high"
    if freeze_active:
        return "medium"
    return "low"


def overall_risk_level(critical: int, high: int, medium: int, score: int) -> str:
    if critical > 0 or score < 30:
        return "critical"
    if high > 0 or score < 50:
        return "high"
    if medium > 0 or score < 70:
        return "medium"
    return "low"


def _detect_audit_flags(report: RugcheckReport) -> tuple[bool, bool]:
    info_texts = [
        f"{r.name} {r.description}".lower() for r in report.risks if r.level == "info"
    ]
    full_audit = any("audit" in text for text in info_texts)
    bug_bounty = any("bounty" in text for text in info_texts)
    return full_audit, bug_bounty


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def build_risk_summary(
    critical: int, high: int, medium: int,
    mint_active: bool, freeze_active: bool, score: int,
    authorities_known: bool = True,
) -> str:
    issues = []
    if critical:
        issues.append(_plural(critical, "critical vulnerability", "critical vulnerabilities"))
    if high:
        issues.append(_plural(high, "high-risk issue", "high-risk issues"))
    if medium:
        issues.append(_plural(medium, "medium-risk issue", "medium-risk issues"))

    authorities = []
    if mint_active:
        authorities.append("mint authority")
    if freeze_active:
        authorities.append("freeze authority")

    summary = f"Security score: {score}/100. "
    summary += f"Found {', '.join(issues)}. " if issues else "No major vulnerabilities detected. "
    if not authorities_known:
        summary += "Authority status unknown - mint and freeze authorities could not be checked."
    elif authorities:
        summary += f"Active {' and '.join(authorities)} detected - higher centralization risk."
    else:
        summary += "No active authorities - good decentralization."
    return summary


def analyze_contract_risk(
    mint_authority: str | None,
    freeze_authority: str | None,
    report: RugcheckReport | None = None,
    *,
    authorities_known: bool = True,
) -> ContractRisk:
    """Score the contract. ``authorities_known=False`` means the mint account was never read."""
    mint_active = bool(mint_authority)
    freeze_active = bool(freeze_authority)

    issues: list[SecurityIssue] = []
    if mint_active:
        issues.append(SecurityIssue(
            type="mint_authority",
            severity="critical",
            description="Mint authority is active - token supply can be inflated",
        ))
    if freeze_active:
        issues.append(SecurityIssue(
            type="freeze_authority",
            severity="high",
            description="Freeze authority is active - accounts can be frozen",
        ))

    if report is not None:
        if report.rugged:
            issues.append(SecurityIssue(
                type="rugcheck_rugged", severity="critical", description="Token flagged as rugged",
            ))
        for risk in report.risks:
            severity = _rugcheck_severity(risk.name, risk.level)
            if severity is None or _is_authority_risk(risk.name):
                continue
            issues.append(SecurityIssue(
                type="rugcheck_issue",
                severity=severity,
                description=risk.description or risk.name,
            ))

    critical = sum(1 for i in issues if i.severity == "critical")
    high = sum(1 for i in issues if i.severity == "high")
    medium = sum(1 for i in issues if i.severity == "medium")

    internal = (
        100
        - PENALTY_CRITICAL * critical
        - PENALTY_HIGH * high
        - PENALTY_MEDIUM * medium
        - (PENALTY_MINT_AUTHORITY if mint_active else 0)
        - (PENALTY_FREEZE_AUTHORITY if freeze_active else 0)
    )

    if report is not None:
        blended = INTERNAL_WEIGHT * internal + EXTERNAL_WEIGHT * report.safety_score
        full_audit, bug_bounty = _detect_audit_flags(report)
    else:
        blended = float(internal)
        full_audit = bug_bounty = None

    score = max(0, min(100, round(blended)))

    return ContractRisk(
        critical_vulnerabilities=critical,
        high_vulnerabilities=high,
        medium_vulnerabilities=medium,
        mint_authority_active=mint_active,
        freeze_authority_active=freeze_active,
        authority_risk_level=authority_risk_level(mint_active, freeze_active, authorities_known),
        overall_risk_level=overall_risk_level(critical, high, medium, score),
        full_audit=full_audit,
        bug_bounty=bug_bounty,
        audit_available=report is not None,
        audit_score=float(report.safety_score) if report is not None else None,
        security_score=score,
        security_issues=tuple(issues),
        risk_summary=build_risk_summary(
            critical, high, medium, mint_active, freeze_active, score, authorities_known,
        ),
    )
