"""Tests for the rule-based token summary."""

from src.models.snapshot import Confidence, ContractRisk, FacetProvenance, Provenance
from src.vetting.summary import generate_summary, positives_for, warnings_for


def test_established_token(make_snapshot):
    summary = generate_summary(make_snapshot(), "Stellar", 23)

    assert summary.startswith("This is an established project with a proven track record.")
    assert "excellent liquidity with short-term LP commitment" in summary
    assert "Classified as Stellar tier" in summary
    assert "low concern (23/100)" in summary
    assert summary.endswith("✅ Liquidity pool has been burned, providing additional security.")


def test_warning_takes_precedence(make_snapshot):
    snapshot = make_snapshot(holder_amounts=(60, 10, 10, 10, 10))
    summary = generate_summary(snapshot, "Bloom", 55)

    assert "moderate caution needed (55/100)" in summary
    assert summary.endswith("⚠️ High concentration risk with large holder dominance.")
    assert "✅" not in summary


def test_no_notes(make_snapshot):
    snapshot = make_snapshot(
        age_days=25, lp_usd=50_000, lp_burned=False, lock_months=12, freeze_authority="FreezeAuth",
    )
    assert warnings_for(snapshot) == []
    assert positives_for(snapshot) == []

    summary = generate_summary(snapshot, "Sprout", 75)
    assert summary == (
        "This is a relatively new project in early development. "
        "It features strong liquidity with long-term LP commitment. "
        "Classified as Sprout tier, showing growth and development beyond initial stages. "
        "Risk assessment suggests high caution required (75/100)."
    )


def test_audit_positive(make_snapshot):
    snapshot = make_snapshot(lp_burned=False, contract_risk=ContractRisk(full_audit=True))
    assert positives_for(snapshot)[:2] == [
        "No mint or freeze authorities, enhancing decentralization.",
        "Smart contract has undergone a full security audit.",
    ]


def test_unread_authorities_give_no_decentralization_positive(make_snapshot):
    facets = {
        name: FacetProvenance(source="test", confidence=Confidence.VERIFIED)
        for name in ("metadata", "age", "holders", "liquidity", "lp_lock", "audit")
    }
    facets["authorities"] = FacetProvenance(source="none", confidence=Confidence.UNKNOWN, failed_sources=("rpc",))
    snapshot = make_snapshot(provenance=Provenance(**facets))

    assert "No mint or freeze authorities, enhancing decentralization." not in positives_for(snapshot)


def test_unknown_tier_sentence(make_snapshot):
    assert "Classification pending further analysis." in generate_summary(make_snapshot(), "Moon", 10)
