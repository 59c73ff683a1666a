"""Tests for tier config loading and validation."""

import json

import pytest
from pydantic import ValidationError

from src.vetting.tiers import Range, TierConfig, load_tier_config


def test_shipped_config(tier_config: TierConfig) -> None:
    assert tier_config.names == ("Seed", "Sprout", "Bloom", "Stellar")
    assert tier_config.min_project_age_days == 14
    stellar = tier_config.get("Stellar")
    assert stellar is not None
    assert stellar.criteria.smart_contract.full_audit is True
    assert stellar.criteria.wallet_activity.max_wallet_supply_percent == 10
    for tier in tier_config.tiers:
        assert tier.weighting.total == 100


def test_get_unknown_tier(tier_config: TierConfig) -> None:
    assert tier_config.get("Moon") is None


def test_config_is_immutable(tier_config: TierConfig) -> None:
    with pytest.raises(ValidationError):
        tier_config.version = "other"


def test_range_contains() -> None:
    r = Range(min=14, max=21)
    assert r.contains(14)
    assert r.contains(21)
    assert not r.contains(13.9)
    assert not r.contains(21.1)
    assert Range().contains(-5)


def _tier(name: str, weights: tuple[int, int, int, int] = (25, 25, 25, 25)) -> dict:
    return {
        "name": name,
        "criteria": {},
        "risk_score_target": 50,
        "weighting": dict(zip(("lp_amount", "lp_lock_burn", "wallet_activity", "smart_contract"), weights)),
    }


def test_weights_must_sum_to_100(tmp_path) -> None:
    path = tmp_path / "tiers.json"
    path.write_text(json.dumps({"version": "t", "tiers": [_tier("A", (50, 50, 50, 50))]}))
    with pytest.raises(ValidationError):
        load_tier_config(path)


def test_duplicate_names_rejected(tmp_path) -> None:
    path = tmp_path / "tiers.json"
    path.write_text(json.dumps({"version": "t", "tiers": [_tier("A"), _tier("A")]}))
    with pytest.raises(ValidationError):
        load_tier_config(path)


def test_unknown_criteria_rejected(tmp_path) -> None:
    tier = _tier("A")
    tier["criteria"] = {"lp_amount_usd": {"minimum": 5}}
    path = tmp_path / "tiers.json"
    path.write_text(json.dumps({"version": "t", "tiers": [tier]}))
    with pytest.raises(ValidationError):
        load_tier_config(path)
