"""Scan orchestration: address -> snapshot -> age gate -> tier -> score -> summary.

Single scans raise only request-level ``VettingError``s (bad address).
Ineligibility (too young, no tier) is a structured result, not an exception.
Batch scans validate every address up front, then fan out with a bounded
semaphore; one address failing becomes an isolated ``error`` entry.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Protocol

from loguru import logger

from src.models.snapshot import TokenSnapshot
from src.utils.address import is_valid_solana_address
from src.utils.age_format import format_token_age, format_token_age_short
from src.vetting.age_gate import AgeGateResult, check_age
from src.vetting.collaborators import (
    EligibilityNotifier,
    ScanResultStore,
    notify_eligible,
    store_result,
)
from src.vetting.exceptions import (
    BatchTooLarge,
    EmptyBatch,
    InvalidAddressFormat,
    InvalidBatchAddresses,
)
from src.vetting.risk_scoring import calculate_risk_score, risk_level
from src.vetting.summary import generate_summary
from src.vetting.tier_classifier import TierClassifier, TierEvaluation

NO_TIER_MESSAGE = "Token does not meet minimum criteria for any tier"


class SnapshotSource(Protocol):
    async def aggregate(self, address: str) -> tuple[TokenSnapshot, bool]: ...


class IneligibleReason(StrEnum):
    TOO_YOUNG = "too_young"
    NO_TIER_MATCH = "no_tier_match"


class Outcome(StrEnum):
    ELIGIBLE = "eligible"
    TOO_YOUNG = "too_young"
    NO_TIER_MATCH = "no_tier_match"
    ERROR = "error"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snapshot_metadata(snapshot: TokenSnapshot, scan_timestamp: str) -> dict[str, Any]:
    """Flat JSON projection of a snapshot for API consumers."""
    liq = snapshot.liquidity
    return {
        "contract_address": snapshot.address,
        "token_symbol": snapshot.symbol,
        "token_name": snapshot.name,
        "decimals": snapshot.decimals,
        "total_supply": snapshot.total_supply,
        "verified": snapshot.verified,
        "mint_authority": snapshot.mint_authority,
        "freeze_authority": snapshot.freeze_authority,
        "project_age_days": snapshot.project_age_days,
        "age_display": format_token_age(snapshot.project_age_days),
        "age_display_short": format_token_age_short(snapshot.project_age_days),
        "age_confidence": snapshot.age_confidence.value,
        "creation_date": snapshot.creation_date.isoformat() if snapshot.creation_date else None,
        "creation_transaction": snapshot.creation_transaction,
        "lp_amount_usd": liq.lp_amount_usd,
        "lp_lock_months": liq.lp_lock_months,
        "lp_burned": liq.lp_burned,
        "lp_locked": liq.lp_locked,
        "lock_contract": liq.lock_contract,
        "lock_analysis": liq.lock_analysis,
        "largest_lp_holder": liq.largest_lp_holder,
        "pair_address": liq.pair_address,
        "token_price": liq.token_price,
        "volume_24h": liq.volume_24h,
        "market_cap": liq.market_cap,
        "pool_count": liq.pool_count,
        "holder_count": snapshot.holder_count,
        "active_wallets": snapshot.active_wallets,
        "top_holders": [h.model_dump() for h in snapshot.top_holders],
        "distribution_metrics": snapshot.distribution.model_dump(),
        "whale_analysis": snapshot.whales.model_dump(),
        "suspicious_activity_details": snapshot.suspicious_activity.model_dump(),
        "smart_contract_security": snapshot.contract_risk.model_dump(mode="json"),
        "provenance": snapshot.provenance.model_dump(mode="json"),
        "degraded": snapshot.degraded,
        "scan_timestamp": scan_timestamp,
    }


@dataclass(frozen=True)
class ClassificationResult:
    address: str
    eligible: bool
    snapshot: TokenSnapshot
    scan_timestamp: str
    tier: str | None = None
    risk_score: int | None = None
    risk_level: str | None = None
    reason: IneligibleReason | None = None
    summary: str | None = None
    age_gate: AgeGateResult | None = None
    evaluations: tuple[TierEvaluation, ...] = field(default=())

    @property
    def outcome(self) -> Outcome:
        if self.eligible:
            return Outcome.ELIGIBLE
        if self.reason is IneligibleReason.TOO_YOUNG:
            return Outcome.TOO_YOUNG
        return Outcome.NO_TIER_MATCH

    @property
    def error_message(self) -> str | None:
        if self.reason is IneligibleReason.TOO_YOUNG and self.age_gate is not None:
            return (
                f"Token is too young for listing. Minimum age requirement is "
                f"{self.age_gate.minimum_age_required:g} days. "
                f"This token is {self.age_gate.age_display} old."
            )
        if self.reason is IneligibleReason.NO_TIER_MATCH:
            return NO_TIER_MESSAGE
        return None

    def to_payload(self) -> dict[str, Any]:
        if self.reason is IneligibleReason.TOO_YOUNG:
            gate = self.age_gate
            return {
                "error": self.error_message,
                "eligible": False,
                "tier": None,
                "risk_score": None,
                "metadata": {
                    "token_symbol": self.snapshot.symbol,
                    "token_name": self.snapshot.name,
                    "project_age_days": self.snapshot.project_age_days,
                    "age_display": gate.age_display if gate else format_token_age(self.snapshot.project_age_days),
                    "age_confidence": self.snapshot.age_confidence.value,
                    "minimum_age_required": gate.minimum_age_required if gate else None,
                    "provenance": self.snapshot.provenance.model_dump(mode="json"),
                    "degraded": self.snapshot.degraded,
                },
            }
        if self.reason is IneligibleReason.NO_TIER_MATCH:
            return {
                "error": NO_TIER_MESSAGE,
                "eligible": False,
                "tier": None,
                "risk_score": None,
                "risk_level": None,
                "failed_criteria": {e.tier: list(e.failures) for e in self.evaluations},
                "metadata": snapshot_metadata(self.snapshot, self.scan_timestamp),
            }
        return {
            "tier": self.tier,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level,
            "eligible": True,
            "summary": self.summary,
            "metadata": snapshot_metadata(self.snapshot, self.scan_timestamp),
        }


class TokenScanner:
    def __init__(
        self,
        aggregator: SnapshotSource,
        classifier: TierClassifier,
        *,
        store: ScanResultStore | None = None,
        notifier: EligibilityNotifier | None = None,
        batch_max_size: int = 20,
        batch_concurrency: int = 20,
    ) -> None:
        self._aggregator = aggregator
        self._classifier = classifier
        self._store = store
        self._notifier = notifier
        self._batch_max_size = batch_max_size
        self._batch_concurrency = max(1, batch_concurrency)

    @property
    def classifier(self) -> TierClassifier:
        return self._classifier

    async def close(self) -> None:
        close = getattr(self._aggregator, "close", None)
        if close is not None:
            await close()

    # ------------------------------------------------------------------
    # Single scan
    # ------------------------------------------------------------------

    async def scan(self, address: str) -> ClassificationResult:
        address = (address or "").strip()
        if not is_valid_solana_address(address):
            raise InvalidAddressFormat(address)
        return await self._scan_valid(address)

    async def _scan_valid(self, address: str) -> ClassificationResult:
        snapshot, _degraded = await self._aggregator.aggregate(address)
        result = self.classify_snapshot(snapshot)

        payload = result.to_payload()
        await store_result(self._store, address, payload)
        if result.eligible:
            await notify_eligible(self._notifier, address, payload)

        logger.info(
            f"[SCAN] {snapshot.symbol} ({address[:12]}): {result.outcome.value}"
            + (f" tier={result.tier} risk={result.risk_score}" if result.eligible else "")
        )
        return result

    def classify_snapshot(self, snapshot: TokenSnapshot) -> ClassificationResult:
        """Pure decision stage; no I/O."""
        config = self._classifier.config
        timestamp = _now_iso()

        gate = check_age(snapshot, config.min_project_age_days)
        if not gate.passed:
            return ClassificationResult(
                address=snapshot.address,
                eligible=False,
                snapshot=snapshot,
                scan_timestamp=timestamp,
                reason=IneligibleReason.TOO_YOUNG,
                age_gate=gate,
            )

        evaluations = tuple(self._classifier.evaluate(snapshot))
        tier = self._classifier.matched_tier(evaluations)
        if tier is None:
            return ClassificationResult(
                address=snapshot.address,
                eligible=False,
                snapshot=snapshot,
                scan_timestamp=timestamp,
                reason=IneligibleReason.NO_TIER_MATCH,
                age_gate=gate,
                evaluations=evaluations,
            )

        score = calculate_risk_score(snapshot, tier)
        return ClassificationResult(
            address=snapshot.address,
            eligible=True,
            snapshot=snapshot,
            scan_timestamp=timestamp,
            tier=tier.name,
            risk_score=score,
            risk_level=risk_level(score),
            summary=generate_summary(snapshot, tier.name, score),
            age_gate=gate,
            evaluations=evaluations,
        )

    # ------------------------------------------------------------------
    # Batch scan
    # ------------------------------------------------------------------

    def validate_batch(self, addresses: list[str] | None) -> list[str]:
        """Reject the whole batch before any upstream call."""
        if not addresses:
            raise EmptyBatch()
        if len(addresses) > self._batch_max_size:
            raise BatchTooLarge(len(addresses), self._batch_max_size)

        invalid: list[tuple[int, str]] = []
        valid: list[str] = []
        for index, address in enumerate(addresses):
            cleaned = address.strip() if isinstance(address, str) else ""
            if is_valid_solana_address(cleaned):
                valid.append(cleaned)
            else:
                invalid.append((index, address))
        if invalid:
            raise InvalidBatchAddresses(invalid, len(valid))
        return valid

    async def scan_batch(self, addresses: list[str] | None) -> dict[str, Any]:
        valid = self.validate_batch(addresses)
        semaphore = asyncio.Semaphore(self._batch_concurrency)

        async def run_one(address: str) -> dict[str, Any]:
            async with semaphore:
                try:
                    result = await self._scan_valid(address)
                except Exception as e:
                    logger.warning(f"[SCAN] Batch entry {address[:12]} failed: {e}")
                    return {
                        "contractAddress": address,
                        "success": False,
                        "outcome": Outcome.ERROR.value,
                        "eligible": False,
                        "error": "Scan failed",
                    }
            return {
                "contractAddress": address,
                "success": True,
                "outcome": result.outcome.value,
                **result.to_payload(),
            }

        results = await asyncio.gather(*(run_one(a) for a in valid))
        logger.info(f"[SCAN] Batch of {len(valid)} complete")
        return self._batch_report(len(addresses or []), len(valid), list(results))

    def _batch_report(self, requested: int, scanned: int, results: list[dict[str, Any]]) -> dict[str, Any]:
        successful = [r for r in results if r["success"]]
        eligible = [r for r in successful if r["eligible"]]

        # strictest tier first, each tier by descending score
        tokens_by_tier: dict[str, list[dict[str, Any]]] = {}
        for name in reversed(self._classifier.config.names):
            members = [r for r in eligible if r["tier"] == name]
            if members:
                tokens_by_tier[name] = sorted(members, key=lambda r: r["risk_score"], reverse=True)

        outcomes = {o.value: 0 for o in Outcome}
        for r in results:
            outcomes[r["outcome"]] += 1

        average = _round_half_up(sum(r["risk_score"] for r in eligible) / len(eligible)) if eligible else 0

        return {
            "batch_summary": {
                "total_requested": requested,
                "total_scanned": scanned,
                "successful_scans": len(successful),
                "failed_scans": len(results) - len(successful),
                "eligible_tokens": len(eligible),
                "ineligible_tokens": len(successful) - len(eligible),
                "scan_timestamp": _now_iso(),
            },
            "tokens_by_tier": tokens_by_tier,
            "all_results": results,
            "statistics": {
                "outcomes": outcomes,
                "tier_distribution": {name: len(members) for name, members in tokens_by_tier.items()},
                "average_risk_score": average,
                "total_liquidity": sum(r["metadata"]["lp_amount_usd"] or 0 for r in eligible),
            },
        }
