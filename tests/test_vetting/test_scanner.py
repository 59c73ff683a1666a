"""Tests for TokenScanner: single scans, batch validation and batch reports."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.vetting.exceptions import (
    BatchTooLarge,
    EmptyBatch,
    InvalidAddressFormat,
    InvalidBatchAddresses,
)
from src.vetting.scanner import NO_TIER_MESSAGE, Outcome, TokenScanner

BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
JUP = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"
WIF = "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm"
RAY = "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R"
WSOL = "So11111111111111111111111111111111111111112"

SNAPSHOT_ARGS = {
    BONK: {},                                                   # Stellar, 23
    WSOL: {"symbol": "WSOL", "lp_burned": False},               # Stellar, 37
    USDC: {"symbol": "USDC", "age_days": 25, "lp_usd": 20_000, "active_wallets": 20},  # Sprout, 29
    JUP: {"symbol": "JUP", "age_days": 5},                      # too young
    RAY: {"symbol": "RAY", "age_days": 60, "lp_usd": 1_000},    # no tier
}


@pytest.fixture
def aggregator(make_snapshot) -> MagicMock:
    async def aggregate(address: str):
        if address == WIF:
            raise RuntimeError("upstream exploded")
        return make_snapshot(address, **SNAPSHOT_ARGS[address]), False

    aggregator = MagicMock()
    aggregator.aggregate = AsyncMock(side_effect=aggregate)
    aggregator.close = AsyncMock()
    return aggregator


@pytest.fixture
def scanner(aggregator, classifier) -> TokenScanner:
    return TokenScanner(aggregator, classifier)


class TestSingleScan:
    @pytest.mark.asyncio
    async def test_eligible(self, scanner):
        result = await scanner.scan(f"  {BONK} ")

        assert result.eligible is True
        assert result.outcome is Outcome.ELIGIBLE
        assert result.tier == "Stellar"
        assert result.risk_score == 23
        assert result.risk_level == "Low Risk"

        payload = result.to_payload()
        assert payload["eligible"] is True
        assert payload["summary"]
        assert payload["metadata"]["contract_address"] == BONK
        assert payload["metadata"]["lp_amount_usd"] == 500_000
        assert payload["metadata"]["age_display"] == "1y"
        assert payload["metadata"]["provenance"]["age"]["confidence"] == "verified"

    @pytest.mark.asyncio
    async def test_too_young(self, scanner):
        result = await scanner.scan(JUP)

        assert result.eligible is False
        assert result.outcome is Outcome.TOO_YOUNG
        payload = result.to_payload()
        assert payload["error"] == (
            "Token is too young for listing. Minimum age requirement is 14 days. "
            "This token is 5 days old."
        )
        assert payload["tier"] is None
        assert payload["risk_score"] is None
        assert payload["metadata"]["minimum_age_required"] == 14
        assert payload["metadata"]["age_display"] == "5 days"

    @pytest.mark.asyncio
    async def test_no_tier(self, scanner):
        result = await scanner.scan(RAY)

        assert result.outcome is Outcome.NO_TIER_MATCH
        payload = result.to_payload()
        assert payload["error"] == NO_TIER_MESSAGE
        assert payload["risk_level"] is None
        assert set(payload["failed_criteria"]) == {"Seed", "Sprout", "Bloom", "Stellar"}
        assert payload["failed_criteria"]["Stellar"]

    @pytest.mark.asyncio
    async def test_invalid_address(self, scanner, aggregator):
        with pytest.raises(InvalidAddressFormat) as exc:
            await scanner.scan("not-an-address")
        assert exc.value.to_dict()["error"] == "Invalid Solana contract address format"
        aggregator.aggregate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_aggregator_failure_propagates(self, scanner):
        with pytest.raises(RuntimeError):
            await scanner.scan(WIF)

    def test_classification_is_pure(self, scanner, make_snapshot):
        snapshot = make_snapshot()
        first = scanner.classify_snapshot(snapshot)
        second = scanner.classify_snapshot(snapshot)
        assert (first.tier, first.risk_score, first.summary) == (second.tier, second.risk_score, second.summary)

    def test_tiers_evaluated_once_per_classification(self, scanner, classifier, make_snapshot):
        with patch.object(classifier, "evaluate", wraps=classifier.evaluate) as evaluate:
            result = scanner.classify_snapshot(make_snapshot())
        assert evaluate.call_count == 1
        assert result.tier == "Stellar"
        assert [e.tier for e in result.evaluations] == ["Seed", "Sprout", "Bloom", "Stellar"]

    @pytest.mark.asyncio
    async def test_close(self, scanner, aggregator):
        await scanner.close()
        aggregator.close.assert_awaited_once()


class TestCollaborators:
    @pytest.mark.asyncio
    async def test_store_and_notifier_called(self, aggregator, classifier):
        store, notifier = MagicMock(), MagicMock()
        store.save = AsyncMock()
        notifier.notify_eligible = AsyncMock()
        scanner = TokenScanner(aggregator, classifier, store=store, notifier=notifier)

        await scanner.scan(BONK)
        await scanner.scan(JUP)

        assert store.save.await_count == 2
        notifier.notify_eligible.assert_awaited_once()
        assert notifier.notify_eligible.await_args.args[0] == BONK

    @pytest.mark.asyncio
    async def test_failures_do_not_change_result(self, aggregator, classifier):
        store, notifier = MagicMock(), MagicMock()
        store.save = AsyncMock(side_effect=RuntimeError("db down"))
        notifier.notify_eligible = AsyncMock(side_effect=RuntimeError("webhook down"))
        scanner = TokenScanner(aggregator, classifier, store=store, notifier=notifier)

        result = await scanner.scan(BONK)

        assert result.eligible is True
        assert result.tier == "Stellar"


class TestBatchValidation:
    @pytest.mark.asyncio
    async def test_too_large(self, scanner, aggregator):
        with pytest.raises(BatchTooLarge) as exc:
            await scanner.scan_batch([BONK] * 21)
        assert exc.value.message == "Maximum 20 contract addresses allowed per batch request"
        aggregator.aggregate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty(self, scanner):
        with pytest.raises(EmptyBatch):
            await scanner.scan_batch([])

    @pytest.mark.asyncio
    async def test_one_malformed_rejects_all(self, scanner, aggregator):
        with pytest.raises(InvalidBatchAddresses) as exc:
            await scanner.scan_batch([BONK, "0OIl-bad"])

        assert exc.value.indices == [1]
        body = exc.value.to_dict()
        assert body["error"] == "Invalid contract address format(s) found"
        assert body["invalid_addresses"] == [{"address": "0OIl-bad", "index": 1}]
        assert body["valid_addresses"] == 1
        aggregator.aggregate.assert_not_awaited()


class TestBatchReport:
    @pytest.mark.asyncio
    async def test_mixed_batch(self, scanner):
        report = await scanner.scan_batch([BONK, USDC, JUP, WIF, RAY, WSOL])

        summary = report["batch_summary"]
        assert summary["total_requested"] == 6
        assert summary["total_scanned"] == 6
        assert summary["successful_scans"] == 5
        assert summary["failed_scans"] == 1
        assert summary["eligible_tokens"] == 3
        assert summary["ineligible_tokens"] == 2

        assert list(report["tokens_by_tier"]) == ["Stellar", "Sprout"]
        stellar = report["tokens_by_tier"]["Stellar"]
        assert [r["contractAddress"] for r in stellar] == [WSOL, BONK]
        assert [r["risk_score"] for r in stellar] == [37, 23]
        assert report["tokens_by_tier"]["Sprout"][0]["risk_score"] == 29

        stats = report["statistics"]
        assert stats["outcomes"] == {
            "eligible": 3, "too_young": 1, "no_tier_match": 1, "error": 1,
        }
        assert stats["tier_distribution"] == {"Stellar": 2, "Sprout": 1}
        assert stats["average_risk_score"] == 30
        assert stats["total_liquidity"] == 1_020_000

    @pytest.mark.asyncio
    async def test_error_entry_is_isolated(self, scanner):
        report = await scanner.scan_batch([WIF, BONK])

        by_address = {r["contractAddress"]: r for r in report["all_results"]}
        assert by_address[WIF] == {
            "contractAddress": WIF,
            "success": False,
            "outcome": "error",
            "eligible": False,
            "error": "Scan failed",
        }
        assert by_address[BONK]["eligible"] is True
        assert [r["contractAddress"] for r in report["all_results"]] == [WIF, BONK]

    @pytest.mark.asyncio
    async def test_no_eligible(self, scanner):
        report = await scanner.scan_batch([JUP])
        assert report["tokens_by_tier"] == {}
        assert report["statistics"]["average_risk_score"] == 0
        assert report["statistics"]["total_liquidity"] == 0
