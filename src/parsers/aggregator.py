"""Token data aggregator.

Runs one fallback chain per provenance facet (metadata, authorities, age,
holders, liquidity, LP lock and the optional audit) as concurrent tasks,
each under its own facet deadline, and merges whatever finished into one
immutable TokenSnapshot. The LP lock chain waits on the liquidity result
to find the pool it should inspect.

Never raises on upstream failure: a facet whose whole chain is exhausted,
times out, or is cancelled by the overall request timeout is filled with an
explicit ``unknown``-tagged fallback instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

from src.models.snapshot import (
    Confidence,
    FacetProvenance,
    LiquidityInfo,
    Provenance,
    TokenSnapshot,
    unknown_provenance,
)
from src.parsers import facets
from src.parsers.contract_risk import analyze_contract_risk
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.fallback import ChainResult, Step, run_chain
from src.parsers.helius.client import HeliusClient
from src.parsers.holder_analysis import analyze_holders, estimate_active_wallets
from src.parsers.jupiter.client import JupiterClient
from src.parsers.lp_lock import UNKNOWN_LOCK_STATUS, LPLockStatus, detect_lp_lock
from src.parsers.raydium.client import RaydiumClient, select_largest_pool
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.rugcheck.client import RugcheckClient
from src.parsers.rugcheck.models import RugcheckReport
from src.parsers.solscan.client import MAX_PAGE_SIZE as SOLSCAN_PAGE_SIZE
from src.parsers.solscan.client import SolscanApiError, SolscanClient
from src.parsers.token_age import (
    AgeResolution,
    age_from_days,
    age_from_timestamp,
    estimate_age_days,
    known_token_age,
    now_utc,
)

T = TypeVar("T")

LP_HOLDER_PAGE_SIZE = 20
RAYDIUM_BURNED_PCT = 50.0


@dataclass(frozen=True)
class AggregatorConfig:
    provider_timeout_sec: float = 10.0
    facet_timeout_sec: float = 30.0
    request_timeout_sec: float = 45.0
    signature_page_limit: int = 1000
    signature_max_pages: int = 5
    holder_list_limit: int = 10
    default_age_days: float = 60.0
    allow_synthetic_holders: bool = False


class _RequestMemo:
    """Per-request cache of shared upstream lookups.

    DexScreener pairs feed the identity, age and liquidity chains; Raydium
    pools feed both the liquidity fallback and LP lock detection. Each is
    fetched at most once per request. The shared task is shielded so one
    waiter timing out does not cancel it for the others.
    """

    def __init__(self, address: str, dexscreener: DexScreenerClient, raydium: RaydiumClient) -> None:
        self._address = address
        self._dexscreener = dexscreener
        self._raydium = raydium
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    async def _shared(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
        return await asyncio.shield(task)

    async def dex_pairs(self) -> list[DexScreenerPair] | None:
        return await self._shared("dex", lambda: self._dexscreener.get_token_pairs(self._address))

    async def raydium_pools(self) -> list[RaydiumPoolInfo] | None:
        return await self._shared("raydium", lambda: self._raydium.get_pools_by_mint(self._address))

    async def close(self) -> None:
        pending = [t for t in self._tasks.values() if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        # consume results of finished tasks so failures are not reported as unretrieved
        for task in self._tasks.values():
            if task.done() and not task.cancelled():
                task.exception()


class TokenDataAggregator:
    """Builds a TokenSnapshot from independent upstream providers."""

    def __init__(
        self,
        *,
        rpc: HeliusClient,
        jupiter: JupiterClient,
        dexscreener: DexScreenerClient,
        solscan: SolscanClient,
        raydium: RaydiumClient,
        rugcheck: RugcheckClient | None = None,
        config: AggregatorConfig | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._rpc = rpc
        self._jupiter = jupiter
        self._dexscreener = dexscreener
        self._solscan = solscan
        self._raydium = raydium
        self._rugcheck = rugcheck
        self._config = config or AggregatorConfig()
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Any) -> TokenDataAggregator:
        return cls(
            rpc=HeliusClient(settings.rpc_url, max_rps=settings.helius_max_rps),
            jupiter=JupiterClient(settings.jupiter_token_url, max_rps=settings.jupiter_max_rps),
            dexscreener=DexScreenerClient(max_rps=settings.dexscreener_max_rps),
            solscan=SolscanClient(
                settings.solscan_api_key,
                base_url=settings.solscan_api_url,
                max_rps=settings.solscan_max_rps,
            ),
            raydium=RaydiumClient(max_rps=settings.raydium_max_rps),
            rugcheck=RugcheckClient(max_rps=settings.rugcheck_max_rps) if settings.enable_rugcheck else None,
            config=AggregatorConfig(
                provider_timeout_sec=settings.provider_timeout_sec,
                facet_timeout_sec=settings.facet_timeout_sec,
                request_timeout_sec=settings.request_timeout_sec,
                signature_page_limit=settings.rpc_signature_page_limit,
                signature_max_pages=settings.rpc_signature_max_pages,
                holder_list_limit=settings.holder_list_limit,
                default_age_days=settings.default_age_days,
                allow_synthetic_holders=settings.allow_synthetic_holders,
            ),
        )

    async def close(self) -> None:
        clients = [self._rpc, self._jupiter, self._dexscreener, self._solscan, self._raydium]
        if self._rugcheck is not None:
            clients.append(self._rugcheck)
        await asyncio.gather(*(c.close() for c in clients), return_exceptions=True)

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def aggregate(self, address: str, timeout: float | None = None) -> tuple[TokenSnapshot, bool]:
        """Assemble a snapshot for ``address``. Returns (snapshot, degraded)."""
        cfg = self._config
        timeout = timeout if timeout is not None else cfg.request_timeout_sec
        now = self._clock()
        memo = _RequestMemo(address, self._dexscreener, self._raydium)

        # one task per provenance facet, so a slow chain only costs its own facet
        market = asyncio.create_task(self._bounded(self._market_chain(address, memo)))
        tasks: dict[str, asyncio.Task[Any]] = {
            "metadata": asyncio.create_task(self._bounded(self._identity_chain(address, memo))),
            "authorities": asyncio.create_task(self._bounded(self._authority_chain(address))),
            "age": asyncio.create_task(self._bounded(self._age_chain(address, memo, now))),
            "holders": asyncio.create_task(self._bounded(self._holders_chain(address))),
            "liquidity": market,
            "lp_lock": asyncio.create_task(self._bounded(self._lock_after_market(address, memo, market))),
        }
        if self._rugcheck is not None:
            tasks["audit"] = asyncio.create_task(self._bounded(self._audit_chain(address, self._rugcheck)))

        try:
            _done, pending = await asyncio.wait(tasks.values(), timeout=timeout)
            for task in pending:
                task.cancel()
            if pending:
                logger.warning(
                    f"[AGGREGATOR] {address[:12]}: request timeout after {timeout}s, "
                    f"dropping {', '.join(n for n, t in tasks.items() if t in pending)}"
                )
                await asyncio.gather(*pending, return_exceptions=True)
        finally:
            await memo.close()

        results = {name: self._task_result(name, task) for name, task in tasks.items()}
        snapshot = self._merge(address, now, results)
        if snapshot.degraded:
            logger.info(f"[AGGREGATOR] {address[:12]}: degraded snapshot ({_unknown_facets(snapshot)})")
        return snapshot, snapshot.degraded

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    async def _bounded(self, coro: Awaitable[T]) -> T:
        return await asyncio.wait_for(coro, timeout=self._config.facet_timeout_sec)

    @staticmethod
    def _task_result(name: str, task: asyncio.Task[Any]) -> ChainResult[Any] | None:
        if task.cancelled():
            return None
        exc = task.exception()
        if exc is not None:
            if isinstance(exc, asyncio.TimeoutError):
                logger.warning(f"[AGGREGATOR] {name} facet timed out")
            else:
                logger.opt(exception=exc).error(f"[AGGREGATOR] {name} facet crashed: {exc}")
            return None
        return task.result()

    async def _identity_chain(self, address: str, memo: _RequestMemo) -> ChainResult[facets.IdentityFacet]:
        async def from_jupiter() -> facets.IdentityFacet | None:
            token = await self._jupiter.get_token(address)
            return facets.identity_from_jupiter(token) if token else None

        async def from_dexscreener() -> facets.IdentityFacet | None:
            pairs = await memo.dex_pairs()
            return facets.identity_from_dexscreener(pairs, address) if pairs else None

        async def placeholder() -> facets.IdentityFacet:
            return facets.PLACEHOLDER_IDENTITY

        return await run_chain(
            "metadata",
            [
                Step("jupiter", from_jupiter, Confidence.VERIFIED),
                Step("dexscreener", from_dexscreener, Confidence.ESTIMATED),
                Step("placeholder", placeholder, Confidence.UNKNOWN),
            ],
            timeout=self._config.provider_timeout_sec,
        )

    async def _authority_chain(self, address: str) -> ChainResult[facets.AuthorityFacet]:
        async def from_rpc() -> facets.AuthorityFacet | None:
            info = await self._rpc.get_mint_info(address)
            return facets.authorities_from_rpc(info) if info else None

        return await run_chain(
            "authorities",
            [Step("rpc", from_rpc, Confidence.VERIFIED)],
            timeout=self._config.provider_timeout_sec,
        )

    async def _age_chain(self, address: str, memo: _RequestMemo, now: datetime) -> ChainResult[AgeResolution]:
        cfg = self._config

        async def from_known_table() -> AgeResolution | None:
            return known_token_age(address, now=now)

        async def from_rpc_history() -> AgeResolution | None:
            earliest = await self._rpc.find_earliest_transaction(
                address, page_limit=cfg.signature_page_limit, max_pages=cfg.signature_max_pages,
            )
            if earliest is None:
                return None
            return age_from_timestamp(
                earliest.block_time,
                source="rpc_first_tx",
                # history not exhausted: oldest seen is only a lower bound
                confidence=Confidence.VERIFIED if earliest.exhausted else Confidence.ESTIMATED,
                now=now,
                creation_transaction=earliest.signature,
            )

        async def from_solscan_history() -> AgeResolution | None:
            txs = await self._solscan.get_account_transactions(address)
            stamped = [tx for tx in txs if tx.block_time]
            if not stamped:
                return None
            oldest = min(stamped, key=lambda tx: tx.block_time or 0)
            return age_from_timestamp(
                oldest.block_time or 0,
                source="solscan_first_tx",
                confidence=Confidence.VERIFIED if len(txs) < SOLSCAN_PAGE_SIZE else Confidence.ESTIMATED,
                now=now,
                creation_transaction=oldest.tx_hash,
            )

        async def from_pair_creation() -> AgeResolution | None:
            pairs = await memo.dex_pairs()
            created_ms = facets.earliest_pair_created_ms(pairs or [])
            if created_ms is None:
                return None
            return age_from_timestamp(
                created_ms / 1000, source="dexscreener_pair_created", confidence=Confidence.VERIFIED, now=now,
            )

        async def from_market_heuristic() -> AgeResolution | None:
            pair = facets.best_pair(await memo.dex_pairs() or [])
            if pair is None:
                return None
            days = estimate_age_days(
                address,
                market_cap=pair.market_cap,
                liquidity_usd=pair.liquidity_usd,
                volume_24h=pair.volume_24h,
            )
            return age_from_days(days, source="market_heuristic", confidence=Confidence.ESTIMATED, now=now)

        async def default_age() -> AgeResolution:
            return age_from_days(cfg.default_age_days, source="default", confidence=Confidence.UNKNOWN, now=now)

        return await run_chain(
            "age",
            [
                Step("known_tokens", from_known_table),
                Step("rpc_first_tx", from_rpc_history),
                Step("solscan_first_tx", from_solscan_history),
                Step("dexscreener_pair_created", from_pair_creation),
                Step("market_heuristic", from_market_heuristic),
                Step("default", default_age),
            ],
            timeout=cfg.provider_timeout_sec,
            confidence_of=lambda age: age.confidence,
        )

    async def _holders_chain(self, address: str) -> ChainResult[facets.HoldersFacet]:
        cfg = self._config

        async def from_solscan() -> facets.HoldersFacet | None:
            page = await self._solscan.get_token_holders(address, page_size=cfg.holder_list_limit)
            facet = facets.holders_from_solscan(page)
            if facet is None or page.total:
                return facet
            try:
                meta = await self._solscan.get_token_meta(address)
            except SolscanApiError as e:
                logger.debug(f"[AGGREGATOR] holder count lookup failed: {e}")
                return facet
            if meta is not None and meta.holder:
                return facets.HoldersFacet(holders=facet.holders, holder_count=meta.holder)
            return facet

        async def synthetic() -> facets.HoldersFacet:
            return facets.synthetic_holders(address, cfg.holder_list_limit)

        async def empty() -> facets.HoldersFacet:
            return facets.NO_HOLDERS

        steps: list[Step[facets.HoldersFacet]] = [Step("solscan", from_solscan)]
        if cfg.allow_synthetic_holders:
            steps.append(Step("synthetic", synthetic, Confidence.UNKNOWN))
        steps.append(Step("empty", empty, Confidence.UNKNOWN))
        return await run_chain("holders", steps, timeout=cfg.provider_timeout_sec)

    async def _market_chain(self, address: str, memo: _RequestMemo) -> ChainResult[facets.MarketLiquidity]:
        async def from_dexscreener() -> facets.MarketLiquidity | None:
            pairs = await memo.dex_pairs()
            return facets.liquidity_from_dexscreener(pairs, address) if pairs else None

        async def from_raydium() -> facets.MarketLiquidity | None:
            pools = await memo.raydium_pools()
            if not pools:
                return None
            pool = select_largest_pool(pools, address)
            if pool is None:
                return None
            matching = sum(1 for p in pools if p.involves(address))
            return facets.liquidity_from_raydium(pool, matching)

        async def synthetic() -> facets.MarketLiquidity:
            return facets.NO_LIQUIDITY

        return await run_chain(
            "liquidity",
            [
                Step("dexscreener", from_dexscreener),
                Step("raydium", from_raydium),
                Step("synthetic", synthetic, Confidence.UNKNOWN),
            ],
            timeout=self._config.provider_timeout_sec,
        )

    async def _lock_after_market(
        self, address: str, memo: _RequestMemo, market_task: asyncio.Task[ChainResult[facets.MarketLiquidity]],
    ) -> ChainResult[LPLockStatus]:
        """LP lock chain, keyed to the pair the market chain picked when it has one."""
        # asyncio.wait never cancels market_task, even if this task is cancelled
        await asyncio.wait([market_task])
        market: facets.MarketLiquidity | None = None
        if not market_task.cancelled() and market_task.exception() is None:
            market = market_task.result().value
        return await self._lock_chain(address, memo, market)

    async def _lock_chain(
        self, address: str, memo: _RequestMemo, market: facets.MarketLiquidity | None,
    ) -> ChainResult[LPLockStatus]:
        async def pool_for_market() -> RaydiumPoolInfo | None:
            pools = await memo.raydium_pools()
            if not pools:
                return None
            if market is not None and market.pair_address:
                for pool in pools:
                    if pool.pool_id == market.pair_address:
                        return pool
            return select_largest_pool(pools, address)

        async def from_pumpfun() -> LPLockStatus | None:
            if market is None or not market.pumpfun_burned:
                return None
            return LPLockStatus(
                burned=True,
                locked=False,
                lock_months=0,
                lock_contract="PumpFun Protocol",
                largest_holder=None,
                details="pump.fun token: LP burned by protocol on migration",
            )

        async def from_lp_holders() -> LPLockStatus | None:
            pool = await pool_for_market()
            if pool is None or not pool.lp_mint:
                return None
            page = await self._solscan.get_token_holders(pool.lp_mint, page_size=LP_HOLDER_PAGE_SIZE)
            status = detect_lp_lock(list(facets.raw_holders_from_solscan(page)))
            return status if status.known else None

        async def from_pool_burn_percent() -> LPLockStatus | None:
            pool = await pool_for_market()
            if pool is None or pool.burn_percent <= RAYDIUM_BURNED_PCT:
                return None
            return LPLockStatus(
                burned=True,
                locked=False,
                lock_months=0,
                lock_contract=None,
                largest_holder=None,
                details=f"{pool.burn_percent:.1f}% of LP burned (Raydium pool index)",
            )

        async def unknown() -> LPLockStatus:
            return UNKNOWN_LOCK_STATUS

        return await run_chain(
            "lp_lock",
            [
                Step("pumpfun_rule", from_pumpfun, Confidence.ESTIMATED),
                Step("lp_holders", from_lp_holders, Confidence.VERIFIED),
                Step("raydium_burn_percent", from_pool_burn_percent, Confidence.ESTIMATED),
                Step("unknown", unknown, Confidence.UNKNOWN),
            ],
            timeout=self._config.provider_timeout_sec,
        )

    async def _audit_chain(self, address: str, rugcheck: RugcheckClient) -> ChainResult[RugcheckReport]:
        async def from_rugcheck() -> RugcheckReport | None:
            return await rugcheck.get_token_report(address)

        return await run_chain(
            "audit",
            [Step("rugcheck", from_rugcheck)],
            timeout=self._config.provider_timeout_sec,
        )

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def _merge(self, address: str, now: datetime, results: dict[str, ChainResult[Any] | None]) -> TokenSnapshot:
        cfg = self._config
        audit = results.get("audit")

        identity = _value(results.get("metadata"), facets.PLACEHOLDER_IDENTITY)
        authorities = _value(results.get("authorities"), facets.NO_AUTHORITY_DATA)
        age = _value(
            results.get("age"),
            age_from_days(cfg.default_age_days, source="default", confidence=Confidence.UNKNOWN, now=now),
        )
        holders = _value(results.get("holders"), facets.NO_HOLDERS)
        market = _value(results.get("liquidity"), facets.NO_LIQUIDITY)
        lock = _value(results.get("lp_lock"), UNKNOWN_LOCK_STATUS)
        report = audit.value if audit else None

        provenance = Provenance(
            metadata=_provenance(results, "metadata"),
            authorities=_provenance(results, "authorities"),
            age=_age_provenance(results.get("age"), age),
            holders=_provenance(results, "holders"),
            liquidity=_provenance(results, "liquidity"),
            lp_lock=_provenance(results, "lp_lock"),
            audit=(
                _provenance(results, "audit") if self._rugcheck is not None
                else unknown_provenance("audit source disabled")
            ),
        )

        analysis = analyze_holders(list(holders.holders))
        decimals = authorities.decimals or identity.decimals or 0

        return TokenSnapshot(
            address=address,
            symbol=identity.symbol,
            name=identity.name,
            decimals=decimals,
            total_supply=authorities.total_supply,
            verified=identity.verified,
            logo_uri=identity.logo_uri,
            mint_authority=authorities.mint_authority,
            freeze_authority=authorities.freeze_authority,
            creation_date=age.creation_date,
            creation_transaction=age.creation_transaction,
            project_age_days=age.project_age_days,
            age_confidence=age.confidence,
            liquidity=LiquidityInfo(
                lp_amount_usd=market.lp_amount_usd,
                lp_lock_months=lock.lock_months,
                lp_burned=lock.burned,
                lp_locked=lock.locked,
                lock_contract=lock.lock_contract,
                lock_analysis=lock.details,
                largest_lp_holder=lock.largest_holder,
                pair_address=market.pair_address,
                dex_id=market.dex_id,
                token_price=market.token_price,
                volume_24h=market.volume_24h,
                market_cap=market.market_cap,
                pool_count=market.pool_count,
            ),
            top_holders=analysis.top_holders,
            holder_count=holders.holder_count,
            active_wallets=estimate_active_wallets(
                market.volume_24h, market.market_cap, analysis.distribution.analyzed_holders,
            ),
            distribution=analysis.distribution,
            whales=analysis.whales,
            suspicious_activity=analysis.suspicious_activity,
            contract_risk=analyze_contract_risk(
                authorities.mint_authority,
                authorities.freeze_authority,
                report,
                authorities_known=provenance.authorities.confidence != Confidence.UNKNOWN,
            ),
            provenance=provenance,
        )


def _value(result: ChainResult[T] | None, fallback: T) -> T:
    if result is None or result.value is None:
        return fallback
    return result.value


def _provenance(results: dict[str, ChainResult[Any] | None], facet: str) -> FacetProvenance:
    result = results.get(facet)
    if result is None:
        return unknown_provenance(f"{facet} facet unavailable")
    return result.provenance


def _age_provenance(result: ChainResult[AgeResolution] | None, age: AgeResolution) -> FacetProvenance:
    if result is None:
        return FacetProvenance(
            source=age.source, confidence=Confidence.UNKNOWN, detail="age facet unavailable",
        )
    return result.provenance


def _unknown_facets(snapshot: TokenSnapshot) -> str:
    names = [
        name for name in snapshot.provenance.CORE_FACETS
        if getattr(snapshot.provenance, name).confidence == Confidence.UNKNOWN
    ]
    return ", ".join(names)
