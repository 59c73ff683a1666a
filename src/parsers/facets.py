"""Provider payload -> facet mapping.

Every provider model has one explicit mapping function into a facet type,
so the aggregator's fallback chains never read raw JSON.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.helius.models import HeliusMintInfo
from src.parsers.holder_analysis import RawHolder
from src.parsers.jupiter.models import JupiterToken
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.solscan.models import SolscanHolderPage
from src.parsers.token_age import address_hash

PUMPFUN_DEX_IDS = frozenset({"pumpswap", "raydium"})
PUMPFUN_MINT_SUFFIX = "pump"

PLACEHOLDER_SYMBOL = "UNKNOWN"
PLACEHOLDER_NAME = "Unknown Token"


@dataclass(frozen=True)
class IdentityFacet:
    symbol: str
    name: str
    verified: bool
    decimals: int | None = None
    logo_uri: str | None = None


@dataclass(frozen=True)
class AuthorityFacet:
    mint_authority: str | None
    freeze_authority: str | None
    total_supply: float
    decimals: int


@dataclass(frozen=True)
class MarketLiquidity:
    lp_amount_usd: float
    pool_count: int
    pair_address: str | None = None
    dex_id: str | None = None
    token_price: float | None = None
    volume_24h: float = 0.0
    market_cap: float = 0.0
    pumpfun_burned: bool = False  # protocol-burned LP inferred from dex + mint suffix


@dataclass(frozen=True)
class HoldersFacet:
    holders: tuple[RawHolder, ...]
    holder_count: int


PLACEHOLDER_IDENTITY = IdentityFacet(
    symbol=PLACEHOLDER_SYMBOL, name=PLACEHOLDER_NAME, verified=False,
)
NO_AUTHORITY_DATA = AuthorityFacet(
    mint_authority=None, freeze_authority=None, total_supply=0.0, decimals=0,
)
NO_LIQUIDITY = MarketLiquidity(lp_amount_usd=0.0, pool_count=0)
NO_HOLDERS = HoldersFacet(holders=(), holder_count=0)


def identity_from_jupiter(token: JupiterToken) -> IdentityFacet:
    return IdentityFacet(
        symbol=token.symbol or PLACEHOLDER_SYMBOL,
        name=token.name or PLACEHOLDER_NAME,
        verified=True,
        decimals=token.decimals,
        logo_uri=token.logo_uri,
    )


def identity_from_dexscreener(pairs: list[DexScreenerPair], mint: str) -> IdentityFacet | None:
    for pair in pairs:
        base = pair.baseToken
        if base is not None and base.address == mint and base.symbol:
            return IdentityFacet(
                symbol=base.symbol,
                name=base.name or base.symbol,
                verified=False,
            )
    return None


def authorities_from_rpc(info: HeliusMintInfo) -> AuthorityFacet:
    return AuthorityFacet(
        mint_authority=info.mint_authority or None,
        freeze_authority=info.freeze_authority or None,
        total_supply=info.ui_supply,
        decimals=info.decimals,
    )


def best_pair(pairs: list[DexScreenerPair]) -> DexScreenerPair | None:
    """Pair with the deepest USD liquidity."""
    if not pairs:
        return None
    return max(pairs, key=lambda p: p.liquidity_usd)


def is_pumpfun_pair(pair: DexScreenerPair, mint: str) -> bool:
    return pair.dexId.lower() in PUMPFUN_DEX_IDS and mint.endswith(PUMPFUN_MINT_SUFFIX)


def liquidity_from_dexscreener(pairs: list[DexScreenerPair], mint: str) -> MarketLiquidity | None:
    pair = best_pair(pairs)
    if pair is None:
        return None
    return MarketLiquidity(
        lp_amount_usd=pair.liquidity_usd,
        pool_count=len(pairs),
        pair_address=pair.pairAddress or None,
        dex_id=pair.dexId or None,
        token_price=pair.price_usd,
        volume_24h=pair.volume_24h,
        market_cap=pair.market_cap,
        pumpfun_burned=is_pumpfun_pair(pair, mint),
    )


def liquidity_from_raydium(pool: RaydiumPoolInfo, pool_count: int) -> MarketLiquidity:
    return MarketLiquidity(
        lp_amount_usd=float(pool.tvl),
        pool_count=pool_count,
        pair_address=pool.pool_id or None,
        dex_id="raydium",
        token_price=float(pool.price) if pool.price else None,
        volume_24h=float(pool.volume_24h),
    )


def earliest_pair_created_ms(pairs: list[DexScreenerPair]) -> int | None:
    stamps = [p.pairCreatedAt for p in pairs if p.pairCreatedAt]
    return min(stamps) if stamps else None


def raw_holders_from_solscan(page: SolscanHolderPage) -> tuple[RawHolder, ...]:
    return tuple(
        RawHolder(address=item.wallet, amount=item.ui_amount)
        for item in page.items
        if item.amount > 0
    )


def holders_from_solscan(page: SolscanHolderPage) -> HoldersFacet | None:
    holders = raw_holders_from_solscan(page)
    if not holders:
        return None
    return HoldersFacet(holders=holders, holder_count=max(page.total, len(holders)))


def synthetic_holders(mint: str, count: int = 10) -> HoldersFacet:
    """Deterministic placeholder distribution for local testing only.

    Geometric decay whose ratio depends on the mint, so a given mint always
    gets the same list. Never used unless explicitly enabled in settings.
    """
    ratio = 0.55 + (abs(address_hash(mint)) % 300) / 1000  # 0.55 - 0.85
    holders = tuple(
        RawHolder(address=f"synthetic-holder-{i + 1}", amount=1_000_000 * ratio ** i)
        for i in range(count)
    )
    return HoldersFacet(holders=holders, holder_count=count)
