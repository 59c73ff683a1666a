from decimal import Decimal

from pydantic import BaseModel


class DexScreenerToken(BaseModel):
    address: str
    name: str | None = None
    symbol: str | None = None

    model_config = {"extra": "ignore"}


class DexScreenerVolume(BaseModel):
    h1: Decimal | None = None
    h6: Decimal | None = None
    h24: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerLiquidity(BaseModel):
    usd: Decimal | None = None
    base: Decimal | None = None
    quote: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerPair(BaseModel):
    chainId: str = ""
    dexId: str = ""
    pairAddress: str = ""
    baseToken: DexScreenerToken | None = None
    quoteToken: DexScreenerToken | None = None
    priceUsd: str | None = None
    volume: DexScreenerVolume | None = None
    liquidity: DexScreenerLiquidity | None = None
    fdv: Decimal | None = None
    marketCap: Decimal | None = None
    pairCreatedAt: int | None = None  # ms since epoch

    model_config = {"extra": "ignore"}

    @property
    def liquidity_usd(self) -> float:
        if self.liquidity and self.liquidity.usd is not None:
            return float(self.liquidity.usd)
        return 0.0

    @property
    def volume_24h(self) -> float:
        if self.volume and self.volume.h24 is not None:
            return float(self.volume.h24)
        return 0.0

    @property
    def market_cap(self) -> float:
        value = self.marketCap if self.marketCap is not None else self.fdv
        return float(value) if value is not None else 0.0

    @property
    def price_usd(self) -> float | None:
        try:
            return float(self.priceUsd) if self.priceUsd else None
        except ValueError:
            return None
