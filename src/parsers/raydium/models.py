"""Data models for Raydium API v3 responses."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class RaydiumPoolInfo:
    """Pool information from the Raydium pool index."""

    pool_id: str = ""
    pool_type: str = ""
    base_mint: str = ""
    quote_mint: str = ""
    lp_mint: str = ""
    lp_supply: Decimal = Decimal(0)
    tvl: Decimal = Decimal(0)  # USD
    volume_24h: Decimal = Decimal(0)  # USD
    price: Decimal = Decimal(0)  # base priced in quote
    burn_percent: float = 0.0  # 0-100, percentage of LP burned

    def involves(self, mint: str) -> bool:
        return mint in (self.base_mint, self.quote_mint)
