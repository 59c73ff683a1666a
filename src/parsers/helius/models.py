"""Pydantic models for Solana JSON-RPC responses (Helius or public RPC)."""

from pydantic import BaseModel


class HeliusMintInfo(BaseModel):
    """Parsed SPL mint account (getAccountInfo, jsonParsed)."""

    mint: str
    mint_authority: str | None = None
    freeze_authority: str | None = None
    supply: int = 0  # raw units, divide by 10**decimals
    decimals: int = 0
    is_initialized: bool = True
    owner_program: str = ""

    @property
    def ui_supply(self) -> float:
        return self.supply / (10 ** self.decimals) if self.decimals else float(self.supply)


class HeliusSignature(BaseModel):
    """Transaction signature metadata."""

    signature: str
    slot: int = 0
    timestamp: int | None = None  # blockTime, may be null for very old slots
    err: dict | str | None = None


class EarliestTransaction(BaseModel):
    """Oldest signature found by paginating getSignaturesForAddress.

    ``exhausted`` is True when the history end was reached, i.e. the
    signature really is the first one. Otherwise it is only a lower bound.
    """

    signature: str
    block_time: int
    pages_fetched: int
    exhausted: bool
