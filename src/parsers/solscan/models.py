"""Pydantic models for Solscan Pro API v2 responses."""

from pydantic import BaseModel


class SolscanTokenMeta(BaseModel):
    address: str
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    holder: int | None = None  # total holder count
    supply: str | None = None
    icon: str | None = None

    model_config = {"extra": "ignore"}


class SolscanHolder(BaseModel):
    """One holder row; ``owner`` is the wallet, ``address`` its token account."""

    address: str
    owner: str | None = None
    amount: float = 0.0  # raw units
    decimals: int = 0
    rank: int | None = None

    model_config = {"extra": "ignore"}

    @property
    def wallet(self) -> str:
        return self.owner or self.address

    @property
    def ui_amount(self) -> float:
        return self.amount / (10 ** self.decimals) if self.decimals else self.amount


class SolscanHolderPage(BaseModel):
    total: int = 0
    items: list[SolscanHolder] = []

    model_config = {"extra": "ignore"}


class SolscanTransaction(BaseModel):
    tx_hash: str
    block_time: int | None = None
    slot: int | None = None

    model_config = {"extra": "ignore"}
