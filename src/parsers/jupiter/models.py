"""Pydantic models for the Jupiter token API."""

from pydantic import BaseModel, Field


class JupiterToken(BaseModel):
    """Token listed in Jupiter's token registry."""

    address: str
    name: str = ""
    symbol: str = ""
    decimals: int | None = None
    logo_uri: str | None = Field(default=None, alias="logoURI")
    tags: list[str] = []
    daily_volume: float | None = None

    model_config = {"extra": "ignore", "populate_by_name": True}

    @property
    def is_strict(self) -> bool:
        return "strict" in self.tags or "verified" in self.tags
