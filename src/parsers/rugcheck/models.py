"""Pydantic models for Rugcheck.xyz API responses."""

from pydantic import BaseModel


class RugcheckRisk(BaseModel):
    """Individual risk detected by Rugcheck."""

    name: str
    description: str = ""
    level: str = "info"  # "danger", "warn", "info" (rarely "critical")
    score: int = 0
    value: str = ""


class RugcheckReport(BaseModel):
    """Summary report from Rugcheck.xyz.

    score: raw risk points, unbounded.
    score_normalised: 0 = safest, 100 = most dangerous.
    risks: list of detected risk factors.
    """

    mint: str = ""
    score: int = 0
    score_normalised: int = 0
    rugged: bool = False
    risks: list[RugcheckRisk] = []
    token_name: str = ""
    token_symbol: str = ""

    @property
    def safety_score(self) -> int:
        """Normalised score inverted so that higher is safer."""
        return max(0, min(100, 100 - self.score_normalised))
