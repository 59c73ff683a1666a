from dataclasses import dataclass

from src.models.snapshot import TokenSnapshot
from src.utils.age_format import format_token_age


@dataclass(frozen=True)
class AgeGateResult:
    passed: bool
    project_age_days: float
    age_display: str
    minimum_age_required: float


def check_age(snapshot: TokenSnapshot, min_project_age_days: float) -> AgeGateResult:
    """Global minimum-age precondition, independent of any tier's own range."""
    age = snapshot.project_age_days
    return AgeGateResult(
        passed=age >= min_project_age_days,
        project_age_days=age,
        age_display=format_token_age(age),
        minimum_age_required=min_project_age_days,
    )
