from src.models.snapshot import (
    Confidence,
    ContractRisk,
    DistributionMetrics,
    FacetProvenance,
    HolderEntry,
    LiquidityInfo,
    Provenance,
    SecurityIssue,
    SuspiciousActivity,
    TokenSnapshot,
    WhaleAnalysis,
)

__all__ = [
    "Confidence",
    "ContractRisk",
    "DistributionMetrics",
    "FacetProvenance",
    "HolderEntry",
    "LiquidityInfo",
    "Provenance",
    "SecurityIssue",
    "SuspiciousActivity",
    "TokenSnapshot",
    "WhaleAnalysis",
]
