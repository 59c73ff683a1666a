"""Health check."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.dependencies import get_scanner
from src.vetting.scanner import TokenScanner

API_VERSION = "0.1.0"

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    tiers_version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(scanner: TokenScanner = Depends(get_scanner)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        tiers_version=scanner.classifier.config.version,
    )
