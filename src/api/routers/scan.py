"""Scan endpoints: single token and batch."""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config.settings import settings
from src.api.app import limiter
from src.api.dependencies import get_scanner
from src.vetting.scanner import TokenScanner

router = APIRouter(prefix="/api/v1", tags=["scan"])


class ScanRequest(BaseModel):
    contract_address: str = Field(alias="contractAddress")

    model_config = {"populate_by_name": True}


class BatchScanRequest(BaseModel):
    contract_addresses: list[str] = Field(alias="contractAddresses")

    model_config = {"populate_by_name": True}


@router.post("/scan")
@limiter.limit(settings.api_rate_limit)
async def scan_token(
    request: Request,
    body: ScanRequest,
    scanner: TokenScanner = Depends(get_scanner),
) -> Any:
    """Vet one token. Ineligible tokens answer 400 with a structured body."""
    result = await scanner.scan(body.contract_address)
    payload = result.to_payload()
    if not result.eligible:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(payload))
    return payload


@router.post("/scan-batch")
@limiter.limit(settings.api_batch_rate_limit)
async def scan_batch(
    request: Request,
    body: BatchScanRequest,
    scanner: TokenScanner = Depends(get_scanner),
) -> dict[str, Any]:
    """Vet up to ``batch_max_size`` tokens concurrently."""
    return await scanner.scan_batch(body.contract_addresses)
