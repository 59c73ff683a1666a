"""FastAPI dependency injection: the process-wide scanner."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from src.vetting.scanner import TokenScanner


def get_scanner(request: Request) -> TokenScanner:
    """Return the scanner built during app startup."""
    scanner: TokenScanner | None = getattr(request.app.state, "scanner", None)
    if scanner is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scanner not initialised",
        )
    return scanner
