"""Sequential fallback chain runner.

A chain is an ordered list of steps. Each step is one provider call bounded
by a timeout; a step "fails" when it returns None, raises, or times out.
Unexpected exceptions are logged with their traceback but still only
sink the step that raised them. The first step that
yields a value wins and its source becomes the facet's provenance.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.snapshot import Confidence, FacetProvenance
from src.parsers.exceptions import UpstreamUnavailable

T = TypeVar("T")

RECOVERABLE_ERRORS = (
    UpstreamUnavailable,
    asyncio.TimeoutError,
    httpx.HTTPError,
    ValidationError,
    ValueError,
)


@dataclass(frozen=True)
class Step(Generic[T]):
    source: str
    fetch: Callable[[], Awaitable[T | None]]
    confidence: Confidence = Confidence.VERIFIED


@dataclass(frozen=True)
class ChainResult(Generic[T]):
    value: T | None
    provenance: FacetProvenance

    @property
    def found(self) -> bool:
        return self.value is not None


async def run_chain(
    facet: str,
    steps: list[Step[T]],
    *,
    timeout: float,
    confidence_of: Callable[[T], Confidence] | None = None,
) -> ChainResult[T]:
    """Try ``steps`` in order, return the first non-None value."""
    failed: list[str] = []
    last_error = ""

    for step in steps:
        try:
            value = await asyncio.wait_for(step.fetch(), timeout=timeout)
        except RECOVERABLE_ERRORS as e:
            reason = "timeout" if isinstance(e, asyncio.TimeoutError) else f"{type(e).__name__}: {e}"
            logger.info(f"[AGGREGATOR] {facet}: {step.source} failed ({reason}), falling back")
            failed.append(step.source)
            last_error = reason
            continue
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.opt(exception=e).warning(f"[AGGREGATOR] {facet}: {step.source} crashed ({reason}), falling back")
            failed.append(step.source)
            last_error = reason
            continue

        if value is None:
            logger.debug(f"[AGGREGATOR] {facet}: {step.source} returned no data")
            failed.append(step.source)
            continue

        confidence = confidence_of(value) if confidence_of else step.confidence
        if failed:
            logger.info(f"[AGGREGATOR] {facet}: using {step.source} after {', '.join(failed)}")
        return ChainResult(
            value=value,
            provenance=FacetProvenance(
                source=step.source,
                confidence=confidence,
                failed_sources=tuple(failed),
                detail=last_error,
            ),
        )

    logger.warning(f"[AGGREGATOR] {facet}: all sources exhausted ({', '.join(failed) or 'none'})")
    return ChainResult(
        value=None,
        provenance=FacetProvenance(
            source="none",
            confidence=Confidence.UNKNOWN,
            failed_sources=tuple(failed),
            detail=last_error or "all sources exhausted",
        ),
    )
