"""Optional hooks around a scan: result storage and eligibility notification.

Neither may change the vetting outcome; failures are logged and dropped.
"""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger


class ScanResultStore(Protocol):
    async def save(self, address: str, payload: dict[str, Any]) -> None: ...


class EligibilityNotifier(Protocol):
    async def notify_eligible(self, address: str, payload: dict[str, Any]) -> None: ...


async def store_result(store: ScanResultStore | None, address: str, payload: dict[str, Any]) -> None:
    if store is None:
        return
    try:
        await store.save(address, payload)
    except Exception as e:
        logger.warning(f"[SCAN] Result store failed for {address[:12]}: {e}")


async def notify_eligible(notifier: EligibilityNotifier | None, address: str, payload: dict[str, Any]) -> None:
    if notifier is None:
        return
    try:
        await notifier.notify_eligible(address, payload)
    except Exception as e:
        logger.warning(f"[SCAN] Eligibility notifier failed for {address[:12]}: {e}")
