"""Tests for LP lock/burn detection."""

from src.parsers.holder_analysis import BURN_ADDRESS, RawHolder
from src.parsers.lp_lock import UNKNOWN_LOCK_STATUS, detect_lp_lock

TEAM_FINANCE = "TeamFi1LUZ8CjhGYj8vQVYa4V7v7r9YBwTtxz8EjBa3h"
PUMPFUN = "PumpFun11111111111111111111111111111111111"


def test_burn_address_largest_holder() -> None:
    status = detect_lp_lock([RawHolder(BURN_ADDRESS, 990), RawHolder("Wallet1", 10)])
    assert status.burned is True
    assert status.locked is False
    assert status.largest_holder == BURN_ADDRESS


def test_known_lock_contract() -> None:
    status = detect_lp_lock([RawHolder("Wallet1", 10), RawHolder(TEAM_FINANCE, 600)])
    assert status.locked is True
    assert status.burned is False
    assert status.lock_months == 12
    assert status.lock_contract == "Team Finance"


def test_known_burning_protocol() -> None:
    status = detect_lp_lock([RawHolder(PUMPFUN, 100)])
    assert status.burned is True
    assert status.locked is False
    assert status.lock_contract == "PumpFun Protocol"


def test_unregistered_dominant_holder() -> None:
    status = detect_lp_lock([RawHolder("SomeVault", 95), RawHolder("Wallet1", 5)])
    assert status.locked is True
    assert status.lock_months == 6
    assert status.lock_contract == "unknown"


def test_ninety_percent_exactly_is_distributed() -> None:
    status = detect_lp_lock([RawHolder("SomeVault", 90), RawHolder("Wallet1", 10)])
    assert status.locked is False
    assert status.burned is False


def test_distributed() -> None:
    status = detect_lp_lock([RawHolder(f"W{i}", 10) for i in range(10)])
    assert status.burned is False
    assert status.locked is False
    assert status.lock_months == 0
    assert status.lock_contract is None
    assert status.known is True


def test_no_data_is_unknown() -> None:
    status = detect_lp_lock([])
    assert status is UNKNOWN_LOCK_STATUS
    assert status.burned is None
    assert status.locked is None
    assert status.known is False
