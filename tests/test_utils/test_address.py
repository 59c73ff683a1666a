"""Tests for Solana address validation."""

import pytest

from src.utils.address import is_valid_solana_address


@pytest.mark.parametrize(
    "address",
    [
        "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
        "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        "So11111111111111111111111111111111111111112",
        "11111111111111111111111111111111",
    ],
)
def test_valid(address: str) -> None:
    assert is_valid_solana_address(address)


@pytest.mark.parametrize(
    "address",
    [
        "",
        "not-an-address",
        "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        # 'l' and 'O' are not base58
        "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB26l",
        "OezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
        "DezXAZ8z7Pnrn",
        "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263DezX",
    ],
)
def test_invalid(address: str) -> None:
    assert not is_valid_solana_address(address)
