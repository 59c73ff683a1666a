"""Request-level vetting errors. Raised before any upstream call is made."""

from __future__ import annotations


class VettingError(Exception):
    """Base class; ``message`` is safe to return to API clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class InvalidAddressFormat(VettingError):
    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__("Invalid Solana contract address format")

    def to_dict(self) -> dict:
        return {"error": self.message, "contractAddress": self.address}


class EmptyBatch(VettingError):
    def __init__(self) -> None:
        super().__init__("At least one contract address is required")


class BatchTooLarge(VettingError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Maximum {limit} contract addresses allowed per batch request")


class InvalidBatchAddresses(VettingError):
    def __init__(self, invalid: list[tuple[int, str]], valid_count: int) -> None:
        self.invalid = invalid
        self.valid_count = valid_count
        super().__init__("Invalid contract address format(s) found")

    @property
    def indices(self) -> list[int]:
        return [index for index, _ in self.invalid]

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "invalid_addresses": [{"address": a, "index": i} for i, a in self.invalid],
            "valid_addresses": self.valid_count,
        }
