"""LP lock/burn detection from the LP-token holder list.

Checked in order, first match wins:
1. largest LP holder is the burn address -> burned
2. largest LP holder is a known lock/vesting contract -> locked (registry months)
3. largest LP holder owns >90% of LP supply -> locked, conservative 6 months
4. otherwise -> distributed (neither burned nor locked)

No holder data means status unknown: flags stay None, never guessed.
"""

from dataclasses import dataclass

from src.parsers.holder_analysis import BURN_ADDRESS, RawHolder

UNREGISTERED_LOCK_PCT = 90.0
UNREGISTERED_LOCK_MONTHS = 6


@dataclass(frozen=True)
class LockContract:
    name: str
    default_months: int
    burns: bool = False  # protocol burns LP rather than time-locking it


KNOWN_LOCK_CONTRACTS: dict[str, LockContract] = {
    "TeamFi1LUZ8CjhGYj8vQVYa4V7v7r9YBwTtxz8EjBa3h": LockContract("Team Finance", 12),
    "TeamFi2LUZ8CjhGYj8vQVYa4V7v7r9YBwTtxz8EjBa3h": LockContract("Team Finance V2", 12),
    "GokiFs2DfzqzBnqkfCr4xW1k1xdTtBBv8VF2LYLk4k8": LockContract("Goki Protocol", 24),
    "GokiVault1111111111111111111111111111111111": LockContract("Goki Vault", 18),
    "StrmVesting11111111111111111111111111111111": LockContract("Streamflow", 18),
    "LocknToken11111111111111111111111111111111": LockContract("Token Locker", 12),
    "VestToken111111111111111111111111111111111": LockContract("Vesting Contract", 24),
    "PumpFun11111111111111111111111111111111111": LockContract("PumpFun Protocol", 0, burns=True),
    "PumpFunBurn1111111111111111111111111111111": LockContract("PumpFun Burn", 0, burns=True),
}


@dataclass(frozen=True)
class LPLockStatus:
    burned: bool | None
    locked: bool | None
    lock_months: int
    lock_contract: str | None
    largest_holder: str | None
    details: str

    @property
    def known(self) -> bool:
        return self.burned is not None


UNKNOWN_LOCK_STATUS = LPLockStatus(
    burned=None,
    locked=None,
    lock_months=0,
    lock_contract=None,
    largest_holder=None,
    details="LP holder data unavailable",
)


def detect_lp_lock(lp_holders: list[RawHolder]) -> LPLockStatus:
    if not lp_holders:
        return UNKNOWN_LOCK_STATUS

    largest = max(lp_holders, key=lambda h: h.amount)
    address = largest.address

    if address == BURN_ADDRESS:
        return LPLockStatus(
            burned=True,
            locked=False,
            lock_months=0,
            lock_contract=None,
            largest_holder=address,
            details="LP tokens are burned (sent to burn address)",
        )

    contract = KNOWN_LOCK_CONTRACTS.get(address)
    if contract is not None:
        verb = "burned via" if contract.burns else "locked in"
        return LPLockStatus(
            burned=contract.burns,
            locked=not contract.burns,
            lock_months=contract.default_months,
            lock_contract=contract.name,
            largest_holder=address,
            details=f"LP tokens {verb} {contract.name}",
        )

    total = sum(h.amount for h in lp_holders)
    largest_pct = largest.amount / total * 100 if total > 0 else 0.0
    if largest_pct > UNREGISTERED_LOCK_PCT:
        return LPLockStatus(
            burned=False,
            locked=True,
            lock_months=UNREGISTERED_LOCK_MONTHS,
            lock_contract="unknown",
            largest_holder=address,
            details=f"{largest_pct:.1f}% held by single address - likely locked",
        )

    return LPLockStatus(
        burned=False,
        locked=False,
        lock_months=0,
        lock_contract=None,
        largest_holder=address,
        details=f"LP tokens distributed among {len(lp_holders)} holders",
    )
