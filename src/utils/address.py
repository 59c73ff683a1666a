import re

import base58

SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
PUBKEY_LENGTH = 32


def is_valid_solana_address(address: object) -> bool:
    """Base58 alphabet, 32-44 chars, decoding to a 32-byte public key."""
    if not isinstance(address, str) or not SOLANA_ADDRESS_RE.match(address):
        return False
    try:
        return len(base58.b58decode(address)) == PUBKEY_LENGTH
    except ValueError:
        return False
