import bech32 # type: ignore
from .hash import sha256
from typing import List

ALPHABET = "zxvcpmbn3465o978uyrtkqew2adsjhfg"
CHECKSUM_LENGTH = 6
ENCODED_LENGTH = 38  # 32 data words + 6 checksum words

def address_from_pubkey(pub_bytes: bytes) -> bytes:
    """Derives the 20-byte binary address from a public key."""
    return sha256(pub_bytes)[:20]

def _create_checksum(words: List[int]) -> List[int]:
    # Same BCH code as bech32, without the human-readable part expansion
    mod = bech32.bech32_polymod(words + [0] * CHECKSUM_LENGTH) ^ 1
    return [(mod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]

def encode_address(address: bytes, prefix: str = "lsk") -> str:
    """Converts a 20-byte binary address to its human-readable form."""
    if len(address) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(address)}")

    words = bech32.convertbits(address, 8, 5)
    if words is None:
        raise ValueError("Error converting to base32 words")

    return prefix + "".join(ALPHABET[w] for w in words + _create_checksum(words))

def decode_address(addr: str, prefix: str = "lsk") -> bytes:
    """Decodes a human-readable address back to its 20 binary bytes."""
    if not addr.startswith(prefix):
        raise ValueError(f"Address must start with '{prefix}'")

    body = addr[len(prefix):]
    if len(body) != ENCODED_LENGTH:
        raise ValueError(f"Address body must be {ENCODED_LENGTH} characters")

    try:
        words = [ALPHABET.index(c) for c in body]
    except ValueError:
        raise ValueError("Address contains characters outside the base32 alphabet")

    if bech32.bech32_polymod(words) != 1:
        raise ValueError("Invalid address checksum")

    decoded = bech32.convertbits(words[:-CHECKSUM_LENGTH], 5, 8, False)
    if decoded is None:
        raise ValueError("Error converting from base32 words")

    return bytes(decoded)
