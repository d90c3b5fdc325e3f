from ecdsa import VerifyingKey, Ed25519 # type: ignore
from ecdsa.errors import MalformedPointError # type: ignore

def is_valid_public_key(pub_bytes: bytes) -> bool:
    """Checks pub_bytes is an encoded point on the Ed25519 curve."""
    try:
        VerifyingKey.from_string(pub_bytes, curve=Ed25519)
        return True
    except (MalformedPointError, ValueError):
        return False
