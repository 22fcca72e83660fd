"""ID and value generators (CUID record ids, share tokens)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_share_token(num_bytes: int = 32) -> str:
    """Return a hex token from the OS CSPRNG (32 bytes = 256 bits = 64 hex chars).

    Share tokens are bearer capabilities, so only ``secrets`` is used here.
    """
    if num_bytes < 16:
        raise ValueError("Share tokens need at least 16 random bytes")
    return secrets.token_hex(num_bytes)
