"""Keyed 64-bit mixing function used as the Feistel round PRF.

The mixer is a folded-multiply integer hash: the input word is folded into
a 64-bit buffer with a 64x64->128 bit multiply whose two halves are XORed,
then finished against a second key word with another folded multiply and a
data-dependent rotation. All functions operate on Python ints and are
platform-independent.
"""

from typing import Tuple

from cyclewalk.errors import DomainError

MASK64 = 0xFFFFFFFFFFFFFFFF

# Multiplier for the update step (PCG multiplier)
MULTIPLE = 6364136223846793005

# Default 128-bit hash key (key_lo, key_hi)
DEFAULT_HASH_KEY: Tuple[int, int] = (0x5F7788C56CB54593, 0x76FA89EB1EEF921D)

# Seed used by the demo driver to derive its round key
DEFAULT_SEED = 1


def u64(x: int) -> int:
    """Force integer into unsigned 64-bit domain.

    Args:
        x: Input integer (can be negative or any size)

    Returns:
        Unsigned 64-bit integer (value modulo 2^64)
    """
    return x & MASK64


def folded_multiply(s: int, by: int) -> int:
    """Multiply two 64-bit words and fold the 128-bit product.

    Args:
        s: First operand (masked to 64 bits)
        by: Second operand (masked to 64 bits)

    Returns:
        Low 64 bits of the product XOR high 64 bits of the product
    """
    full = u64(s) * u64(by)
    return (full & MASK64) ^ (full >> 64)


def rotate_left(x: int, r: int) -> int:
    """Rotate a 64-bit word left by r bits (0 <= r < 64)."""
    x = u64(x)
    if r == 0:
        return x
    return u64(x << r) | (x >> (64 - r))


def mix(key_lo: int, key_hi: int, x: int) -> int:
    """Keyed 64-bit mixing function.

    Deterministic for a given (key_lo, key_hi, x). Flipping any input bit
    flips roughly half of the output bits. Not a cryptographic hash.

    Args:
        key_lo: Low key word (uint64), seeds the fold buffer
        key_hi: High key word (uint64), used in the finish step
        x: Input word (uint64)

    Returns:
        Mixed 64-bit unsigned integer

    Example:
        >>> mix(1, 2, 3) == mix(1, 2, 3)
        True
    """
    buffer = folded_multiply(u64(x) ^ u64(key_lo), MULTIPLE)
    rot = buffer & 63
    return rotate_left(folded_multiply(buffer, key_hi), rot)


def derive_key(seed: int, hash_key: Tuple[int, int] = DEFAULT_HASH_KEY) -> int:
    """Derive a 64-bit round key from a seed.

    Args:
        seed: Seed value (masked to 64 bits)
        hash_key: (key_lo, key_hi) pair for the mixer

    Returns:
        Round key (uint64)
    """
    key_lo, key_hi = hash_key
    return mix(key_lo, key_hi, seed)


def check_u64(name: str, value: int) -> None:
    """Raise DomainError unless value is an int in [0, 2^64)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainError(f"{name} must be an int, got {type(value).__name__}")
    if not (0 <= value <= MASK64):
        raise DomainError(f"{name} must be uint64, got {value}")


def check_positive_int(name: str, value: int) -> None:
    """Raise DomainError unless value is an int >= 1."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainError(f"{name} must be an int, got {type(value).__name__}")
    if value < 1:
        raise DomainError(f"{name} must be positive, got {value}")


def check_hash_key(hash_key: Tuple[int, int]) -> None:
    """Raise DomainError unless hash_key is a (key_lo, key_hi) pair of uint64."""
    if not isinstance(hash_key, (tuple, list)) or len(hash_key) != 2:
        raise DomainError(f"hash_key must be a (key_lo, key_hi) pair, got {hash_key!r}")
    check_u64("hash_key[0]", hash_key[0])
    check_u64("hash_key[1]", hash_key[1])
