"""Vectorized uint64 arithmetic for the permutation on torch tensors.

Values are carried as torch.int64 tensors holding uint64 bit patterns.
Multiplication and left shifts wrap modulo 2^64; right shifts are made
logical by masking after the arithmetic shift. The 128-bit product needed
by the folded multiply is assembled from 32-bit limbs. Every function here
is bit-exact with its scalar counterpart in hash_mix / feistel.
"""

from typing import Callable, Sequence, Tuple

import torch

from cyclewalk.errors import RetryExhaustedError
from cyclewalk.permutation.hash_mix import DEFAULT_HASH_KEY, MULTIPLE, u64

MASK32 = 0xFFFFFFFF


def u64_to_i64(x: int) -> int:
    """Reinterpret a uint64 Python int as the int64 with the same bits."""
    x = u64(x)
    if x < 2**63:
        return x
    return x - 2**64


def i64_to_u64(x: int) -> int:
    """Reinterpret an int64 Python int as the uint64 with the same bits."""
    return u64(x)


def logical_right_shift(x: torch.Tensor, shift: int) -> torch.Tensor:
    """Zero-filling right shift of an int64 tensor (uint64 semantics).

    Args:
        x: Input tensor (int64, treated as uint64)
        shift: Shift amount

    Returns:
        Logically right-shifted tensor
    """
    if shift == 0:
        return x
    if shift >= 64:
        return torch.zeros_like(x)
    return (x >> shift) & ((1 << (64 - shift)) - 1)


def rotate_left_tensor(x: torch.Tensor, rot: torch.Tensor) -> torch.Tensor:
    """Per-element 64-bit rotate left.

    Args:
        x: Input tensor (int64, treated as uint64)
        rot: Rotation amounts, same shape as x, values in [0, 64)

    Returns:
        Rotated tensor
    """
    rot = rot & 63
    high = torch.bitwise_left_shift(x, rot)
    # rot == 0 gives an empty mask, so the clamped shift never leaks bits
    low_mask = torch.bitwise_left_shift(torch.ones_like(rot), rot) - 1
    low = torch.bitwise_right_shift(x, (64 - rot).clamp(max=63)) & low_mask
    return high | low


def folded_multiply_tensor(a: torch.Tensor, by: int) -> torch.Tensor:
    """Vectorized folded multiply: low64(a * by) ^ high64(a * by).

    Args:
        a: Input tensor (int64, treated as uint64)
        by: Multiplier (uint64 Python int)

    Returns:
        Folded product tensor
    """
    by = u64(by)
    b_lo = by & MASK32
    b_hi = by >> 32

    a_lo = a & MASK32
    a_hi = logical_right_shift(a, 32)

    # Partial products are < 2^64; int64 wrap keeps their bit patterns
    ll = a_lo * b_lo
    lh = a_lo * b_hi
    hl = a_hi * b_lo
    hh = a_hi * b_hi

    mid = logical_right_shift(ll, 32) + (lh & MASK32) + (hl & MASK32)
    hi = (
        hh
        + logical_right_shift(lh, 32)
        + logical_right_shift(hl, 32)
        + logical_right_shift(mid, 32)
    )
    lo = (mid << 32) | (ll & MASK32)
    return lo ^ hi


def mix_tensor(key_lo: int, key_hi: int, x: torch.Tensor) -> torch.Tensor:
    """Vectorized keyed mixing function, bit-exact with hash_mix.mix."""
    buffer = folded_multiply_tensor(x ^ u64_to_i64(key_lo), MULTIPLE)
    rot = buffer & 63
    return rotate_left_tensor(folded_multiply_tensor(buffer, key_hi), rot)


def feistel_tensor(
    x: torch.Tensor,
    left_bits: int,
    right_bits: int,
    keys: Sequence[int],
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
) -> torch.Tensor:
    """Apply the Feistel rounds to every element of x.

    Args:
        x: Input tensor (int64), values in [0, 2^(left_bits+right_bits))
        left_bits: Width of the high half
        right_bits: Width of the low half
        keys: One round key per round (uint64)
        hash_key: (key_lo, key_hi) for the round function

    Returns:
        Permuted tensor of same shape as x
    """
    left_mask = (1 << left_bits) - 1
    right_mask = (1 << right_bits) - 1
    key_lo, key_hi = hash_key

    word = x
    for key in keys:
        l = logical_right_shift(word, right_bits) & left_mask
        r = word & right_mask
        t = (l ^ mix_tensor(key_lo, key_hi, r ^ u64_to_i64(key))) & left_mask
        word = (r << left_bits) | (t & right_mask)
    return word


def feistel_inverse_tensor(
    y: torch.Tensor,
    left_bits: int,
    right_bits: int,
    keys: Sequence[int],
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
) -> torch.Tensor:
    """Undo feistel_tensor with the same parameters."""
    left_mask = (1 << left_bits) - 1
    right_mask = (1 << right_bits) - 1
    key_lo, key_hi = hash_key

    word = y
    for key in reversed(keys):
        r = logical_right_shift(word, left_bits) & right_mask
        t = word & left_mask
        l = (t ^ mix_tensor(key_lo, key_hi, r ^ u64_to_i64(key))) & left_mask
        word = (l << right_bits) | r
    return word


def cycle_walk_tensor(
    x: torch.Tensor,
    n: int,
    step: Callable[[torch.Tensor], torch.Tensor],
    max_attempts: int,
) -> torch.Tensor:
    """Re-apply step to the lanes still outside [0, n) until all land.

    Args:
        x: Input tensor (int64), values in [0, n)
        n: Domain size, n < 2^63
        step: Bijection on the embedding domain, applied lane-wise
        max_attempts: Maximum number of step applications per lane

    Returns:
        Tensor of same shape as x, values in [0, n)

    Raises:
        RetryExhaustedError: If some lane is still outside [0, n)
            after max_attempts applications
    """
    out = step(x)
    pending = out >= n
    attempts = 1
    while bool(pending.any()):
        if attempts >= max_attempts:
            stuck = int(x[pending].flatten()[0].item())
            raise RetryExhaustedError(stuck, n, attempts)
        # Only walk the lanes that have not landed yet
        out[pending] = step(out[pending])
        pending = out >= n
        attempts += 1
    return out
