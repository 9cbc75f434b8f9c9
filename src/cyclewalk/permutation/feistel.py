"""Feistel network over a (left_bits + right_bits)-bit block.

Each round splits the current word into a high half l (left_bits wide) and
a low half r (right_bits wide), XORs the keyed mixer output for r into l,
and reassembles the word with r on top and the new half below. The
re-split at the start of the next round reinterprets the same bits, so
every round is a bijection on [0, 2^(left_bits + right_bits)) regardless
of the round function.

By default a single round key is reused every round. The "derived"
schedule instead mixes (key ^ round_index) through the PRF per round.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple

from cyclewalk.errors import DomainError
from cyclewalk.permutation.hash_mix import (
    DEFAULT_HASH_KEY,
    check_hash_key,
    check_positive_int,
    check_u64,
    mix,
    u64,
)

if TYPE_CHECKING:
    import torch

DEFAULT_ROUNDS = 4
SCHEDULES = ("fixed", "derived")


def round_keys(
    key: int,
    rounds: int = DEFAULT_ROUNDS,
    schedule: str = "fixed",
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
) -> Tuple[int, ...]:
    """Expand a round key into one key per round.

    Args:
        key: Round key (uint64)
        rounds: Number of Feistel rounds
        schedule: "fixed" reuses key every round, "derived" uses
            mix(hash_key, key ^ round_index)
        hash_key: (key_lo, key_hi) for the mixer

    Returns:
        Tuple of rounds uint64 keys
    """
    if schedule == "fixed":
        return (u64(key),) * rounds
    if schedule == "derived":
        key_lo, key_hi = hash_key
        return tuple(mix(key_lo, key_hi, u64(key) ^ i) for i in range(rounds))
    raise DomainError(f"schedule must be one of {SCHEDULES}, got {schedule!r}")


@dataclass(frozen=True)
class Feistel:
    """Keyed Feistel permutation over [0, 2^(left_bits + right_bits)).

    Attributes:
        left_bits: Width of the high half (may be 0, giving the identity)
        right_bits: Width of the low half, >= left_bits
        key: Round key (uint64)
        rounds: Number of rounds
        schedule: Round key schedule, "fixed" or "derived"
        hash_key: (key_lo, key_hi) for the round function
    """

    left_bits: int
    right_bits: int
    key: int
    rounds: int = DEFAULT_ROUNDS
    schedule: str = "fixed"
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY
    keys: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate parameters and precompute round keys."""
        if self.left_bits < 0 or self.right_bits < 1:
            raise DomainError(
                f"need left_bits >= 0 and right_bits >= 1, "
                f"got {self.left_bits}, {self.right_bits}"
            )
        # The reassembly masks the new half with right_mask
        if self.left_bits > self.right_bits:
            raise DomainError(
                f"left_bits ({self.left_bits}) must be <= right_bits ({self.right_bits})"
            )
        if self.left_bits + self.right_bits > 64:
            raise DomainError("left_bits + right_bits must be <= 64")
        check_positive_int("rounds", self.rounds)
        check_u64("key", self.key)
        check_hash_key(self.hash_key)

        keys = round_keys(self.key, self.rounds, self.schedule, self.hash_key)
        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, "keys", keys)

    @property
    def nbits(self) -> int:
        return self.left_bits + self.right_bits

    @property
    def domain_size(self) -> int:
        return 1 << self.nbits

    def permute(self, x: int) -> int:
        """Apply the Feistel rounds to x.

        Args:
            x: Input value in [0, 2**nbits)

        Returns:
            Permuted value in [0, 2**nbits)

        Example:
            >>> f = Feistel(left_bits=4, right_bits=4, key=7)
            >>> f.invert(f.permute(100))
            100
        """
        if not (0 <= x < self.domain_size):
            raise DomainError(f"x must be in [0, 2**{self.nbits}), got {x}")

        left_mask = (1 << self.left_bits) - 1
        right_mask = (1 << self.right_bits) - 1
        key_lo, key_hi = self.hash_key

        word = x
        for key in self.keys:
            l = (word >> self.right_bits) & left_mask
            r = word & right_mask
            t = (l ^ mix(key_lo, key_hi, r ^ key)) & left_mask
            word = (r << self.left_bits) | (t & right_mask)
        return word

    def invert(self, y: int) -> int:
        """Inverse permutation: invert(permute(x)) == x.

        Args:
            y: Permuted value in [0, 2**nbits)

        Returns:
            Original value in [0, 2**nbits)
        """
        if not (0 <= y < self.domain_size):
            raise DomainError(f"y must be in [0, 2**{self.nbits}), got {y}")

        left_mask = (1 << self.left_bits) - 1
        right_mask = (1 << self.right_bits) - 1
        key_lo, key_hi = self.hash_key

        word = y
        for key in reversed(self.keys):
            r = (word >> self.left_bits) & right_mask
            t = word & left_mask
            l = (t ^ mix(key_lo, key_hi, r ^ key)) & left_mask
            word = (l << self.right_bits) | r
        return word

    def permute_tensor(self, x: "torch.Tensor") -> "torch.Tensor":
        """Vectorized permute; matches permute() element-wise.

        Args:
            x: Input tensor (torch.long), values in [0, 2**nbits), nbits <= 63

        Returns:
            Permuted tensor of same shape as x
        """
        from cyclewalk.permutation.tensor_ops import feistel_tensor

        self._check_tensor(x)
        return feistel_tensor(x, self.left_bits, self.right_bits, self.keys, self.hash_key)

    def invert_tensor(self, y: "torch.Tensor") -> "torch.Tensor":
        """Vectorized invert; matches invert() element-wise."""
        from cyclewalk.permutation.tensor_ops import feistel_inverse_tensor

        self._check_tensor(y)
        return feistel_inverse_tensor(
            y, self.left_bits, self.right_bits, self.keys, self.hash_key
        )

    def _check_tensor(self, x: "torch.Tensor") -> None:
        import torch

        if not isinstance(x, torch.Tensor):
            raise TypeError(f"x must be torch.LongTensor, got {type(x)}")
        if x.dtype != torch.long:
            raise TypeError(f"x must be torch.long dtype, got {x.dtype}")
        if self.nbits > 63:
            raise DomainError("tensor path supports at most 63-bit blocks")


def feistel(
    value: int,
    left_bits: int,
    right_bits: int,
    key: int,
    rounds: int = DEFAULT_ROUNDS,
    schedule: str = "fixed",
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
) -> int:
    """Feistel permutation of value over [0, 2^(left_bits + right_bits))."""
    return Feistel(left_bits, right_bits, key, rounds, schedule, hash_key).permute(value)


def feistel_inverse(
    value: int,
    left_bits: int,
    right_bits: int,
    key: int,
    rounds: int = DEFAULT_ROUNDS,
    schedule: str = "fixed",
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
) -> int:
    """Inverse of feistel() for the same parameters."""
    return Feistel(left_bits, right_bits, key, rounds, schedule, hash_key).invert(value)
