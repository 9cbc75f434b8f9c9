"""Format-preserving permutation of [0, n) via cycle-walking.

The Feistel network permutes the smallest power-of-two domain covering
[0, n). Following the orbit of an input under that permutation until it
re-enters [0, n) restricts the bijection to [0, n). Because the embedding
domain is less than 2n, each step lands with probability >= 1/2 and the
expected walk length is at most 2. Walks are capped at max_attempts.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator, List, Tuple

from cyclewalk.errors import DomainError, RetryExhaustedError
from cyclewalk.permutation.feistel import DEFAULT_ROUNDS, SCHEDULES, Feistel
from cyclewalk.permutation.hash_mix import (
    DEFAULT_HASH_KEY,
    MASK64,
    check_hash_key,
    check_positive_int,
    check_u64,
)

if TYPE_CHECKING:
    import torch

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1 << 12

# Walks at least this long are logged at DEBUG
LONG_WALK = 32


@dataclass(frozen=True)
class DomainSplit:
    """Embedding domain for a permutation of [0, n).

    Attributes:
        n: Domain size (>= 1)
        bits: ceil(log2(n)), 0 when n == 1
        left_bits: bits // 2
        right_bits: bits - left_bits
    """

    n: int
    bits: int
    left_bits: int
    right_bits: int

    @classmethod
    def from_size(cls, n: int) -> "DomainSplit":
        """Compute the minimal power-of-two split covering [0, n).

        Raises:
            DomainError: If n is not in [1, 2^64]
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise DomainError(f"n must be an int, got {type(n).__name__}")
        if n < 1:
            raise DomainError(f"n must be >= 1, got {n}")
        if n > MASK64 + 1:
            raise DomainError(f"n must be <= 2**64, got {n}")
        bits = (n - 1).bit_length()
        left_bits = bits >> 1
        return cls(n=n, bits=bits, left_bits=left_bits, right_bits=bits - left_bits)

    @property
    def is_identity(self) -> bool:
        """True when the domain has a single element."""
        return self.bits == 0


def _walk(value: int, n: int, step: Callable[[int], int], max_attempts: int) -> Tuple[int, int]:
    """Apply step from value until the result is < n.

    Returns:
        (result, number of step applications)
    """
    output = value
    for attempt in range(1, max_attempts + 1):
        output = step(output)
        if output < n:
            if attempt >= LONG_WALK:
                logger.debug("cycle walk for %d in [0, %d) took %d steps", value, n, attempt)
            return output, attempt
    raise RetryExhaustedError(value, n, max_attempts)


@dataclass(frozen=True)
class CycleWalkFPE:
    """Keyed bijection over [0, n).

    Attributes:
        n: Domain size (>= 1)
        key: Round key (uint64)
        rounds: Number of Feistel rounds
        schedule: Round key schedule, "fixed" or "derived"
        hash_key: (key_lo, key_hi) for the round function
        max_attempts: Maximum Feistel applications per walk

    Example:
        >>> fpe = CycleWalkFPE(n=1000, key=42)
        >>> sorted(fpe) == list(range(1000))
        True
        >>> fpe.decrypt(fpe.encrypt(7))
        7
    """

    n: int
    key: int
    rounds: int = DEFAULT_ROUNDS
    schedule: str = "fixed"
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    split: DomainSplit = field(init=False, repr=False)
    network: Feistel = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        """Validate parameters and build the Feistel network."""
        split = DomainSplit.from_size(self.n)
        # Checked here too: n == 1 never builds a network
        check_u64("key", self.key)
        check_positive_int("rounds", self.rounds)
        if self.schedule not in SCHEDULES:
            raise DomainError(f"schedule must be one of {SCHEDULES}, got {self.schedule!r}")
        check_hash_key(self.hash_key)
        check_positive_int("max_attempts", self.max_attempts)
        object.__setattr__(self, "split", split)
        if not split.is_identity:
            network = Feistel(
                split.left_bits,
                split.right_bits,
                self.key,
                rounds=self.rounds,
                schedule=self.schedule,
                hash_key=self.hash_key,
            )
            object.__setattr__(self, "network", network)

    def _check_value(self, x: int) -> None:
        if isinstance(x, bool) or not isinstance(x, int):
            raise DomainError(f"value must be an int, got {type(x).__name__}")
        if not (0 <= x < self.n):
            raise DomainError(f"value must be in [0, {self.n}), got {x}")

    def encrypt(self, x: int) -> int:
        """Map x in [0, n) to its image in [0, n)."""
        return self.walk(x)[0]

    def decrypt(self, y: int) -> int:
        """Inverse of encrypt: decrypt(encrypt(x)) == x."""
        self._check_value(y)
        if self.network is None:
            return y
        return _walk(y, self.n, self.network.invert, self.max_attempts)[0]

    def walk(self, x: int) -> Tuple[int, int]:
        """Encrypt x and report how many Feistel applications it took.

        Returns:
            (image of x, walk length); walk length is 0 for n == 1
        """
        self._check_value(x)
        if self.network is None:
            return x, 0
        return _walk(x, self.n, self.network.permute, self.max_attempts)

    def encrypt_tensor(self, x: "torch.Tensor") -> "torch.Tensor":
        """Vectorized encrypt; matches encrypt() element-wise.

        Args:
            x: Input tensor (torch.long), values in [0, n), n < 2**63

        Returns:
            Tensor of same shape as x with values in [0, n)
        """
        from cyclewalk.permutation.tensor_ops import cycle_walk_tensor

        self._check_tensor(x)
        if self.network is None:
            return x.clone()
        return cycle_walk_tensor(x, self.n, self.network.permute_tensor, self.max_attempts)

    def decrypt_tensor(self, y: "torch.Tensor") -> "torch.Tensor":
        """Vectorized decrypt; matches decrypt() element-wise."""
        from cyclewalk.permutation.tensor_ops import cycle_walk_tensor

        self._check_tensor(y)
        if self.network is None:
            return y.clone()
        return cycle_walk_tensor(y, self.n, self.network.invert_tensor, self.max_attempts)

    def _check_tensor(self, x: "torch.Tensor") -> None:
        import torch

        if not isinstance(x, torch.Tensor):
            raise TypeError(f"x must be torch.LongTensor, got {type(x)}")
        if x.dtype != torch.long:
            raise TypeError(f"x must be torch.long dtype, got {x.dtype}")
        if self.n >= 2**63:
            raise DomainError("tensor path supports n < 2**63")
        if x.numel() and (bool((x < 0).any()) or bool((x >= self.n).any())):
            raise DomainError(f"all values must be in [0, {self.n})")

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, index: int) -> int:
        return self.encrypt(index)

    def __iter__(self) -> Iterator[int]:
        """Yield encrypt(0), encrypt(1), ... encrypt(n - 1)."""
        for x in range(self.n):
            yield self.encrypt(x)


def fpe(
    value: int,
    n: int,
    key: int,
    rounds: int = DEFAULT_ROUNDS,
    schedule: str = "fixed",
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """Permute value within [0, n) under key.

    Args:
        value: Input in [0, n)
        n: Domain size (>= 1)
        key: Round key (uint64)
        rounds: Number of Feistel rounds
        schedule: Round key schedule, "fixed" or "derived"
        hash_key: (key_lo, key_hi) for the round function
        max_attempts: Maximum Feistel applications before giving up

    Returns:
        Image of value in [0, n)

    Raises:
        DomainError: If n == 0 or value is outside [0, n)
        RetryExhaustedError: If the walk exceeds max_attempts
    """
    return CycleWalkFPE(n, key, rounds, schedule, hash_key, max_attempts).encrypt(value)


def fpe_inverse(
    value: int,
    n: int,
    key: int,
    rounds: int = DEFAULT_ROUNDS,
    schedule: str = "fixed",
    hash_key: Tuple[int, int] = DEFAULT_HASH_KEY,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """Inverse of fpe() for the same parameters."""
    return CycleWalkFPE(n, key, rounds, schedule, hash_key, max_attempts).decrypt(value)


def permutation(n: int, key: int, **kwargs) -> List[int]:
    """Full permutation [fpe(0), ..., fpe(n - 1)] as a list."""
    return list(CycleWalkFPE(n, key, **kwargs))
