"""cyclewalk: keyed format-preserving permutations of [0, n)."""

from .config import PermutationConfig, load_config, load_permutation_config
from .errors import DomainError, RetryExhaustedError
from .metrics import (
    bit_flip_probabilities,
    is_permutation,
    key_sensitivity,
    walk_length_stats,
)
from .permutation import (
    DEFAULT_HASH_KEY,
    CycleWalkFPE,
    DomainSplit,
    Feistel,
    derive_key,
    feistel,
    feistel_inverse,
    fpe,
    fpe_inverse,
    mix,
    permutation,
)
from .utils import get_logger, resolve_device, seed_everything, timer

__version__ = "0.1.0"

__all__ = [
    # Core
    "mix",
    "derive_key",
    "feistel",
    "feistel_inverse",
    "fpe",
    "fpe_inverse",
    "permutation",
    "Feistel",
    "CycleWalkFPE",
    "DomainSplit",
    "DEFAULT_HASH_KEY",
    # Errors
    "DomainError",
    "RetryExhaustedError",
    # Config
    "PermutationConfig",
    "load_config",
    "load_permutation_config",
    # Diagnostics
    "is_permutation",
    "bit_flip_probabilities",
    "key_sensitivity",
    "walk_length_stats",
    # Utils
    "get_logger",
    "resolve_device",
    "seed_everything",
    "timer",
]
