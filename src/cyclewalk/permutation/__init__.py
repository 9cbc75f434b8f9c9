"""Keyed permutation modules."""

from .cycle_walk import (
    DEFAULT_MAX_ATTEMPTS,
    CycleWalkFPE,
    DomainSplit,
    fpe,
    fpe_inverse,
    permutation,
)
from .feistel import DEFAULT_ROUNDS, Feistel, feistel, feistel_inverse, round_keys
from .hash_mix import DEFAULT_HASH_KEY, DEFAULT_SEED, MASK64, derive_key, mix, u64

__all__ = [
    "mix",
    "derive_key",
    "u64",
    "MASK64",
    "DEFAULT_HASH_KEY",
    "DEFAULT_SEED",
    "Feistel",
    "feistel",
    "feistel_inverse",
    "round_keys",
    "DEFAULT_ROUNDS",
    "DomainSplit",
    "CycleWalkFPE",
    "fpe",
    "fpe_inverse",
    "permutation",
    "DEFAULT_MAX_ATTEMPTS",
]
