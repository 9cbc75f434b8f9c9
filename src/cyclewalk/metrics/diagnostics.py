"""Statistical diagnostics for keyed permutations."""

from typing import Dict, Sequence, Union

import numpy as np
import torch

from cyclewalk.permutation.cycle_walk import CycleWalkFPE

ArrayLike = Union[Sequence[int], np.ndarray, torch.Tensor]


def _as_array(values: ArrayLike) -> np.ndarray:
    # uint64 so that outputs for n up to 2**64 fit; int64 tensors keep their bits
    if isinstance(values, torch.Tensor):
        return values.detach().cpu().numpy().astype(np.uint64).ravel()
    try:
        return np.asarray(values, dtype=np.uint64).ravel()
    except OverflowError as e:
        raise ValueError(f"values must be in [0, 2**64): {e}") from e


def is_permutation(values: ArrayLike, n: int) -> bool:
    """Check that values is a rearrangement of 0..n-1.

    Args:
        values: Outputs of the mapping for inputs 0..n-1
        n: Domain size

    Returns:
        True if every value in [0, n) appears exactly once
    """
    arr = _as_array(values)
    if len(arr) != n:
        return False
    return bool(np.array_equal(np.sort(arr), np.arange(n, dtype=np.uint64)))


def bit_flip_probabilities(values: ArrayLike, nbits: int) -> np.ndarray:
    """Per-bit flip frequency between consecutive outputs.

    For each j >= 1, XORs values[j - 1] and values[j] and counts how often
    each of the low nbits is set. Counts are normalized by len(values).

    Args:
        values: Outputs for consecutive inputs
        nbits: Number of low bits to inspect

    Returns:
        Array of shape [nbits]; entries near 0.5 indicate no bias
    """
    arr = _as_array(values)
    if len(arr) < 2:
        return np.zeros(nbits, dtype=np.float64)
    flips = arr[1:] ^ arr[:-1]
    shifts = np.arange(nbits, dtype=np.uint64)
    bits = (flips[:, None] >> shifts[None, :]) & np.uint64(1)
    return bits.sum(axis=0) / float(len(arr))


def key_sensitivity(outputs_a: ArrayLike, outputs_b: ArrayLike) -> float:
    """Fraction of positions where two keyed mappings disagree.

    Args:
        outputs_a: Outputs under the first key
        outputs_b: Outputs under the second key, same inputs

    Returns:
        Fraction in [0, 1]
    """
    a = _as_array(outputs_a)
    b = _as_array(outputs_b)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} vs {b.shape}")
    if len(a) == 0:
        return 0.0
    return float(np.mean(a != b))


def walk_length_stats(fpe: CycleWalkFPE, limit: int = 1 << 16) -> Dict[str, float]:
    """Summarize cycle-walk lengths over the first inputs of the domain.

    Args:
        fpe: Permutation to inspect
        limit: Maximum number of inputs to walk

    Returns:
        Dictionary with:
        - samples: int
        - mean: float
        - std: float
        - max: int
        - p99: float
        - embedding_ratio: float (n / 2^bits)
    """
    count = min(len(fpe), limit)
    lengths = np.array([fpe.walk(x)[1] for x in range(count)], dtype=np.int64)
    return {
        "samples": int(count),
        "mean": float(lengths.mean()),
        "std": float(lengths.std()),
        "max": int(lengths.max()),
        "p99": float(np.percentile(lengths, 99)),
        "embedding_ratio": fpe.n / float(1 << fpe.split.bits),
    }
