"""Tests for permutation diagnostics."""

import numpy as np
import pytest
import torch

from cyclewalk import (
    CycleWalkFPE,
    bit_flip_probabilities,
    is_permutation,
    key_sensitivity,
    permutation,
    walk_length_stats,
)


def test_is_permutation_accepts_rearrangement() -> None:
    assert is_permutation([2, 0, 1], 3)
    assert is_permutation(np.array([1, 0]), 2)
    assert is_permutation(torch.tensor([3, 1, 0, 2]), 4)


def test_is_permutation_rejects_duplicates_and_gaps() -> None:
    assert not is_permutation([0, 0, 1], 3)
    assert not is_permutation([0, 1, 3], 3)
    assert not is_permutation([0, 1], 3)


def test_is_permutation_full_width_outputs(key: int) -> None:
    """Outputs of a 2**64 domain may exceed the int64 range."""
    f = CycleWalkFPE(n=2**64, key=key)
    outputs = [f.encrypt(x) for x in range(4)]
    assert not is_permutation(outputs, 4)
    outputs.append(2**64 - 1)
    assert not is_permutation(outputs, 5)
    assert is_permutation([2**64 - 1, 0], 2) is False
    p = bit_flip_probabilities(outputs, nbits=64)
    assert p.shape == (64,)
    assert np.all((p >= 0.0) & (p <= 1.0))
    assert key_sensitivity(outputs, outputs) == 0.0


def test_bit_flip_probabilities_known_sequence() -> None:
    """0 -> 1 -> 3 -> 2 flips bit 0 twice and bit 1 once."""
    p = bit_flip_probabilities([0, 1, 3, 2], nbits=2)
    np.testing.assert_allclose(p, [2 / 4, 1 / 4])


def test_bit_flip_probabilities_short_input() -> None:
    assert bit_flip_probabilities([5], nbits=3).tolist() == [0.0, 0.0, 0.0]


def test_bit_flip_probabilities_keyed_permutation(key: int) -> None:
    p = bit_flip_probabilities(permutation(4096, key), nbits=12)
    assert p.shape == (12,)
    assert np.all(np.abs(p - 0.5) < 0.125)


def test_key_sensitivity() -> None:
    assert key_sensitivity([1, 2, 3, 4], [1, 2, 3, 4]) == 0.0
    assert key_sensitivity([1, 2, 3, 4], [1, 2, 4, 3]) == 0.5
    assert key_sensitivity([], []) == 0.0
    with pytest.raises(ValueError, match="shape mismatch"):
        key_sensitivity([1, 2], [1, 2, 3])


def test_walk_length_stats(key: int) -> None:
    stats = walk_length_stats(CycleWalkFPE(n=1024, key=key))
    assert stats["samples"] == 1024
    assert stats["mean"] == 1.0
    assert stats["max"] == 1
    assert stats["embedding_ratio"] == 1.0

    stats = walk_length_stats(CycleWalkFPE(n=1025, key=key), limit=500)
    assert stats["samples"] == 500
    assert stats["mean"] > 1.0
    assert stats["embedding_ratio"] == pytest.approx(1025 / 2048)


def test_walk_length_stats_single_element(key: int) -> None:
    stats = walk_length_stats(CycleWalkFPE(n=1, key=key))
    assert stats["samples"] == 1
    assert stats["max"] == 0
    assert stats["embedding_ratio"] == 1.0
