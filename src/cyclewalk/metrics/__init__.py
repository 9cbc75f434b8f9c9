"""Metrics module for cyclewalk."""

from cyclewalk.metrics.diagnostics import (
    bit_flip_probabilities,
    is_permutation,
    key_sensitivity,
    walk_length_stats,
)

__all__ = [
    "is_permutation",
    "bit_flip_probabilities",
    "key_sensitivity",
    "walk_length_stats",
]
