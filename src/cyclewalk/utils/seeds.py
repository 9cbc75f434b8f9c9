"""Seed management for determinism."""

import random

import numpy as np


def seed_everything(seed: int) -> None:
    """Set all random seeds for deterministic behavior.

    Sets seeds for Python random, NumPy, and PyTorch (CPU and CUDA).
    The permutation itself is keyed and needs no seeding; this covers the
    random sampling done by tests and benchmarks.

    Args:
        seed: Random seed value (should be non-negative integer)
    """
    import torch

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
