#!/usr/bin/env python3
"""Micro-benchmark for the mixer and the cycle-walking permutation.

Measures a 100-step mix chain and 100 fpe() calls over n = 2,500,000,
plus the vectorized tensor path on the full domain. Not part of the unit
test suite.
"""

import argparse
import json
import random
import sys
import time
from pathlib import Path
from typing import Any, Dict

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

import torch

from cyclewalk import CycleWalkFPE, mix, walk_length_stats
from cyclewalk.permutation.hash_mix import DEFAULT_HASH_KEY
from cyclewalk.utils import get_logger, resolve_device, seed_everything, timer

logger = get_logger("bench_fpe")


def bench_mix_chain(iters: int, chain: int = 100) -> Dict[str, Any]:
    """Time chains of x = mix(x) starting from a random word."""
    key_lo, key_hi = DEFAULT_HASH_KEY
    start = time.perf_counter()
    for _ in range(iters):
        x = random.getrandbits(64)
        for _ in range(chain):
            x = mix(key_lo, key_hi, x)
    elapsed = time.perf_counter() - start
    calls = iters * chain
    return {
        "method": "mix",
        "calls": calls,
        "total_sec": elapsed,
        "avg_usec": (elapsed / calls) * 1e6,
    }


def bench_fpe_scalar(fpe: CycleWalkFPE, iters: int, batch: int = 100) -> Dict[str, Any]:
    """Time batches of encrypt(0..batch-1)."""
    start = time.perf_counter()
    for _ in range(iters):
        for i in range(batch):
            fpe.encrypt(i)
    elapsed = time.perf_counter() - start
    calls = iters * batch
    return {
        "method": "encrypt()",
        "n": fpe.n,
        "calls": calls,
        "total_sec": elapsed,
        "avg_usec": (elapsed / calls) * 1e6,
        "ops_per_sec": calls / elapsed,
    }


def bench_fpe_tensor(fpe: CycleWalkFPE, device: torch.device) -> Dict[str, Any]:
    """Time encrypt_tensor over the whole domain."""
    x = torch.arange(fpe.n, dtype=torch.long, device=device)
    fpe.encrypt_tensor(x[:1024])  # warmup
    with timer("encrypt_tensor", logger=logger) as t:
        fpe.encrypt_tensor(x)
    return {
        "method": "encrypt_tensor()",
        "n": fpe.n,
        "device": str(device),
        "calls": fpe.n,
        "total_sec": t["elapsed"],
        "ops_per_sec": fpe.n / t["elapsed"],
    }


def main():
    """Run permutation benchmarks."""
    parser = argparse.ArgumentParser(description="Benchmark cyclewalk")
    parser.add_argument("--n", type=int, default=2_500_000, help="Domain size")
    parser.add_argument("--iters", type=int, default=200, help="Timed iterations")
    parser.add_argument("--device", choices=["cpu", "cuda", "auto"], default="cpu")
    parser.add_argument("--out", type=Path, default=None, help="Write results as JSON")
    args = parser.parse_args()

    seed_everything(42)
    fpe = CycleWalkFPE(n=args.n, key=random.getrandbits(64))
    device = resolve_device(args.device)

    results = [
        bench_mix_chain(args.iters),
        bench_fpe_scalar(fpe, args.iters),
        bench_fpe_tensor(fpe, device),
    ]
    stats = walk_length_stats(fpe, limit=10_000)

    for r in results:
        logger.info(json.dumps(r))
    logger.info(f"walk lengths: {stats}")

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        with open(args.out, "w") as f:
            json.dump({"results": results, "walk_lengths": stats}, f, indent=2)
        logger.info(f"Wrote {args.out}")


if __name__ == "__main__":
    main()
