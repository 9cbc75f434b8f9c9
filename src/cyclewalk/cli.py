"""Command-line driver: print a keyed permutation of 0..n-1."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from cyclewalk.config import PermutationConfig, load_permutation_config
from cyclewalk.errors import DomainError, RetryExhaustedError
from cyclewalk.utils import get_logger, resolve_device


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the permutation driver."""
    parser = argparse.ArgumentParser(
        prog="cyclewalk",
        description="Print a keyed pseudo-random permutation of 0..n-1, one value per line",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("-n", "--n", type=int, default=None, help="Domain size (default 1024)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for key derivation")
    parser.add_argument(
        "--key", type=lambda s: int(s, 0), default=None,
        help="Explicit round key (overrides --seed), e.g. 0x1234",
    )
    parser.add_argument("--rounds", type=int, default=None, help="Feistel rounds")
    parser.add_argument(
        "--schedule", choices=["fixed", "derived"], default=None,
        help="Round key schedule",
    )
    parser.add_argument(
        "--max-attempts", dest="max_attempts", type=int, default=None,
        help="Maximum Feistel applications per cycle walk",
    )
    parser.add_argument(
        "--inverse", action="store_true",
        help="Print the inverse permutation instead",
    )
    parser.add_argument(
        "--tensor", action="store_true",
        help="Compute with the vectorized torch path",
    )
    parser.add_argument(
        "--device", choices=["cpu", "cuda", "auto"], default=None,
        help="Device for --tensor",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    logger = get_logger("cyclewalk", log_file=args.log_file, level=level)

    try:
        base = load_permutation_config(args.config) if args.config else PermutationConfig()
        config = base.replace(
            n=args.n,
            seed=args.seed,
            key=args.key,
            rounds=args.rounds,
            schedule=args.schedule,
            max_attempts=args.max_attempts,
            device=args.device,
        )
        fpe = config.build()
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error("invalid configuration: %s", e)
        return 2

    logger.info(
        "n=%d key=0x%016x rounds=%d schedule=%s",
        fpe.n, fpe.key, fpe.rounds, fpe.schedule,
    )

    try:
        if args.tensor:
            import torch

            device = resolve_device(config.device)
            x = torch.arange(fpe.n, dtype=torch.long, device=device)
            out = fpe.decrypt_tensor(x) if args.inverse else fpe.encrypt_tensor(x)
            values = out.cpu().tolist()
        else:
            step = fpe.decrypt if args.inverse else fpe.encrypt
            values = (step(i) for i in range(fpe.n))
        for value in values:
            sys.stdout.write(f"{value}\n")
    except DomainError as e:
        logger.error("%s", e)
        return 2
    except RetryExhaustedError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
