"""Configuration loading utilities."""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from cyclewalk.errors import DomainError
from cyclewalk.permutation.cycle_walk import DEFAULT_MAX_ATTEMPTS, CycleWalkFPE
from cyclewalk.permutation.feistel import DEFAULT_ROUNDS, SCHEDULES
from cyclewalk.permutation.hash_mix import (
    DEFAULT_HASH_KEY,
    DEFAULT_SEED,
    check_positive_int,
    check_u64,
    derive_key,
)


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}

    return config


@dataclass(frozen=True)
class PermutationConfig:
    """Parameters for building a keyed permutation.

    The round key is `key` when given, otherwise it is derived from `seed`
    through the mixer keyed with (hash_key_lo, hash_key_hi).

    Attributes:
        n: Domain size
        seed: Seed for round key derivation
        key: Explicit round key (uint64), overrides seed
        hash_key_lo: Low word of the mixer key
        hash_key_hi: High word of the mixer key
        rounds: Number of Feistel rounds
        schedule: Round key schedule, "fixed" or "derived"
        max_attempts: Maximum Feistel applications per cycle walk
        device: Device for the tensor path ("cpu", "cuda" or "auto")
    """

    n: int = 1024
    seed: int = DEFAULT_SEED
    key: Optional[int] = None
    hash_key_lo: int = DEFAULT_HASH_KEY[0]
    hash_key_hi: int = DEFAULT_HASH_KEY[1]
    rounds: int = DEFAULT_ROUNDS
    schedule: str = "fixed"
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    device: str = "cpu"

    def __post_init__(self) -> None:
        """Validate parameters."""
        check_positive_int("n", self.n)
        check_u64("seed", self.seed)
        if self.key is not None:
            check_u64("key", self.key)
        check_u64("hash_key_lo", self.hash_key_lo)
        check_u64("hash_key_hi", self.hash_key_hi)
        check_positive_int("rounds", self.rounds)
        if self.schedule not in SCHEDULES:
            raise DomainError(f"schedule must be one of {SCHEDULES}, got {self.schedule!r}")
        check_positive_int("max_attempts", self.max_attempts)
        if self.device not in ("cpu", "cuda", "auto"):
            raise DomainError(f"device must be 'cpu', 'cuda' or 'auto', got {self.device}")

    @property
    def hash_key(self) -> Tuple[int, int]:
        return (self.hash_key_lo, self.hash_key_hi)

    def resolve_key(self) -> int:
        """Round key: explicit key, or derived from seed."""
        if self.key is not None:
            return self.key
        return derive_key(self.seed, self.hash_key)

    def build(self) -> CycleWalkFPE:
        """Build the permutation described by this config."""
        return CycleWalkFPE(
            n=self.n,
            key=self.resolve_key(),
            rounds=self.rounds,
            schedule=self.schedule,
            hash_key=self.hash_key,
            max_attempts=self.max_attempts,
        )

    def replace(self, **overrides: Any) -> "PermutationConfig":
        """Copy with the non-None overrides applied."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PermutationConfig(**values)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "PermutationConfig":
        """Build from a mapping, rejecting unknown keys.

        Raises:
            ValueError: If config is not a mapping or has keys that are not fields
        """
        if not isinstance(config, dict):
            raise ValueError(f"config must be a mapping, got {type(config).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**config)


def load_permutation_config(config_path: Path) -> PermutationConfig:
    """Load a PermutationConfig from a YAML file."""
    return PermutationConfig.from_dict(load_config(config_path))
