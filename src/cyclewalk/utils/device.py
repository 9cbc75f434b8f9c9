"""Device management utilities."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import torch


def resolve_device(device: str) -> "torch.device":
    """Resolve device string to torch.device.

    Args:
        device: Device string ("cpu", "cuda" or "auto")

    Returns:
        torch.device object

    Raises:
        ValueError: If device string is not recognized
        RuntimeError: If CUDA is requested but not available
    """
    import torch

    if device == "auto":
        return torch.device("cuda" if torch.cuda.is_available() else "cpu")
    if device == "cpu":
        return torch.device("cpu")
    elif device == "cuda":
        if not torch.cuda.is_available():
            raise RuntimeError("CUDA requested but not available")
        return torch.device("cuda")
    else:
        raise ValueError(f"device must be 'cpu', 'cuda' or 'auto', got {device}")
