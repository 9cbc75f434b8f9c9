"""Performance profiling utilities."""

import logging
import time
from contextlib import contextmanager
from typing import Dict, Generator, Optional


@contextmanager
def timer(
    name: str,
    use_cuda_sync: bool = True,
    logger: Optional[logging.Logger] = None,
) -> Generator[Dict[str, float], None, None]:
    """Context manager for timing a block.

    Args:
        name: Name identifier for the profiled operation
        use_cuda_sync: If True, synchronize CUDA before timing (default: True)
        logger: Logger to report to; prints when None

    Yields:
        Dictionary whose "elapsed" entry is filled in on exit

    Example:
        >>> with timer("fpe") as t:
        ...     result = expensive_operation()
        >>> t["elapsed"]
    """
    import torch

    result: Dict[str, float] = {}
    sync = use_cuda_sync and torch.cuda.is_available()
    if sync:
        torch.cuda.synchronize()
    start = time.perf_counter()

    yield result

    if sync:
        torch.cuda.synchronize()
    result["elapsed"] = time.perf_counter() - start
    message = f"{name}: {result['elapsed']:.4f}s"
    if logger is not None:
        logger.info(message)
    else:
        print(message)
