"""Utilities module for cyclewalk."""

from cyclewalk.utils.device import resolve_device
from cyclewalk.utils.logger import get_logger
from cyclewalk.utils.profiling import timer
from cyclewalk.utils.seeds import seed_everything

__all__ = [
    "get_logger",
    "resolve_device",
    "seed_everything",
    "timer",
]
