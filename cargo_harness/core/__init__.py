"""Process-wide settings and logging setup."""

from cargo_harness.core.config import cache_clear, cargo_bin, current_target, is_release
from cargo_harness.core.logging import setup_logging

__all__ = [
    "cache_clear",
    "cargo_bin",
    "current_target",
    "is_release",
    "setup_logging",
]
