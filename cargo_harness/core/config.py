"""Process-wide settings resolved once from the environment.

Environment variables:
    CARGO                 cargo executable (default: cargo)
    CARGO_HARNESS_TARGET  target triple of the current process
                            (default: host reported by ``rustc -vV``)
    RUSTC                 rustc executable used for the host lookup
"""

from __future__ import annotations

import os
import platform
import subprocess
from functools import lru_cache

from cargo_harness.core.logging import get_logger

log = get_logger(__name__)

_DEFAULT_CARGO = "cargo"
_DEFAULT_RUSTC = "rustc"

_MACHINE_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i686": "i686",
    "i386": "i686",
}

_SYSTEM_VENDORS: dict[str, str] = {
    "linux": "unknown-linux-gnu",
    "darwin": "apple-darwin",
    "windows": "pc-windows-msvc",
    "freebsd": "unknown-freebsd",
}


@lru_cache(maxsize=None)
def cargo_bin() -> str:
    """Cargo executable used for every spawned subcommand."""
    return os.environ.get("CARGO", _DEFAULT_CARGO)


@lru_cache(maxsize=None)
def current_target() -> str:
    """Target triple of the current process."""
    override = os.environ.get("CARGO_HARNESS_TARGET")
    if override:
        return override
    host = _rustc_host()
    if host:
        return host
    triple = _platform_triple()
    log.debug("rustc unavailable, guessing target triple", triple=triple)
    return triple


def is_release() -> bool:
    """Whether the interpreter runs optimised (``python -O``).

    Used by ``current_release()`` builders as the analogue of a release build.
    """
    return not __debug__


def cache_clear() -> None:
    """Forget cached lookups so the environment is read again."""
    cargo_bin.cache_clear()
    current_target.cache_clear()


def _rustc_host() -> str | None:
    """Read the ``host:`` line of ``rustc -vV``."""
    rustc = os.environ.get("RUSTC", _DEFAULT_RUSTC)
    try:
        result = subprocess.run(
            [rustc, "-vV"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.SubprocessError, FileNotFoundError):
        return None
    if result.returncode != 0:
        return None
    for line in result.stdout.splitlines():
        if line.startswith("host:"):
            return line.split(":", 1)[1].strip() or None
    return None


def _platform_triple() -> str:
    machine = platform.machine().lower()
    arch = _MACHINE_ALIASES.get(machine, machine or "unknown")
    system = platform.system().lower()
    vendor = _SYSTEM_VENDORS.get(system, f"unknown-{system or 'unknown'}")
    return f"{arch}-{vendor}"
