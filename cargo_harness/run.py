"""The ``run`` subcommand, emulated.

``cargo build`` is spawned and its artifact messages are filtered down to the
one binary the caller asked for. Compared with spawning ``cargo run``:
- the binary path can be cached, avoiding cargo overhead on later runs;
- the result does not depend on the current working directory;
- the program's stdout/stderr are free of cargo's own output.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cargo_harness.core.logging import get_logger
from cargo_harness.exceptions import CommandFailedError
from cargo_harness.messages import ProcessSpec, RawMessage, close_messages
from cargo_harness.models.message import CompilerArtifact, Message
from cargo_harness.observer import MessageObserver, log_message

log = get_logger(__name__)


def extract_bin(message: Message, desired_kind: str) -> Path | None:
    """Path of the executable ``message`` announces, if it is a ``desired_kind`` binary.

    Libraries, test harnesses and examples compiled as libraries never match.
    """
    if not isinstance(message, CompilerArtifact):
        return None
    if message.profile.test:
        return None
    if message.target.crate_types != ["bin"] or message.target.kind != [desired_kind]:
        return None
    if not message.filenames:
        return None
    return message.filenames[0]


def extract_binary_paths(
    messages: Iterable[RawMessage],
    kind: str,
    observer: MessageObserver = log_message,
    *,
    strict: bool = False,
) -> Iterator[Path]:
    """Yield every ``kind`` binary path announced by ``messages``, in order."""
    for raw in messages:
        message = raw.decode(strict=strict)
        observer(message)
        path = extract_bin(message, kind)
        if path is not None:
            yield path


def extract_binary_path(
    messages: Iterable[RawMessage],
    kind: str,
    observer: MessageObserver = log_message,
    *,
    strict: bool = False,
) -> Path:
    """Drain ``messages`` and return the single ``kind`` binary they announce.

    The first decode or process error aborts the drain and propagates.
    """
    try:
        found = list(extract_binary_paths(messages, kind, observer, strict=strict))
    finally:
        close_messages(messages)
    # cargo may report the same artifact more than once
    bins = list(dict.fromkeys(found))
    if not bins:
        raise CommandFailedError("No binaries in crate")
    if len(bins) != 1:
        listing = ", ".join(f'"{b}"' for b in bins)
        raise CommandFailedError(f"Ambiguous which binary is intended: [{listing}]")
    return bins[0]


@dataclass(frozen=True)
class CargoRun:
    """A binary built by cargo, ready to run.

    Created via ``CargoBuild.run()``.
    """

    path: Path
    kind: str = "bin"

    @classmethod
    def from_messages(
        cls,
        messages: Iterable[RawMessage],
        is_bin: bool,
        is_example: bool,
        observer: MessageObserver = log_message,
        *,
        strict: bool = False,
    ) -> CargoRun:
        if is_bin and is_example:
            close_messages(messages)
            raise CommandFailedError("Ambiguous which binary is intended, multiple selected")
        kind = "example" if is_example else "bin"
        path = extract_binary_path(messages, kind, observer, strict=strict)
        log.debug("resolved binary", path=str(path), kind=kind)
        return cls(path=path, kind=kind)

    def command(self, *args: str) -> list[str]:
        """Argument vector running the binary with ``args``."""
        return [str(self.path), *args]

    def spec(self, *args: str, cwd: str | None = None) -> ProcessSpec:
        return ProcessSpec(program=str(self.path), args=list(args), cwd=cwd)

    def run(self, *args: str, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """Run the binary; keyword arguments go to ``subprocess.run``."""
        return subprocess.run(self.command(*args), **kwargs)
