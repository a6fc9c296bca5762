"""Test harness binaries produced by a cargo build.

``CargoBuild.run_tests()`` yields one ``CargoTest`` per compiled test
harness, lazily, while cargo is still building.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any

from cargo_harness.messages import CommandMessages, ProcessSpec, RawMessage, close_messages
from cargo_harness.models.message import CompilerArtifact, Message
from cargo_harness.observer import MessageObserver, log_message

# libtest only emits JSON events behind the unstable flag
JSON_FORMAT_ARGS = ("-Z", "unstable-options", "--format=json")


@dataclass(frozen=True)
class CargoTest:
    """A compiled test harness."""

    path: Path
    kind: str  # "bin", "lib", "test", ...
    name: str

    def command(self, *args: str) -> list[str]:
        return [str(self.path), *args]

    def spec(self, *args: str, cwd: str | None = None) -> ProcessSpec:
        return ProcessSpec(program=str(self.path), args=list(args), cwd=cwd)

    def run(self, *args: str, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """Run the harness; keyword arguments go to ``subprocess.run``."""
        return subprocess.run(self.command(*args), **kwargs)

    def exec(self, *args: str) -> CommandMessages:
        """Run the harness with JSON output; decode lines with ``RawMessage.decode_event``.

        A failing test makes the harness exit non-zero, so the stream ends
        with ``CommandFailedError``.
        """
        return CommandMessages.from_command(self.spec(*JSON_FORMAT_ARGS, *args))


def extract_test(message: Message) -> CargoTest | None:
    if not isinstance(message, CompilerArtifact):
        return None
    if not message.profile.test or not message.filenames:
        return None
    kind = message.target.kind[0] if message.target.kind else ""
    return CargoTest(path=message.filenames[0], kind=kind, name=message.target.name)


class TestArtifacts(Iterator[CargoTest]):
    """Lazy sequence of test harnesses announced by a message stream.

    A record that fails to decode raises ``InvalidOutputError`` from
    ``next()`` but leaves the sequence usable: the following ``next()``
    continues with the next record. A failure of the cargo process itself
    raises ``CommandFailedError`` once and then ends the sequence.
    """

    __test__ = False

    def __init__(
        self,
        messages: Iterable[RawMessage],
        observer: MessageObserver = log_message,
        *,
        strict: bool = False,
    ) -> None:
        self._source = messages
        self._messages = iter(messages)
        self._observer = observer
        self._strict = strict

    def __iter__(self) -> TestArtifacts:
        return self

    def __next__(self) -> CargoTest:
        while True:
            raw = next(self._messages)
            message = raw.decode(strict=self._strict)
            self._observer(message)
            test = extract_test(message)
            if test is not None:
                return test

    def close(self) -> None:
        close_messages(self._source)

    def __enter__(self) -> TestArtifacts:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def extract_tests(
    messages: Iterable[RawMessage],
    observer: MessageObserver = log_message,
    *,
    strict: bool = False,
) -> TestArtifacts:
    return TestArtifacts(messages, observer, strict=strict)
