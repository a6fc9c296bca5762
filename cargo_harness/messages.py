"""Streaming reader over a cargo subcommand's line-delimited JSON output.

``CommandMessages`` owns the spawned child process. Each ``next()`` reads one
line from the child's stdout and hands it back as a ``RawMessage`` straight
away, so callers see compiler diagnostics while the build is still running.
At end of output the exit status decides between a clean stop and a
``CommandFailedError`` carrying the child's stderr.
"""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, NoReturn, TypeVar

from pydantic import BaseModel, TypeAdapter

from cargo_harness.core.logging import get_logger
from cargo_harness.exceptions import (
    CommandFailedError,
    InvalidCommandError,
    InvalidOutputError,
)
from cargo_harness.models.message import Message, decode_message
from cargo_harness.models.test_event import Event, decode_event

log = get_logger(__name__)

T = TypeVar("T")


@dataclass
class ProcessSpec:
    """A fully formed process invocation handed over by the builders."""

    program: str
    args: list[str] = field(default_factory=list)
    cwd: str | None = None
    # None removes the variable from the inherited environment
    env: dict[str, str | None] = field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def environ(self) -> dict[str, str] | None:
        """Environment for the child, or None to inherit ours unchanged."""
        if not self.env:
            return None
        merged = dict(os.environ)
        for key, value in self.env.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return merged


@dataclass(frozen=True)
class RawMessage:
    """One line of cargo output, without its line separator."""

    text: str

    def json(self) -> Any:
        try:
            return json.loads(self.text)
        except (ValueError, RecursionError) as e:
            raise InvalidOutputError(_excerpt(self.text), cause=e) from e

    def decode(self, *, strict: bool = False) -> Message:
        """Deserialize as a cargo message."""
        data = self.json()
        try:
            return decode_message(data, strict=strict)
        except ValueError as e:
            raise InvalidOutputError(_excerpt(self.text), cause=e) from e

    def decode_event(self, *, strict: bool = False) -> Event:
        """Deserialize as a libtest event."""
        data = self.json()
        try:
            return decode_event(data, strict=strict)
        except ValueError as e:
            raise InvalidOutputError(_excerpt(self.text), cause=e) from e

    def decode_custom(self, schema: type[BaseModel] | TypeAdapter[T]) -> Any:
        """Deserialize against a caller-supplied pydantic model or TypeAdapter."""
        try:
            if isinstance(schema, TypeAdapter):
                return schema.validate_json(self.text)
            return schema.model_validate_json(self.text)
        except ValueError as e:
            raise InvalidOutputError(_excerpt(self.text), cause=e) from e


def _excerpt(text: str, limit: int = 200) -> str:
    if len(text) > limit:
        text = text[:limit] + "..."
    return f"Invalid message: {text}"


class CommandMessages(Iterator[RawMessage]):
    """Messages returned from a cargo subcommand.

    Use as an iterator, ideally inside a ``with`` block. The child process is
    waited on exactly once: at end of output, or by ``close()`` when the
    caller stops early (``close()`` also runs on ``__exit__`` and when the
    object is garbage collected).
    """

    def __init__(self, process: subprocess.Popen[bytes], argv: list[str] | None = None) -> None:
        if process.stdout is None:
            raise ValueError("cargo stdout must be piped")
        self._process = process
        self._stdout = process.stdout
        self._argv = argv or []
        self._done = False

    @classmethod
    def from_command(cls, spec: ProcessSpec) -> CommandMessages:
        """Spawn ``spec`` with stdout and stderr piped."""
        argv = spec.argv
        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=spec.cwd,
                env=spec.environ(),
            )
        except OSError as e:
            raise InvalidCommandError(f"Could not run {spec.program!r}", cause=e) from e
        log.debug("spawned cargo subcommand", argv=argv, pid=process.pid)
        return cls(process, argv)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        """Exit status once the child has been reaped, else None."""
        return self._process.returncode

    @property
    def done(self) -> bool:
        return self._done

    def __iter__(self) -> CommandMessages:
        return self

    def __next__(self) -> RawMessage:
        if self._done:
            raise StopIteration
        try:
            line = self._stdout.readline()
        except OSError as e:
            raise InvalidOutputError("Failed to read cargo output", cause=e) from e
        if line:
            try:
                text = line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidOutputError("Cargo output is not valid UTF-8", cause=e) from e
            return RawMessage(text.rstrip("\r\n"))
        self._finish()

    def _finish(self) -> NoReturn:
        # communicate() drains stderr while waiting, so a child still writing
        # to a full stderr pipe cannot block the wait
        try:
            _, stderr = self._process.communicate()
        except OSError as e:
            # left unfinished so close() still reaps the child
            raise InvalidOutputError("Failed to wait on cargo", cause=e) from e
        self._done = True
        returncode = self._process.returncode
        log.debug("cargo subcommand exited", argv=self._argv, returncode=returncode)
        if returncode != 0:
            raise CommandFailedError(stderr.decode("utf-8", errors="replace"))
        raise StopIteration

    def close(self) -> None:
        """Reap the child if output was not read to the end. Never raises."""
        if self._done:
            return
        self._done = True
        process = self._process
        for pipe in (process.stdout, process.stderr):
            if pipe is None:
                continue
            try:
                pipe.close()
            except OSError:
                log.debug("failed to close cargo pipe", pid=process.pid, exc_info=True)
        try:
            process.wait()
        except OSError:
            log.debug("failed to reap cargo process", pid=process.pid, exc_info=True)

    def __enter__(self) -> CommandMessages:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if "_process" in self.__dict__:
            self.close()


class RecordedMessages(Iterator[RawMessage]):
    """Replay already-captured cargo output, one line per message.

    Useful for output saved to a log file. Unlike ``CommandMessages`` there is
    no process behind it, so it never raises ``CommandFailedError``.
    """

    def __init__(self, output: str) -> None:
        self._lines = iter(output.splitlines())

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> RecordedMessages:
        """Build from already-parsed JSON objects."""
        return cls("\n".join(json.dumps(dict(record)) for record in records))

    def __iter__(self) -> RecordedMessages:
        return self

    def __next__(self) -> RawMessage:
        return RawMessage(next(self._lines))

    def close(self) -> None:
        self._lines = iter(())

    def __enter__(self) -> RecordedMessages:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def close_messages(messages: object) -> None:
    """Close a message source if it supports it."""
    close = getattr(messages, "close", None)
    if close is not None:
        close()
