"""Custom exceptions for cargo-harness."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """For programmatically processing failures."""

    INVALID_COMMAND = "invalid_command"
    COMMAND_FAILED = "command_failed"
    INVALID_OUTPUT = "invalid_output"

    @property
    def description(self) -> str:
        return _KIND_DESCRIPTIONS[self]


_KIND_DESCRIPTIONS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_COMMAND: "Spawning the cargo subcommand failed.",
    ErrorKind.COMMAND_FAILED: "The cargo subcommand returned an error.",
    ErrorKind.INVALID_OUTPUT: "Parsing the cargo subcommand's output failed.",
}


class CargoError(Exception):
    """Base exception for all cargo command failures.

    Carries the failure ``kind``, an optional human-readable ``context``
    (captured stderr, or a description of an unresolvable artifact request)
    and the underlying ``cause`` when one exists.
    """

    kind: ErrorKind = ErrorKind.COMMAND_FAILED

    def __init__(
        self,
        context: str | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        self.context = context
        self.cause = cause
        super().__init__(self.render())

    def render(self) -> str:
        lines = [f"Cargo command failed: {self.kind.description}"]
        if self.context:
            lines.append(self.context.rstrip("\n"))
        if self.cause is not None:
            lines.append(f"Cause: {self.cause}")
        return "\n".join(lines)


class InvalidCommandError(CargoError):
    """Raised when the cargo subcommand could not be spawned."""

    kind = ErrorKind.INVALID_COMMAND


class CommandFailedError(CargoError):
    """Raised when the subcommand exited with a failure status, or the
    requested artifact could not be resolved from its output."""

    kind = ErrorKind.COMMAND_FAILED


class InvalidOutputError(CargoError):
    """Raised when a line of output is not valid JSON or does not match the schema."""

    kind = ErrorKind.INVALID_OUTPUT
