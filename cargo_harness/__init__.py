"""cargo-harness: drive cargo subcommands and read their JSON messages."""

__version__ = "0.1.0"

from cargo_harness.build import CargoBuild, CargoTestCommand
from cargo_harness.cargo import Cargo
from cargo_harness.core.config import current_target
from cargo_harness.exceptions import (
    CargoError,
    CommandFailedError,
    ErrorKind,
    InvalidCommandError,
    InvalidOutputError,
)
from cargo_harness.messages import CommandMessages, ProcessSpec, RawMessage, RecordedMessages
from cargo_harness.observer import MessageObserver, log_message, null_observer, print_message
from cargo_harness.run import CargoRun
from cargo_harness.testbins import CargoTest, TestArtifacts

__all__ = [
    "Cargo",
    "CargoBuild",
    "CargoError",
    "CargoRun",
    "CargoTest",
    "CargoTestCommand",
    "CommandFailedError",
    "CommandMessages",
    "ErrorKind",
    "InvalidCommandError",
    "InvalidOutputError",
    "MessageObserver",
    "ProcessSpec",
    "RawMessage",
    "RecordedMessages",
    "TestArtifacts",
    "current_target",
    "log_message",
    "null_observer",
    "print_message",
]
