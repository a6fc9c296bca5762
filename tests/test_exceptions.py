"""Tests for the CargoError hierarchy and its rendering."""

from __future__ import annotations

import json

import pytest

from cargo_harness.exceptions import (
    CargoError,
    CommandFailedError,
    ErrorKind,
    InvalidCommandError,
    InvalidOutputError,
)


class TestErrorKinds:
    def test_subclasses_fix_kind(self):
        assert InvalidCommandError().kind is ErrorKind.INVALID_COMMAND
        assert CommandFailedError().kind is ErrorKind.COMMAND_FAILED
        assert InvalidOutputError().kind is ErrorKind.INVALID_OUTPUT

    def test_all_are_cargo_errors(self):
        for cls in (InvalidCommandError, CommandFailedError, InvalidOutputError):
            assert issubclass(cls, CargoError)

    def test_descriptions_match_kind(self):
        assert "Spawning" in ErrorKind.INVALID_COMMAND.description
        assert "returned an error" in ErrorKind.COMMAND_FAILED.description
        assert "Parsing" in ErrorKind.INVALID_OUTPUT.description


class TestRendering:
    def test_summary_only(self):
        err = CommandFailedError()
        assert str(err) == "Cargo command failed: The cargo subcommand returned an error."

    def test_context_block(self):
        err = CommandFailedError("error: could not compile `foo`\n")
        lines = str(err).splitlines()
        assert lines[0].startswith("Cargo command failed:")
        assert lines[1] == "error: could not compile `foo`"
        assert err.context == "error: could not compile `foo`\n"

    def test_cause_block(self):
        try:
            json.loads("{nope")
        except ValueError as e:
            err = InvalidOutputError("Invalid message: {nope", cause=e)
        rendered = str(err).splitlines()
        assert rendered[1] == "Invalid message: {nope"
        assert rendered[2].startswith("Cause: ")
        assert isinstance(err.cause, json.JSONDecodeError)

    def test_catchable_by_base(self):
        with pytest.raises(CargoError) as excinfo:
            raise InvalidCommandError("Could not run 'cargo'")
        assert excinfo.value.kind is ErrorKind.INVALID_COMMAND
