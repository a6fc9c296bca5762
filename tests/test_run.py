"""Tests for resolving the single binary a build produced."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from cargo_harness.exceptions import CommandFailedError, InvalidOutputError
from cargo_harness.messages import CommandMessages, RawMessage, RecordedMessages
from cargo_harness.models import decode_message
from cargo_harness.observer import null_observer
from cargo_harness.run import CargoRun, extract_bin, extract_binary_path, extract_binary_paths
from cargo_harness.testing import (
    artifact,
    build_finished,
    compiler_message,
    fake_cargo,
)


def _stream(*records, **kwargs) -> CommandMessages:
    return CommandMessages.from_command(fake_cargo(records, **kwargs))


class _Untouchable:
    """Message source that fails if read; records whether it was closed."""

    def __init__(self):
        self.closed = False

    def __iter__(self):
        raise AssertionError("messages must not be read")

    def close(self):
        self.closed = True


class TestExtractBin:
    def test_binary(self):
        msg = decode_message(artifact("app", filenames=["/tmp/x/app"]))
        assert extract_bin(msg, "bin") == Path("/tmp/x/app")

    def test_wrong_kind(self):
        msg = decode_message(artifact("app"))
        assert extract_bin(msg, "example") is None

    def test_library(self):
        msg = decode_message(artifact("core", kind=("lib",)))
        assert extract_bin(msg, "bin") is None

    def test_example_built_as_library(self):
        msg = decode_message(artifact("plugin", kind=("example",), crate_types=("cdylib",)))
        assert extract_bin(msg, "example") is None

    def test_test_profile(self):
        msg = decode_message(artifact("app", test=True))
        assert extract_bin(msg, "bin") is None

    def test_other_messages(self):
        assert extract_bin(decode_message(build_finished()), "bin") is None
        assert extract_bin(decode_message(compiler_message("unused")), "bin") is None


class TestFromMessages:
    def test_single_binary(self):
        stdout = artifact("bin1", filenames=["/tmp/x/bin1"])
        run = CargoRun.from_messages(_stream(stdout), True, False, null_observer)
        assert run.path == Path("/tmp/x/bin1")
        assert run.kind == "bin"

    def test_skips_non_binaries(self):
        stream = _stream(
            artifact("dep", kind=("lib",)),
            compiler_message("unused variable"),
            artifact("app", filenames=["/tmp/t/app"]),
            artifact("app", filenames=["/tmp/t/app-test"], test=True),
            build_finished(),
        )
        run = CargoRun.from_messages(stream, True, False, null_observer)
        assert run.path == Path("/tmp/t/app")

    def test_example(self):
        stream = _stream(
            artifact("app", filenames=["/tmp/t/app"]),
            artifact("demo", kind=("example",), filenames=["/tmp/t/examples/demo"]),
        )
        run = CargoRun.from_messages(stream, False, True, null_observer)
        assert run.path == Path("/tmp/t/examples/demo")
        assert run.kind == "example"

    def test_no_binaries(self):
        stream = _stream(artifact("core", kind=("lib",)), build_finished())
        with pytest.raises(CommandFailedError) as excinfo:
            CargoRun.from_messages(stream, True, False, null_observer)
        assert excinfo.value.context == "No binaries in crate"

    def test_ambiguous(self):
        stream = _stream(
            artifact("one", filenames=["/tmp/t/one"]),
            artifact("two", filenames=["/tmp/t/two"]),
        )
        with pytest.raises(CommandFailedError) as excinfo:
            CargoRun.from_messages(stream, True, False, null_observer)
        assert excinfo.value.context == 'Ambiguous which binary is intended: ["/tmp/t/one", "/tmp/t/two"]'

    def test_same_binary_reported_twice(self):
        stream = _stream(
            artifact("app", filenames=["/tmp/t/app"]),
            artifact("app", filenames=["/tmp/t/app"]),
        )
        assert CargoRun.from_messages(stream, True, False, null_observer).path == Path("/tmp/t/app")

    def test_both_selected_does_not_read(self):
        source = _Untouchable()
        with pytest.raises(CommandFailedError, match="multiple selected"):
            CargoRun.from_messages(source, True, True, null_observer)
        assert source.closed

    def test_neither_selected_means_bin(self):
        run = CargoRun.from_messages(_stream(artifact("app")), False, False, null_observer)
        assert run.kind == "bin"

    def test_process_failure_propagates(self):
        stream = _stream(
            artifact("app"),
            stderr="error: linking with `cc` failed\n",
            exit_code=101,
        )
        with pytest.raises(CommandFailedError, match="linking with"):
            CargoRun.from_messages(stream, True, False, null_observer)
        assert stream.done

    def test_decode_failure_propagates_and_closes(self):
        stream = _stream("warning: not json", artifact("app"))
        with pytest.raises(InvalidOutputError):
            CargoRun.from_messages(stream, True, False, null_observer)
        assert stream.returncode is not None

    def test_observer_sees_every_message(self, observed):
        records = [compiler_message("unused"), artifact("app"), build_finished()]
        CargoRun.from_messages(RecordedMessages.from_records(records), True, False, observed)
        assert [m.reason for m in observed.messages] == [
            "compiler-message",
            "compiler-artifact",
            "build-finished",
        ]

    def test_strict_mode(self):
        records = [artifact("app"), {"reason": "timing-info"}]
        with pytest.raises(InvalidOutputError):
            CargoRun.from_messages(
                RecordedMessages.from_records(records), True, False, null_observer, strict=True
            )


class TestPathHelpers:
    def test_extract_binary_paths_in_order(self):
        records = [artifact("a", filenames=["/a"]), artifact("b", filenames=["/b"])]
        paths = list(extract_binary_paths(RecordedMessages.from_records(records), "bin", null_observer))
        assert paths == [Path("/a"), Path("/b")]

    def test_extract_binary_path_accepts_plain_lists(self):
        messages = [RawMessage(json.dumps(artifact("a", filenames=["/a"])))]
        assert extract_binary_path(messages, "bin", null_observer) == Path("/a")


class TestCargoRun:
    def test_command(self):
        run = CargoRun(Path("/tmp/t/app"))
        assert run.command("--port", "8080") == ["/tmp/t/app", "--port", "8080"]

    def test_spec(self):
        spec = CargoRun(Path("/tmp/t/app")).spec("-v", cwd="/srv")
        assert spec.argv == ["/tmp/t/app", "-v"]
        assert spec.cwd == "/srv"

    def test_run(self):
        run = CargoRun(Path(sys.executable))
        result = run.run("-c", "print('hello')", capture_output=True, text=True, check=True)
        assert result.stdout == "hello\n"


class TestDefaultLogging:
    def test_silent_without_setup(self, capsys):
        records = [compiler_message("unused"), artifact("app", filenames=["/tmp/x/app"]), build_finished()]
        run = CargoRun.from_messages(RecordedMessages.from_records(records), True, False)
        assert run.path == Path("/tmp/x/app")
        captured = capsys.readouterr()
        assert captured.out == ""
