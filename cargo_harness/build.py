"""Builders for the ``build`` and ``test`` subcommands."""

from __future__ import annotations

import os

from cargo_harness.cargo import Cargo
from cargo_harness.core.config import current_target, is_release
from cargo_harness.messages import CommandMessages, ProcessSpec
from cargo_harness.observer import MessageObserver, log_message
from cargo_harness.run import CargoRun
from cargo_harness.testbins import TestArtifacts


class CargoBuild:
    """The ``build`` subcommand.

    Example::

        with CargoBuild().manifest_path("Cargo.toml").target_dir(tmp).exec() as msgs:
            for msg in msgs:
                print(msg.decode())
    """

    def __init__(self, spec: ProcessSpec | None = None) -> None:
        if spec is None:
            spec = Cargo().build().spec()
        self._spec = spec
        self._bin = False
        self._example = False
        self._observer: MessageObserver = log_message
        self._strict = False

    def package(self, name: str) -> CargoBuild:
        """Build from ``name`` package in workspaces."""
        return self.arg("--package").arg(name)

    def bins(self) -> CargoBuild:
        """Build all binaries."""
        self._bin = True
        return self.arg("--bins")

    def bin(self, name: str) -> CargoBuild:
        """Build only ``name`` binary."""
        self._bin = True
        return self.arg("--bin").arg(name)

    def examples(self) -> CargoBuild:
        """Build all examples."""
        self._example = True
        return self.arg("--examples")

    def example(self, name: str) -> CargoBuild:
        """Build only ``name`` example."""
        self._example = True
        return self.arg("--example").arg(name)

    def tests(self) -> CargoBuild:
        """Build all tests."""
        return self.arg("--tests")

    def test(self, name: str) -> CargoBuild:
        """Build only ``name`` test."""
        return self.arg("--test").arg(name)

    def manifest_path(self, path: str | os.PathLike[str]) -> CargoBuild:
        return self.arg("--manifest-path").arg(path)

    def release(self) -> CargoBuild:
        """Build artifacts in release mode, with optimizations."""
        return self.arg("--release")

    def current_release(self) -> CargoBuild:
        """Build in release mode when the interpreter itself runs optimised."""
        if is_release():
            return self.release()
        return self

    def target(self, triple: str) -> CargoBuild:
        return self.arg("--target").arg(triple)

    def current_target(self) -> CargoBuild:
        """Build for the current process' target triple."""
        return self.target(current_target())

    def target_dir(self, path: str | os.PathLike[str]) -> CargoBuild:
        """Directory for all generated artifacts."""
        return self.arg("--target-dir").arg(path)

    def all_features(self) -> CargoBuild:
        return self.arg("--all-features")

    def no_default_features(self) -> CargoBuild:
        return self.arg("--no-default-features")

    def features(self, features: str) -> CargoBuild:
        """Space-separated list of features to activate."""
        return self.arg("--features").arg(features)

    def env(self, key: str, value: str) -> CargoBuild:
        self._spec.env[key] = value
        return self

    def env_remove(self, key: str) -> CargoBuild:
        self._spec.env[key] = None
        return self

    def cwd(self, path: str | os.PathLike[str]) -> CargoBuild:
        self._spec.cwd = os.fspath(path)
        return self

    def observer(self, observer: MessageObserver) -> CargoBuild:
        """Callable offered every decoded message (default: ``log_message``)."""
        self._observer = observer
        return self

    def strict(self, strict: bool = True) -> CargoBuild:
        """Fail on message kinds and fields this version does not know."""
        self._strict = strict
        return self

    def arg(self, arg: str | os.PathLike[str]) -> CargoBuild:
        """Pass an argument the builder does not cover.

        Passing ``--`` can throw off the API.
        """
        self._spec.args.append(os.fspath(arg))
        return self

    def args(self, *args: str | os.PathLike[str]) -> CargoBuild:
        for arg in args:
            self.arg(arg)
        return self

    def spec(self) -> ProcessSpec:
        """The process invocation configured so far."""
        return self._spec

    def exec(self) -> CommandMessages:
        """Build the configured target, returning compiler messages."""
        return CommandMessages.from_command(self._spec)

    def run(self) -> CargoRun:
        """Build and resolve the binary selected with ``bin``/``example``."""
        messages = CommandMessages.from_command(self._spec)
        return CargoRun.from_messages(
            messages, self._bin, self._example, self._observer, strict=self._strict
        )

    def run_tests(self) -> TestArtifacts:
        """Build and lazily yield every compiled test harness.

        libtest's JSON output format is unstable upstream.
        """
        messages = CommandMessages.from_command(self._spec)
        return TestArtifacts(messages, self._observer, strict=self._strict)


class CargoTestCommand:
    """The ``test`` subcommand."""

    def __init__(self, spec: ProcessSpec | None = None) -> None:
        if spec is None:
            spec = Cargo().test().spec()
        self._spec = spec

    def no_run(self) -> CargoTestCommand:
        """Compile, but don't run tests."""
        return self.arg("--no-run")

    def release(self) -> CargoTestCommand:
        return self.arg("--release")

    def current_release(self) -> CargoTestCommand:
        if is_release():
            return self.release()
        return self

    def target(self, triple: str) -> CargoTestCommand:
        return self.arg("--target").arg(triple)

    def current_target(self) -> CargoTestCommand:
        return self.target(current_target())

    def manifest_path(self, path: str | os.PathLike[str]) -> CargoTestCommand:
        return self.arg("--manifest-path").arg(path)

    def target_dir(self, path: str | os.PathLike[str]) -> CargoTestCommand:
        return self.arg("--target-dir").arg(path)

    def arg(self, arg: str | os.PathLike[str]) -> CargoTestCommand:
        self._spec.args.append(os.fspath(arg))
        return self

    def spec(self) -> ProcessSpec:
        return self._spec

    def exec(self) -> CommandMessages:
        """Test the configured target, returning compiler messages."""
        return CommandMessages.from_command(self._spec)

