"""Top-level cargo command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_harness.core.config import cargo_bin
from cargo_harness.messages import ProcessSpec

if TYPE_CHECKING:
    from cargo_harness.build import CargoBuild, CargoTestCommand


class Cargo:
    """Entry point for building a cargo invocation.

    Example::

        run = Cargo().build().bin("server").current_target().run()
        run.run("--help", check=True)
    """

    def __init__(self) -> None:
        self._spec = ProcessSpec(program=cargo_bin())

    def arg(self, arg: str) -> Cargo:
        """Pass an argument the builders do not cover.

        Passing a subcommand or ``--`` here can throw off the API.
        """
        self._spec.args.append(str(arg))
        return self

    def build(self) -> CargoBuild:
        """Run the ``build`` subcommand."""
        from cargo_harness.build import CargoBuild

        self.arg("build").arg("--message-format=json")
        return CargoBuild(self._spec)

    def test(self) -> CargoTestCommand:
        """Run the ``test`` subcommand."""
        from cargo_harness.build import CargoTestCommand

        self.arg("test").arg("--message-format=json")
        return CargoTestCommand(self._spec)
