"""Test doubles for cargo_harness (fake cargo processes without a Rust toolchain).

Usage::

    from cargo_harness.testing import artifact, fake_cargo

    spec = fake_cargo([artifact("app", filenames=["/tmp/app"])])
    run = CargoRun.from_messages(CommandMessages.from_command(spec), True, False)

The fake is the running Python interpreter replaying scripted stdout,
stderr and exit status, so it exercises the real pipe handling.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from cargo_harness.messages import ProcessSpec

_SCRIPT = """\
import sys
for line in {lines!r}:
    sys.stdout.write(line + "\\n")
    sys.stdout.flush()
sys.stderr.write({stderr!r})
sys.stderr.flush()
sys.exit({exit_code!r})
"""


def fake_cargo(
    stdout: Iterable[str | Mapping[str, Any]] = (),
    *,
    stderr: str = "",
    exit_code: int = 0,
) -> ProcessSpec:
    """Process spec that prints ``stdout`` lines, then ``stderr``, then exits.

    Mappings are serialised as one JSON object per line; strings are written
    verbatim.
    """
    lines = [item if isinstance(item, str) else json.dumps(dict(item)) for item in stdout]
    script = _SCRIPT.format(lines=lines, stderr=stderr, exit_code=exit_code)
    return ProcessSpec(program=sys.executable, args=["-c", script])


def default_crate_types(kind: Sequence[str]) -> list[str]:
    """Crate types cargo reports for a target of ``kind``.

    Libraries report "lib"; bins, examples, tests and benches are compiled
    as executables and report "bin".
    """
    return ["lib"] if list(kind) == ["lib"] else ["bin"]


def target(
    name: str,
    kind: Sequence[str] = ("bin",),
    crate_types: Sequence[str] | None = None,
    src_path: str = "src/main.rs",
) -> dict[str, Any]:
    return {
        "name": name,
        "kind": list(kind),
        "crate_types": list(crate_types) if crate_types is not None else default_crate_types(kind),
        "required-features": [],
        "src_path": src_path,
        "edition": "2021",
        "doctest": False,
        "test": True,
    }


def profile(test: bool = False) -> dict[str, Any]:
    return {
        "opt_level": "0",
        "debuginfo": 2,
        "debug_assertions": True,
        "overflow_checks": True,
        "test": test,
    }


def artifact(
    name: str,
    *,
    kind: Sequence[str] = ("bin",),
    crate_types: Sequence[str] | None = None,
    filenames: Sequence[str] = (),
    test: bool = False,
    package_id: str = "fixture 0.1.0 (path+file:///tmp/fixture)",
) -> dict[str, Any]:
    """A ``compiler-artifact`` record as cargo prints it."""
    files = list(filenames) or [f"/tmp/target/debug/{name}"]
    record_target = target(name, kind, crate_types)
    return {
        "reason": "compiler-artifact",
        "package_id": package_id,
        "manifest_path": "/tmp/fixture/Cargo.toml",
        "target": record_target,
        "profile": profile(test),
        "features": [],
        "filenames": files,
        "executable": files[0] if record_target["crate_types"] == ["bin"] else None,
        "fresh": False,
    }


def compiler_message(
    text: str,
    *,
    level: str = "warning",
    package_id: str = "fixture 0.1.0 (path+file:///tmp/fixture)",
) -> dict[str, Any]:
    """A ``compiler-message`` record with a span-less diagnostic."""
    return {
        "reason": "compiler-message",
        "package_id": package_id,
        "manifest_path": "/tmp/fixture/Cargo.toml",
        "target": target("fixture"),
        "message": {
            "message": text,
            "code": None,
            "level": level,
            "spans": [],
            "children": [],
            "rendered": f"{level}: {text}\n",
        },
    }


def build_finished(success: bool = True) -> dict[str, Any]:
    return {"reason": "build-finished", "success": success}
