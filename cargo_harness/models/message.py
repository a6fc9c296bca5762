"""Messages emitted by ``cargo --message-format=json``.

Each line of output is one JSON object whose ``reason`` field selects the
variant. Reasons this module does not know decode to ``UnknownMessage``
unless ``strict`` decoding is requested, so newer cargo releases do not
break older callers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cargo_harness.models.base import CargoModel
from cargo_harness.models.diagnostic import Diagnostic


class Target(CargoModel):
    """A single target (lib, bin, example, ...) provided by a crate."""

    name: str
    kind: list[str]  # "bin", "example", "test", "bench", "lib", ...
    # Same as kind, except an example built as a library lists "rlib"/"dylib" here
    crate_types: list[str] = Field(default_factory=list)
    doctest: bool | None = None
    doc: bool | None = None
    test: bool = False
    required_features: list[str] = Field(default_factory=list, alias="required-features")
    src_path: Path
    edition: str = "2015"


class ArtifactProfile(CargoModel):
    """Profile settings a target was compiled with."""

    opt_level: str  # 0-3, s or z
    debuginfo: int | None = None  # 0 none, 1 limited, 2 full
    debug_assertions: bool
    overflow_checks: bool
    test: bool


class BuildFinished(CargoModel):
    """Build completed; further output should not be parsed."""

    reason: Literal["build-finished"] = "build-finished"
    success: bool


class CompilerArtifact(CargoModel):
    """The compiler generated an artifact."""

    reason: Literal["compiler-artifact"] = "compiler-artifact"
    package_id: str
    manifest_path: Path | None = None
    target: Target
    profile: ArtifactProfile
    features: list[str]
    filenames: list[Path]
    executable: Path | None = None
    fresh: bool  # files were already up to date


class CompilerMessage(CargoModel):
    """The compiler wants to display a message."""

    reason: Literal["compiler-message"] = "compiler-message"
    package_id: str
    manifest_path: Path | None = None
    target: Target
    message: Diagnostic


class BuildScriptExecuted(CargoModel):
    """A build script successfully executed."""

    reason: Literal["build-script-executed"] = "build-script-executed"
    package_id: str
    out_dir: Path | None = None
    linked_libs: list[str]
    linked_paths: list[Path]
    cfgs: list[str]
    env: list[tuple[str, str]]


class UnknownMessage(BaseModel):
    """A record whose ``reason`` this version does not recognise."""

    model_config = ConfigDict(frozen=True)

    reason: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.data)


Message = Union[
    BuildFinished, CompilerArtifact, CompilerMessage, BuildScriptExecuted, UnknownMessage
]

MESSAGE_TYPES: dict[str, type[CargoModel]] = {
    "build-finished": BuildFinished,
    "compiler-artifact": CompilerArtifact,
    "compiler-message": CompilerMessage,
    "build-script-executed": BuildScriptExecuted,
}


def decode_message(data: Any, *, strict: bool = False) -> Message:
    """Resolve one parsed JSON value against the message schema.

    Raises ``ValueError`` (``pydantic.ValidationError`` included) when the
    value does not fit.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    reason = data.get("reason")
    model = MESSAGE_TYPES.get(reason) if isinstance(reason, str) else None
    if model is None:
        if strict:
            raise ValueError(f"unknown message reason {reason!r}")
        return UnknownMessage(reason=reason if isinstance(reason, str) else None, data=data)
    return model.model_validate(data, context={"strict": strict})


def parse_message(text: str, *, strict: bool = False) -> Message:
    """Parse one line of cargo output."""
    return decode_message(json.loads(text), strict=strict)


def encode_message(message: Message) -> str:
    """Inverse of ``parse_message`` for every known variant."""
    return message.to_json()
