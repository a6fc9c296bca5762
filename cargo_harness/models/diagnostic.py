"""Compiler diagnostics carried by ``compiler-message`` records."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import ValidationInfo, field_validator

from cargo_harness.models.base import CargoModel, is_strict


class DiagnosticLevel(str, Enum):
    ICE = "error: internal compiler error"
    ERROR = "error"
    WARNING = "warning"
    FAILURE_NOTE = "failure-note"
    NOTE = "note"
    HELP = "help"


class Applicability(str, Enum):
    MACHINE_APPLICABLE = "MachineApplicable"
    HAS_PLACEHOLDERS = "HasPlaceholders"
    MAYBE_INCORRECT = "MaybeIncorrect"
    UNSPECIFIED = "Unspecified"


_KNOWN_LEVELS = {level.value for level in DiagnosticLevel}
_KNOWN_APPLICABILITIES = {a.value for a in Applicability}


class DiagnosticCode(CargoModel):
    code: str
    explanation: str | None = None


class DiagnosticSpanLine(CargoModel):
    """A line of source code highlighted by a span."""

    text: str
    highlight_start: int  # 1-based, inclusive
    highlight_end: int  # 1-based, exclusive


class DiagnosticSpan(CargoModel):
    file_name: Path
    byte_start: int
    byte_end: int
    line_start: int
    line_end: int
    column_start: int
    column_end: int
    is_primary: bool
    text: list[DiagnosticSpanLine]
    label: str | None = None
    suggested_replacement: str | None = None
    suggestion_applicability: str | None = None
    expansion: DiagnosticSpanMacroExpansion | None = None

    @field_validator("suggestion_applicability")
    @classmethod
    def _check_applicability(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is not None and is_strict(info) and value not in _KNOWN_APPLICABILITIES:
            raise ValueError(f"unknown suggestion applicability {value!r}")
        return value


class DiagnosticSpanMacroExpansion(CargoModel):
    span: DiagnosticSpan
    macro_decl_name: str
    def_site_span: DiagnosticSpan | None = None


class Diagnostic(CargoModel):
    """A message emitted by rustc, possibly with nested help/note children."""

    message: str
    code: DiagnosticCode | None = None
    level: str
    spans: list[DiagnosticSpan]
    children: list[Diagnostic]
    rendered: str | None = None

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str, info: ValidationInfo) -> str:
        if is_strict(info) and value not in _KNOWN_LEVELS:
            raise ValueError(f"unknown diagnostic level {value!r}")
        return value

    @property
    def known_level(self) -> DiagnosticLevel | None:
        """The level as an enum member, or None for levels added by newer compilers."""
        if self.level in _KNOWN_LEVELS:
            return DiagnosticLevel(self.level)
        return None

    @property
    def text(self) -> str:
        """Rendered form when rustc supplied one, else the bare message."""
        return self.rendered or self.message


DiagnosticSpan.model_rebuild()
DiagnosticSpanMacroExpansion.model_rebuild()
Diagnostic.model_rebuild()
