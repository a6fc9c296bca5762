"""Schemas for cargo's JSON messages and libtest's JSON events."""

from cargo_harness.models.diagnostic import (
    Applicability,
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    DiagnosticSpan,
    DiagnosticSpanLine,
    DiagnosticSpanMacroExpansion,
)
from cargo_harness.models.message import (
    ArtifactProfile,
    BuildFinished,
    BuildScriptExecuted,
    CompilerArtifact,
    CompilerMessage,
    Message,
    Target,
    UnknownMessage,
    decode_message,
    encode_message,
    parse_message,
)
from cargo_harness.models.test_event import (
    Bench,
    CaseAllowedFailure,
    CaseFailed,
    CaseIgnored,
    CaseOk,
    CaseStarted,
    CaseTimeout,
    Event,
    SuiteFailed,
    SuiteOk,
    SuiteStarted,
    UnknownEvent,
    decode_event,
    parse_event,
)

__all__ = [
    "Applicability",
    "ArtifactProfile",
    "Bench",
    "BuildFinished",
    "BuildScriptExecuted",
    "CaseAllowedFailure",
    "CaseFailed",
    "CaseIgnored",
    "CaseOk",
    "CaseStarted",
    "CaseTimeout",
    "CompilerArtifact",
    "CompilerMessage",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "DiagnosticSpan",
    "DiagnosticSpanLine",
    "DiagnosticSpanMacroExpansion",
    "Event",
    "Message",
    "SuiteFailed",
    "SuiteOk",
    "SuiteStarted",
    "Target",
    "UnknownEvent",
    "UnknownMessage",
    "decode_event",
    "decode_message",
    "encode_message",
    "parse_event",
    "parse_message",
]
