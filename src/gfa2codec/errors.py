"""Error taxonomy and diagnostics for the GFA2 codec.

Type hierarchy:
  Ok[T] / Err[E]            - Result ADT returned by non-raising entry points
  ParseDiagnostic           - Located, machine-distinguishable parse failure
  Gfa2Error                 - Base exception (a ValueError)
    MalformedField          - Positional field does not match its grammar
    OptionalFieldSyntaxError - Bad TAG:TYPE:VALUE shape
    StructuralError         - Wrong field count or separator
    TranslationMiss         - Identifier/index absent from a NameMap
    HashMismatch            - NameMap built from different content

``unexpected_record_kind`` is a diagnostic kind only: unknown record codes
route to CustomRecord and are never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


type ErrorKind = Literal[
    "malformed_field",
    "unexpected_record_kind",
    "optional_field_syntax",
    "structural",
    "translation_miss",
    "hash_mismatch",
]
type Severity = Literal["error", "info"]


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E]."""
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]. Keeps the typed reason."""
    error: E


type Result[T, E] = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseDiagnostic:
    """A single located parse failure.

    Offsets are UTF-8 byte offsets from the start of the line; ``byte_end``
    is exclusive. Grammar helpers that work on ``str`` report character
    offsets; the record assembler converts them. ``line_number`` is 1-based
    (0 when the line was parsed outside a document fold).
    """

    error_kind: ErrorKind
    message: str
    line_number: int = 0
    record_kind: str = ""
    byte_start: int = 0
    byte_end: int = 0
    field_index: int = -1     # 1-based positional field, -1 if not applicable
    expected: str = ""        # grammar the field was checked against
    severity: Severity = "error"

    def __post_init__(self) -> None:
        if self.line_number < 0:
            raise ValueError(f"line_number must be >= 0, got {self.line_number}")
        if self.byte_end < self.byte_start:
            raise ValueError(
                f"byte_end ({self.byte_end}) must be >= byte_start ({self.byte_start})",
            )

    def at_line(self, line_number: int) -> ParseDiagnostic:
        """Copy of this diagnostic stamped with a document line number."""
        return ParseDiagnostic(
            error_kind=self.error_kind,
            message=self.message,
            line_number=line_number,
            record_kind=self.record_kind,
            byte_start=self.byte_start,
            byte_end=self.byte_end,
            field_index=self.field_index,
            expected=self.expected,
            severity=self.severity,
        )

    def render(self) -> str:
        parts = [f"line {self.line_number}" if self.line_number else "line ?"]
        if self.record_kind:
            parts.append(f"record {self.record_kind!r}")
        if self.field_index > 0:
            parts.append(f"field {self.field_index}")
        parts.append(f"bytes {self.byte_start}-{self.byte_end}")
        location = ", ".join(parts)
        text = f"{location}: {self.error_kind}: {self.message}"
        if self.expected:
            text += f" (expected {self.expected})"
        return text


def diagnostic_to_dict(diag: ParseDiagnostic) -> dict[str, object]:
    """Serialize a diagnostic to a JSON-safe dict."""
    return {
        "error_kind": diag.error_kind,
        "message": diag.message,
        "line_number": diag.line_number,
        "record_kind": diag.record_kind,
        "byte_start": diag.byte_start,
        "byte_end": diag.byte_end,
        "field_index": diag.field_index,
        "expected": diag.expected,
        "severity": diag.severity,
    }


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class Gfa2Error(ValueError):
    """Base class for every codec failure."""


class ParseError(Gfa2Error):
    """A local-record failure carrying its diagnostic."""

    error_kind: ErrorKind = "malformed_field"

    def __init__(self, diagnostic: ParseDiagnostic) -> None:
        super().__init__(diagnostic.render())
        self.diagnostic = diagnostic

    def at_line(self, line_number: int) -> ParseError:
        return type(self)(self.diagnostic.at_line(line_number))


class MalformedField(ParseError):
    error_kind: ErrorKind = "malformed_field"


class OptionalFieldSyntaxError(ParseError):
    error_kind: ErrorKind = "optional_field_syntax"


class StructuralError(ParseError):
    error_kind: ErrorKind = "structural"


class TranslationMiss(Gfa2Error):
    """A lookup in a NameMap found nothing; the whole translation fails."""

    def __init__(self, key: str | int, record_kind: str, record_index: int) -> None:
        super().__init__(
            f"{key!r} is not present in the name map "
            f"(record {record_kind!r} #{record_index})",
        )
        self.key = key
        self.record_kind = record_kind
        self.record_index = record_index


class HashMismatch(Gfa2Error):
    """The document content hash differs from the one the map was built on."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"name map was built from different content: "
            f"expected hash {expected:#018x}, document hashes to {actual:#018x}",
        )
        self.expected = expected
        self.actual = actual


_EXCEPTION_BY_KIND: dict[str, type[ParseError]] = {
    "malformed_field": MalformedField,
    "optional_field_syntax": OptionalFieldSyntaxError,
    "structural": StructuralError,
}


def raise_for(diagnostic: ParseDiagnostic) -> None:
    """Raise the exception class matching ``diagnostic.error_kind``."""
    exc_type = _EXCEPTION_BY_KIND.get(diagnostic.error_kind)
    if exc_type is None:
        raise ValueError(f"no parse exception for error kind {diagnostic.error_kind!r}")
    raise exc_type(diagnostic)
