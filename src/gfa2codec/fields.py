"""Field grammar: validators for each positional field shape.

Every positional field is one tab-delimited token. Validators match the
whole token (``fullmatch``), so a partially matching token is a failure,
never a silent truncation.

    identifier    [!-~]+
    optional id   '*' | identifier          ('*' -> None)
    reference     identifier [+-]
    position      identifier, last char optionally '$'
    integer       -?[0-9]+
    variance      '*' | integer             ('*' -> None)
    sequence      '*' | [!-~]+
    alignment     '*' | ([0-9]+[MIDNSHPX=])+ | -?[0-9]+(,-?[0-9]+)*
    ref list      reference (' ' reference)*
    id list       identifier (' ' identifier)*

Alignment alternatives are tried in that order: CIGAR before trace, since
both start with a digit.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from gfa2codec.errors import MalformedField, ParseDiagnostic, StructuralError
from gfa2codec.tags import OptionalField, TagMode, parse_all
from gfa2codec.types import Alignment, IntField, Position, Reference


IDENTIFIER_GRAMMAR = "[!-~]+"
OPTIONAL_ID_GRAMMAR = "* | [!-~]+"
REFERENCE_GRAMMAR = "[!-~]+[+-]"
POSITION_GRAMMAR = "[!-~]+ with optional trailing $"
INTEGER_GRAMMAR = "-?[0-9]+"
VARIANCE_GRAMMAR = "* | -?[0-9]+"
SEQUENCE_GRAMMAR = "* | [!-~]+"
ALIGNMENT_GRAMMAR = "* | ([0-9]+[MIDNSHPX=])+ | -?[0-9]+(,-?[0-9]+)*"
REFERENCE_LIST_GRAMMAR = "[!-~]+[+-]( [!-~]+[+-])*"
IDENTIFIER_LIST_GRAMMAR = "[!-~]+( [!-~]+)*"

_IDENTIFIER_RE = re.compile(r"[!-~]+")
_REFERENCE_RE = re.compile(r"([!-~]+)([+-])")
_INTEGER_RE = re.compile(r"-?[0-9]+")
_CIGAR_RE = re.compile(r"(?:[0-9]+[MIDNSHPX=])+")
_TRACE_RE = re.compile(r"-?[0-9]+(?:,-?[0-9]+)*")


def _mismatch(token: str, what: str, expected: str) -> MalformedField:
    return MalformedField(
        ParseDiagnostic(
            error_kind="malformed_field",
            message=f"{token!r} is not a valid {what}",
            byte_start=0,
            byte_end=len(token),
            expected=expected,
        ),
    )


# ---------------------------------------------------------------------------
# Token validators
# ---------------------------------------------------------------------------

def parse_identifier(token: str) -> str:
    if not _IDENTIFIER_RE.fullmatch(token):
        raise _mismatch(token, "identifier", IDENTIFIER_GRAMMAR)
    return token


def parse_optional_id(token: str) -> str | None:
    if token == "*":
        return None
    if not _IDENTIFIER_RE.fullmatch(token):
        raise _mismatch(token, "optional identifier", OPTIONAL_ID_GRAMMAR)
    return token


def parse_reference(token: str) -> Reference[str]:
    """``"12+"`` -> Reference("12", "+"); ``"12"`` and ``"12~"`` fail."""
    match = _REFERENCE_RE.fullmatch(token)
    if match is None:
        raise _mismatch(token, "oriented reference", REFERENCE_GRAMMAR)
    return Reference(match.group(1), match.group(2))  # type: ignore[arg-type]


def parse_position(token: str) -> Position:
    if not _IDENTIFIER_RE.fullmatch(token) or token == "$":
        raise _mismatch(token, "position", POSITION_GRAMMAR)
    if token.endswith("$"):
        return Position(token[:-1], is_end=True)
    return Position(token)


def parse_integer(token: str) -> IntField:
    if not _INTEGER_RE.fullmatch(token):
        raise _mismatch(token, "integer", INTEGER_GRAMMAR)
    return IntField.parse(token)


def parse_variance(token: str) -> IntField | None:
    if token == "*":
        return None
    if not _INTEGER_RE.fullmatch(token):
        raise _mismatch(token, "variance", VARIANCE_GRAMMAR)
    return IntField.parse(token)


def parse_sequence(token: str) -> str:
    if token != "*" and not _IDENTIFIER_RE.fullmatch(token):
        raise _mismatch(token, "sequence", SEQUENCE_GRAMMAR)
    return token


def parse_alignment(token: str) -> Alignment:
    if token == "*":
        return Alignment.absent()
    if _CIGAR_RE.fullmatch(token):
        return Alignment("cigar", token)
    if _TRACE_RE.fullmatch(token):
        return Alignment("trace", token)
    raise _mismatch(token, "alignment", ALIGNMENT_GRAMMAR)


def _split_members(token: str, what: str, expected: str) -> list[str]:
    members = token.split(" ")
    if not all(members):
        raise _mismatch(token, what, expected)
    return members


def parse_reference_list(token: str) -> tuple[Reference[str], ...]:
    members = _split_members(token, "reference list", REFERENCE_LIST_GRAMMAR)
    try:
        return tuple(parse_reference(member) for member in members)
    except MalformedField:
        raise _mismatch(token, "reference list", REFERENCE_LIST_GRAMMAR) from None


def parse_identifier_list(token: str) -> tuple[str, ...]:
    members = _split_members(token, "identifier list", IDENTIFIER_LIST_GRAMMAR)
    for member in members:
        if not _IDENTIFIER_RE.fullmatch(member):
            raise _mismatch(token, "identifier list", IDENTIFIER_LIST_GRAMMAR)
    return tuple(members)


# ---------------------------------------------------------------------------
# Prefix extraction
# ---------------------------------------------------------------------------

def take[T](text: str, parse: Callable[[str], T]) -> tuple[T, str]:
    """Extract the leading token of ``text`` and validate it.

    Returns ``(value, remaining)`` where ``remaining`` starts at the tab that
    ended the token (or is empty at end of line).
    """
    end = text.find("\t")
    if end < 0:
        end = len(text)
    return parse(text[:end]), text[end:]


class FieldCursor:
    """Sequential reader over one line's positional fields and tag tail.

    The cursor starts right after the record-kind code. Each ``field`` call
    consumes exactly one tab and one non-empty token.
    """

    __slots__ = ("line", "pos", "record_kind", "field_index", "tag_mode", "dropped")

    def __init__(self, line: str, *, start: int = 1, tag_mode: TagMode = "strict") -> None:
        self.line = line
        self.pos = start
        self.record_kind = line[:start]
        self.field_index = 0
        self.tag_mode: TagMode = tag_mode
        self.dropped: list[ParseDiagnostic] = []

    def _structural(self, message: str, start: int, end: int, expected: str) -> StructuralError:
        return StructuralError(
            ParseDiagnostic(
                error_kind="structural",
                message=message,
                record_kind=self.record_kind,
                byte_start=start,
                byte_end=end,
                field_index=self.field_index,
                expected=expected,
            ),
        )

    def field[T](self, parse: Callable[[str], T], expected: str) -> T:
        """Consume ``\\t<token>`` and return ``parse(token)``."""
        line = self.line
        self.field_index += 1
        if self.pos >= len(line):
            raise self._structural(
                f"missing mandatory field {self.field_index}",
                len(line),
                len(line),
                expected,
            )
        if line[self.pos] != "\t":
            raise self._structural(
                f"expected a tab before field {self.field_index}, "
                f"found {line[self.pos]!r}",
                self.pos,
                self.pos + 1,
                "\\t" + expected,
            )
        start = self.pos + 1
        end = line.find("\t", start)
        if end < 0:
            end = len(line)
        if end == start:
            raise self._structural(
                f"field {self.field_index} is empty (zero or repeated tabs)",
                self.pos,
                end + 1 if end < len(line) else end,
                expected,
            )
        token = line[start:end]
        try:
            value = parse(token)
        except MalformedField as exc:
            diag = exc.diagnostic
            raise MalformedField(
                ParseDiagnostic(
                    error_kind="malformed_field",
                    message=f"field {self.field_index}: {diag.message}",
                    record_kind=self.record_kind,
                    byte_start=start,
                    byte_end=end,
                    field_index=self.field_index,
                    expected=diag.expected or expected,
                ),
            ) from None
        self.pos = end
        return value

    def identifier(self) -> str:
        return self.field(parse_identifier, IDENTIFIER_GRAMMAR)

    def optional_id(self) -> str | None:
        return self.field(parse_optional_id, OPTIONAL_ID_GRAMMAR)

    def reference(self) -> Reference[str]:
        return self.field(parse_reference, REFERENCE_GRAMMAR)

    def position(self) -> Position:
        return self.field(parse_position, POSITION_GRAMMAR)

    def integer(self) -> IntField:
        return self.field(parse_integer, INTEGER_GRAMMAR)

    def variance(self) -> IntField | None:
        return self.field(parse_variance, VARIANCE_GRAMMAR)

    def sequence(self) -> str:
        return self.field(parse_sequence, SEQUENCE_GRAMMAR)

    def alignment(self) -> Alignment:
        return self.field(parse_alignment, ALIGNMENT_GRAMMAR)

    def reference_list(self) -> tuple[Reference[str], ...]:
        return self.field(parse_reference_list, REFERENCE_LIST_GRAMMAR)

    def identifier_list(self) -> tuple[str, ...]:
        return self.field(parse_identifier_list, IDENTIFIER_LIST_GRAMMAR)

    def tags(self) -> tuple[OptionalField, ...]:
        """Consume the rest of the line as optional fields."""
        tail = self.line[self.pos:]
        fields, dropped = parse_all(
            tail,
            mode=self.tag_mode,
            offset=self.pos,
            first_field_index=self.field_index + 1,
            record_kind=self.record_kind,
        )
        self.dropped.extend(dropped)
        self.pos = len(self.line)
        return fields
