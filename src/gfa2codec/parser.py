"""Record assembler: raw lines -> typed records -> Document.

Each line is dispatched on its first character through ``RECORD_PARSERS``,
a kind-indexed table of grammar functions. Unknown codes are not errors:
the line becomes a CustomRecord holding the original text.

Usage::

    result = parse_lines(lines, ParserConfig(on_error="skip"))
    for diag in result.errors:
        print(diag.render())
    doc = result.document
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from gfa2codec.config import STRICT, ParserConfig
from gfa2codec.errors import (
    Err,
    Ok,
    ParseDiagnostic,
    ParseError,
    Result,
    StructuralError,
)
from gfa2codec.fields import FieldCursor
from gfa2codec.records import (
    COMMENT,
    CUSTOM,
    Comment,
    CustomRecord,
    Document,
    Edge,
    Fragment,
    Gap,
    GroupOrdered,
    GroupUnordered,
    Header,
    Record,
    Segment,
    record_kind,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-kind grammars
# ---------------------------------------------------------------------------

def _parse_header(cursor: FieldCursor) -> Header:
    tags = cursor.tags()
    if tags and tags[0].tag == "VN" and tags[0].type == "Z":
        return Header(version=tags[0].value, tags=tags[1:])
    return Header(version=None, tags=tags)


def _parse_segment(cursor: FieldCursor) -> Segment[str]:
    return Segment(
        id=cursor.identifier(),
        length=cursor.integer(),
        sequence=cursor.sequence(),
        tags=cursor.tags(),
    )


def _parse_fragment(cursor: FieldCursor) -> Fragment[str]:
    return Fragment(
        id=cursor.identifier(),
        external=cursor.reference(),
        segment_begin=cursor.position(),
        segment_end=cursor.position(),
        fragment_begin=cursor.position(),
        fragment_end=cursor.position(),
        alignment=cursor.alignment(),
        tags=cursor.tags(),
    )


def _parse_edge(cursor: FieldCursor) -> Edge[str]:
    return Edge(
        id=cursor.optional_id(),
        ref1=cursor.reference(),
        ref2=cursor.reference(),
        begin1=cursor.position(),
        end1=cursor.position(),
        begin2=cursor.position(),
        end2=cursor.position(),
        alignment=cursor.alignment(),
        tags=cursor.tags(),
    )


def _parse_gap(cursor: FieldCursor) -> Gap[str]:
    return Gap(
        id=cursor.optional_id(),
        ref1=cursor.reference(),
        ref2=cursor.reference(),
        distance=cursor.integer(),
        variance=cursor.variance(),
        tags=cursor.tags(),
    )


def _parse_group_ordered(cursor: FieldCursor) -> GroupOrdered[str]:
    return GroupOrdered(
        id=cursor.optional_id(),
        members=cursor.reference_list(),
        tags=cursor.tags(),
    )


def _parse_group_unordered(cursor: FieldCursor) -> GroupUnordered[str]:
    return GroupUnordered(
        id=cursor.optional_id(),
        members=cursor.identifier_list(),
        tags=cursor.tags(),
    )


RECORD_PARSERS: dict[str, Callable[[FieldCursor], Record]] = {
    "H": _parse_header,
    "S": _parse_segment,
    "F": _parse_fragment,
    "E": _parse_edge,
    "G": _parse_gap,
    "O": _parse_group_ordered,
    "U": _parse_group_unordered,
}


def _parse_comment(line: str) -> Comment:
    if len(line) == 1:
        return Comment("", spaced=False)
    if line[1] != " ":
        raise StructuralError(
            ParseDiagnostic(
                error_kind="structural",
                message=f"comment marker must be followed by a space, found {line[1]!r}",
                record_kind=COMMENT,
                byte_start=1,
                byte_end=2,
                expected="'# ' followed by free text",
            ),
        )
    return Comment(line[2:])


# ---------------------------------------------------------------------------
# Single line
# ---------------------------------------------------------------------------

def _decode(raw: str | bytes) -> str:
    if isinstance(raw, str):
        line = raw
    else:
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StructuralError(
                ParseDiagnostic(
                    error_kind="structural",
                    message=f"line is not valid UTF-8: {exc.reason}",
                    byte_start=exc.start,
                    byte_end=exc.end,
                    expected="printable ASCII",
                ),
            ) from None
    return line.rstrip("\r\n")


def _byte_span(diag: ParseDiagnostic, line: str) -> ParseDiagnostic:
    """Re-express a character span of ``line`` as a UTF-8 byte span."""
    if line.isascii():
        return diag
    return replace(
        diag,
        byte_start=len(line[:diag.byte_start].encode()),
        byte_end=len(line[:diag.byte_end].encode()),
    )


def _assemble(
    line: str,
    config: ParserConfig,
) -> tuple[Record, list[ParseDiagnostic]]:
    if not line:
        raise StructuralError(
            ParseDiagnostic(
                error_kind="structural",
                message="empty line",
                expected="a record-kind code",
            ),
        )
    code = line[0]
    if code == COMMENT:
        return _parse_comment(line), []
    grammar = RECORD_PARSERS.get(code)
    if grammar is None:
        notes: list[ParseDiagnostic] = []
        if config.report_custom_records:
            notes.append(
                ParseDiagnostic(
                    error_kind="unexpected_record_kind",
                    message=f"unrecognized record code {code!r} kept as custom record",
                    record_kind=code,
                    byte_start=0,
                    byte_end=1,
                    severity="info",
                ),
            )
        return CustomRecord(line), notes
    cursor = FieldCursor(line, tag_mode=config.tag_mode)
    record = grammar(cursor)
    return record, cursor.dropped


def _parse_line(
    line: str,
    config: ParserConfig,
) -> tuple[Record, list[ParseDiagnostic]]:
    """Assemble one decoded line; diagnostic spans are UTF-8 byte offsets."""
    try:
        record, notes = _assemble(line, config)
    except ParseError as exc:
        raise type(exc)(_byte_span(exc.diagnostic, line)) from None
    return record, [_byte_span(note, line) for note in notes]


def parse_line(
    line: str | bytes,
    config: ParserConfig = STRICT,
    *,
    line_number: int = 0,
) -> Record:
    """Parse one line into a record, raising a ParseError subclass on failure."""
    try:
        record, dropped = _parse_line(_decode(line), config)
    except ParseError as exc:
        raise exc.at_line(line_number) from None
    for diag in dropped:
        log.warning("%s", diag.at_line(line_number).render())
    return record


def parse_line_result(
    line: str | bytes,
    config: ParserConfig = STRICT,
    *,
    line_number: int = 0,
) -> Result[Record, ParseDiagnostic]:
    """Non-raising variant of ``parse_line``."""
    try:
        return Ok(parse_line(line, config, line_number=line_number))
    except ParseError as exc:
        return Err(exc.diagnostic)


# ---------------------------------------------------------------------------
# Document fold
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of folding a sequence of lines into a Document."""

    document: Document[str]
    diagnostics: tuple[ParseDiagnostic, ...]
    skipped_lines: tuple[int, ...]
    config: ParserConfig

    @property
    def errors(self) -> tuple[ParseDiagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == "error")

    @property
    def ok(self) -> bool:
        """True if no line failed and no optional field was dropped."""
        return not self.errors


def parse_lines(
    lines: Iterable[str | bytes],
    config: ParserConfig = STRICT,
) -> ParseResult:
    """Fold lines into a Document.

    With ``on_error="raise"`` the first local-record failure propagates,
    stamped with its 1-based line number. With ``on_error="skip"`` the line
    is dropped and its diagnostic collected.
    """
    document: Document[str] = Document()
    diagnostics: list[ParseDiagnostic] = []
    skipped: list[int] = []

    for line_number, raw in enumerate(lines, start=1):
        try:
            line = _decode(raw)
            if not line and config.skip_blank_lines:
                continue
            record, notes = _parse_line(line, config)
        except ParseError as exc:
            located = exc.at_line(line_number)
            if config.on_error == "raise":
                raise located from None
            log.warning("skipping %s", located.diagnostic.render())
            diagnostics.append(located.diagnostic)
            skipped.append(line_number)
            continue
        for note in notes:
            located_note = note.at_line(line_number)
            if located_note.severity == "error":
                log.warning("dropped optional field: %s", located_note.render())
            diagnostics.append(located_note)
        if record_kind(record) == CUSTOM:
            log.debug("line %d: custom record %r", line_number, line[:1])
        document.append(record, track_order=config.record_line_order)

    log.debug(
        "parsed %d records (%d skipped lines)", len(document), len(skipped),
    )
    return ParseResult(
        document=document,
        diagnostics=tuple(diagnostics),
        skipped_lines=tuple(skipped),
        config=config,
    )


def parse_text(text: str, config: ParserConfig = STRICT) -> ParseResult:
    """Parse a whole GFA2 text already resident in memory."""
    lines = text.split("\n")
    if lines and not lines[-1]:
        lines.pop()
    return parse_lines(lines, config)


def parse_document(
    lines: Iterable[str | bytes],
    config: ParserConfig = STRICT,
) -> Document[str]:
    """Parse lines and return only the Document."""
    return parse_lines(lines, config).document
