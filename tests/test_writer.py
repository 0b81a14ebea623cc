"""Tests for formatting records and documents back to GFA2 text."""
import pytest

from gfa2codec.parser import parse_document, parse_line, parse_text
from gfa2codec.records import Comment, Document, Header, Segment
from gfa2codec.types import IntField
from gfa2codec.writer import document_to_text, format_document, format_record

LINES = [
    "H\tVN:Z:2.0\tTS:i:100",
    "S\tA\t10\tAAAAAAACGT",
    "S\tB\t4\t*\tRC:i:12\tCO:Z:no sequence",
    "F\tA\tread1-\t0\t140$\t0\t140\t11M1I2D",
    "E\t1\tA+\tB+\t6\t10$\t0\t4\t4M\tTS:i:2",
    "E\t*\tA-\tB+\t0\t4\t0\t4\t-2,5,7",
    "G\tg1\tA+\tB-\t100\t*",
    "G\t*\tA+\tB-\t-20\t10",
    "O\tp1\tA+ B-",
    "U\t*\tA B 1",
    "# free text",
    "#",
    "# ",
    "S\tC\t010\tACGT",
    "G\t*\tA+\tB-\t-0\t007",
    "X\tcustom\tline",
]


class TestFormatRecord:
    @pytest.mark.parametrize("line", LINES)
    def test_byte_faithful(self, line: str) -> None:
        assert format_record(parse_line(line)) == line

    def test_reparse_equals_original(self) -> None:
        for line in LINES:
            record = parse_line(line)
            assert parse_line(format_record(record)) == record

    def test_header_without_version(self) -> None:
        assert format_record(Header()) == "H"

    def test_empty_comment(self) -> None:
        assert format_record(Comment("", spaced=False)) == "#"
        assert format_record(Comment("")) == "# "

    def test_index_form_segment(self) -> None:
        assert format_record(Segment(0, IntField.of(4), "ACGT")) == "S\t0\t4\tACGT"

    def test_not_a_record(self) -> None:
        with pytest.raises(TypeError):
            format_record("S\tA\t4\tACGT")  # type: ignore[arg-type]


class TestFormatDocument:
    def test_grouped_by_kind(self) -> None:
        doc = parse_document(["S\tA\t4\tACGT", "H\tVN:Z:2.0", "S\tB\t4\tTTTT"])
        assert format_document(doc) == ["H\tVN:Z:2.0", "S\tA\t4\tACGT", "S\tB\t4\tTTTT"]

    def test_preserve_line_order(self) -> None:
        lines = ["S\tA\t4\tACGT", "# between", "H\tVN:Z:2.0", "S\tB\t4\tTTTT"]
        doc = parse_document(lines)
        assert format_document(doc, preserve_line_order=True) == lines

    def test_records_without_order_follow(self) -> None:
        doc = parse_document(["S\tA\t4\tACGT"])
        doc.append(Comment("late"), track_order=False)
        doc.append(Header(version="2.0"), track_order=False)
        assert format_document(doc, preserve_line_order=True) == [
            "S\tA\t4\tACGT",
            "H\tVN:Z:2.0",
            "# late",
        ]

    def test_text_round_trip(self) -> None:
        text = "\n".join(LINES) + "\n"
        doc = parse_text(text).document
        assert document_to_text(doc, preserve_line_order=True) == text
        assert parse_text(document_to_text(doc)).document.segments == doc.segments

    def test_empty_document(self) -> None:
        assert document_to_text(Document()) == ""
