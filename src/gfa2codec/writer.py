"""Record and Document formatting back to GFA2 text.

``format_record`` is the inverse of ``parser.parse_line``: for any record it
produced, ``parse_line(format_record(r)) == r``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from gfa2codec.records import (
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
)
from gfa2codec.tags import format_all


def _optional_id(value: Any) -> str:
    return "*" if value is None else str(value)


def _format_header(header: Header) -> str:
    version = f"\tVN:Z:{header.version}" if header.version is not None else ""
    return f"H{version}{format_all(header.tags)}"


def _format_segment(seg: Segment[Any]) -> str:
    return f"S\t{seg.id}\t{seg.length.to_gfa()}\t{seg.sequence}{format_all(seg.tags)}"


def _format_fragment(frag: Fragment[Any]) -> str:
    fields = (
        str(frag.id),
        frag.external.to_gfa(),
        frag.segment_begin.to_gfa(),
        frag.segment_end.to_gfa(),
        frag.fragment_begin.to_gfa(),
        frag.fragment_end.to_gfa(),
        frag.alignment.to_gfa(),
    )
    return "F\t" + "\t".join(fields) + format_all(frag.tags)


def _format_edge(edge: Edge[Any]) -> str:
    fields = (
        _optional_id(edge.id),
        edge.ref1.to_gfa(),
        edge.ref2.to_gfa(),
        edge.begin1.to_gfa(),
        edge.end1.to_gfa(),
        edge.begin2.to_gfa(),
        edge.end2.to_gfa(),
        edge.alignment.to_gfa(),
    )
    return "E\t" + "\t".join(fields) + format_all(edge.tags)


def _format_gap(gap: Gap[Any]) -> str:
    fields = (
        _optional_id(gap.id),
        gap.ref1.to_gfa(),
        gap.ref2.to_gfa(),
        gap.distance.to_gfa(),
        "*" if gap.variance is None else gap.variance.to_gfa(),
    )
    return "G\t" + "\t".join(fields) + format_all(gap.tags)


def _format_group_ordered(group: GroupOrdered[Any]) -> str:
    members = " ".join(ref.to_gfa() for ref in group.members)
    return f"O\t{_optional_id(group.id)}\t{members}{format_all(group.tags)}"


def _format_group_unordered(group: GroupUnordered[Any]) -> str:
    members = " ".join(str(member) for member in group.members)
    return f"U\t{_optional_id(group.id)}\t{members}{format_all(group.tags)}"


def _format_comment(comment: Comment) -> str:
    return f"# {comment.text}" if comment.spaced else "#"


def _format_custom(record: CustomRecord) -> str:
    return record.raw


_FORMATTERS: dict[type, Callable[[Any], str]] = {
    Header: _format_header,
    Segment: _format_segment,
    Fragment: _format_fragment,
    Edge: _format_edge,
    Gap: _format_gap,
    GroupOrdered: _format_group_ordered,
    GroupUnordered: _format_group_unordered,
    Comment: _format_comment,
    CustomRecord: _format_custom,
}


def format_record(record: Record) -> str:
    """One GFA2 line (no trailing newline)."""
    formatter = _FORMATTERS.get(type(record))
    if formatter is None:
        raise TypeError(f"not a GFA2 record: {type(record).__name__}")
    return formatter(record)


def format_document(
    document: Document[Any],
    *,
    preserve_line_order: bool = False,
) -> list[str]:
    """Lines for every record.

    Records are grouped by kind unless ``preserve_line_order`` is set, in
    which case the Document's ``line_order`` index is replayed.
    """
    records = document.iter_line_order() if preserve_line_order else document.iter_records()
    return [format_record(record) for record in records]


def document_to_text(
    document: Document[Any],
    *,
    preserve_line_order: bool = False,
) -> str:
    """Newline-joined document text, newline-terminated when non-empty."""
    lines = format_document(document, preserve_line_order=preserve_line_order)
    return "\n".join(lines) + "\n" if lines else ""
