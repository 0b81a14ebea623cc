"""GFA2 record variants and the Document aggregate.

Record kinds and their positional fields (tags trail every kind except
comments and custom records)::

    H  [VN:Z:<version>]
    S  id  length  sequence
    F  id  external:ref  seg_begin  seg_end  frag_begin  frag_end  alignment
    E  id|*  ref1  ref2  begin1  end1  begin2  end2  alignment
    G  id|*  ref1  ref2  distance  variance|*
    O  id|*  ref( ref)*
    U  id|*  id( id)*
    #  free text
    ?  anything else, kept verbatim as a CustomRecord

Records are generic over the identifier type: ``str`` as parsed from text,
``int`` after NameMap translation.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from gfa2codec.tags import OptionalField
from gfa2codec.types import Alignment, IntField, Position, Reference


HEADER = "H"
SEGMENT = "S"
FRAGMENT = "F"
EDGE = "E"
GAP = "G"
GROUP_ORDERED = "O"
GROUP_UNORDERED = "U"
COMMENT = "#"
CUSTOM = "custom"

RECORD_KINDS: tuple[str, ...] = (
    HEADER, SEGMENT, FRAGMENT, EDGE, GAP, GROUP_ORDERED, GROUP_UNORDERED, COMMENT,
)
# Output order when the original interleaving is not replayed.
KIND_ORDER: tuple[str, ...] = (*RECORD_KINDS, CUSTOM)


# ---------------------------------------------------------------------------
# Record variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Header:
    version: str | None = None
    tags: tuple[OptionalField, ...] = ()


@dataclass(frozen=True, slots=True)
class Segment[N]:
    id: N
    length: IntField
    sequence: str
    tags: tuple[OptionalField, ...] = ()

    @property
    def has_sequence(self) -> bool:
        return self.sequence != "*"


@dataclass(frozen=True, slots=True)
class Fragment[N]:
    """A piece of an external sequence contributing to segment ``id``."""

    id: N
    external: Reference[N]
    segment_begin: Position
    segment_end: Position
    fragment_begin: Position
    fragment_end: Position
    alignment: Alignment
    tags: tuple[OptionalField, ...] = ()


@dataclass(frozen=True, slots=True)
class Edge[N]:
    """Alignment between two oriented segments. ``id`` is None for ``*``."""

    id: N | None
    ref1: Reference[N]
    ref2: Reference[N]
    begin1: Position
    end1: Position
    begin2: Position
    end2: Position
    alignment: Alignment
    tags: tuple[OptionalField, ...] = ()


@dataclass(frozen=True, slots=True)
class Gap[N]:
    """Estimated distance between two oriented segments."""

    id: N | None
    ref1: Reference[N]
    ref2: Reference[N]
    distance: IntField
    variance: IntField | None = None
    tags: tuple[OptionalField, ...] = ()


@dataclass(frozen=True, slots=True)
class GroupOrdered[N]:
    id: N | None
    members: tuple[Reference[N], ...]
    tags: tuple[OptionalField, ...] = ()

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("ordered group must have at least one member")


@dataclass(frozen=True, slots=True)
class GroupUnordered[N]:
    id: N | None
    members: tuple[N, ...]
    tags: tuple[OptionalField, ...] = ()

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("unordered group must have at least one member")


@dataclass(frozen=True, slots=True)
class Comment:
    """Free text after ``# ``. ``spaced`` is False only for a bare ``#``."""

    text: str = ""
    spaced: bool = True

    def __post_init__(self) -> None:
        if self.text and not self.spaced:
            raise ValueError("comment text must follow '# '")


@dataclass(frozen=True, slots=True)
class CustomRecord:
    """A line with an unrecognized record code, kept byte for byte."""

    raw: str


type Record = (
    Header
    | Segment
    | Fragment
    | Edge
    | Gap
    | GroupOrdered
    | GroupUnordered
    | Comment
    | CustomRecord
)

_KIND_BY_TYPE: dict[type, str] = {
    Header: HEADER,
    Segment: SEGMENT,
    Fragment: FRAGMENT,
    Edge: EDGE,
    Gap: GAP,
    GroupOrdered: GROUP_ORDERED,
    GroupUnordered: GROUP_UNORDERED,
    Comment: COMMENT,
    CustomRecord: CUSTOM,
}

_COLLECTION_BY_KIND: dict[str, str] = {
    HEADER: "headers",
    SEGMENT: "segments",
    FRAGMENT: "fragments",
    EDGE: "edges",
    GAP: "gaps",
    GROUP_ORDERED: "groups_ordered",
    GROUP_UNORDERED: "groups_unordered",
    COMMENT: "comments",
    CUSTOM: "custom_records",
}


def record_kind(record: Record) -> str:
    """Kind code of a record (``"custom"`` for CustomRecord)."""
    try:
        return _KIND_BY_TYPE[type(record)]
    except KeyError:
        raise TypeError(f"not a GFA2 record: {type(record).__name__}") from None


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Document[N]:
    """Records grouped by kind, insertion order kept within each kind.

    ``line_order`` is a parallel index of ``(kind, intra-kind index)`` pairs
    in original line order; it is empty when records were added without it.
    """

    headers: list[Header] = field(default_factory=list[Header])
    segments: list[Segment[N]] = field(default_factory=list[Segment])
    fragments: list[Fragment[N]] = field(default_factory=list[Fragment])
    edges: list[Edge[N]] = field(default_factory=list[Edge])
    gaps: list[Gap[N]] = field(default_factory=list[Gap])
    groups_ordered: list[GroupOrdered[N]] = field(default_factory=list[GroupOrdered])
    groups_unordered: list[GroupUnordered[N]] = field(default_factory=list[GroupUnordered])
    comments: list[Comment] = field(default_factory=list[Comment])
    custom_records: list[CustomRecord] = field(default_factory=list[CustomRecord])
    line_order: list[tuple[str, int]] = field(default_factory=list[tuple[str, int]])

    def append(self, record: Record, *, track_order: bool = True) -> None:
        """Append ``record`` to the collection for its kind."""
        kind = record_kind(record)
        bucket: list[Record] = getattr(self, _COLLECTION_BY_KIND[kind])
        if track_order:
            self.line_order.append((kind, len(bucket)))
        bucket.append(record)

    def records(self, kind: str) -> list[Record]:
        """The live list holding records of ``kind``."""
        try:
            return getattr(self, _COLLECTION_BY_KIND[kind])
        except KeyError:
            raise ValueError(f"unknown record kind {kind!r}") from None

    def iter_records(self) -> Iterator[Record]:
        """All records, grouped by kind in ``KIND_ORDER``."""
        for kind in KIND_ORDER:
            yield from self.records(kind)

    def iter_line_order(self) -> Iterator[Record]:
        """Records in original line order where ``line_order`` covers them.

        Records not covered by the index follow in ``KIND_ORDER``.
        """
        seen: set[tuple[str, int]] = set()
        for kind, index in self.line_order:
            bucket = self.records(kind)
            if index < len(bucket) and (kind, index) not in seen:
                seen.add((kind, index))
                yield bucket[index]
        for kind in KIND_ORDER:
            for index, record in enumerate(self.records(kind)):
                if (kind, index) not in seen:
                    yield record

    def record_counts(self) -> dict[str, int]:
        return {kind: len(self.records(kind)) for kind in KIND_ORDER}

    def __len__(self) -> int:
        return sum(len(self.records(kind)) for kind in KIND_ORDER)
