"""Identifier interning: a bijection between GFA2 names and dense indices.

A NameMap is built once from a text-form Document. Indices are assigned in
order of first appearance over two passes, so that segment-space names
(the ones a graph needs as node ids) occupy the lowest indices:

    pass 1  segment ids, fragment segment ids, edge and gap references
    pass 2  fragment external names, edge ids, gap ids,
            ordered-group ids and members, unordered-group ids and members

Each pass walks kinds in the fixed order S, F, E, G, O, U. ``*`` ids (None)
are never interned.

The map carries a 64-bit content hash of the Document it was built from;
``translate_to_indices(doc, check_hash=True)`` refuses to apply it to any
other content. Translation is all-or-nothing: a lookup miss raises
``TranslationMiss`` and no partial Document is returned.

Usage::

    name_map = NameMap.build(doc)
    indexed = name_map.translate_to_indices(doc)
    name_map.save_json(path)
    restored = NameMap.load_json(path).translate_to_identifiers(indexed)
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gfa2codec.errors import HashMismatch, TranslationMiss
from gfa2codec.io_utils import load_json, save_json
from gfa2codec.records import (
    EDGE,
    FRAGMENT,
    GAP,
    GROUP_ORDERED,
    GROUP_UNORDERED,
    SEGMENT,
    Document,
    Edge,
    Fragment,
    Gap,
    GroupOrdered,
    GroupUnordered,
    Segment,
)
from gfa2codec.types import Reference


_HASH_MAX = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Content hash
# ---------------------------------------------------------------------------

def _opt(value: Any) -> str:
    return "*" if value is None else str(value)


def _structural_fields(document: Document[Any]) -> Iterator[str]:
    """Every identifier and structural field, in a fixed order.

    Headers, comments, custom records and optional fields are excluded.
    """
    for seg in document.segments:
        yield from (SEGMENT, str(seg.id), seg.length.to_gfa(), seg.sequence)
    for frag in document.fragments:
        yield from (
            FRAGMENT,
            str(frag.id),
            frag.external.to_gfa(),
            frag.segment_begin.to_gfa(),
            frag.segment_end.to_gfa(),
            frag.fragment_begin.to_gfa(),
            frag.fragment_end.to_gfa(),
            frag.alignment.to_gfa(),
        )
    for edge in document.edges:
        yield from (
            EDGE,
            _opt(edge.id),
            edge.ref1.to_gfa(),
            edge.ref2.to_gfa(),
            edge.begin1.to_gfa(),
            edge.end1.to_gfa(),
            edge.begin2.to_gfa(),
            edge.end2.to_gfa(),
            edge.alignment.to_gfa(),
        )
    for gap in document.gaps:
        yield from (
            GAP,
            _opt(gap.id),
            gap.ref1.to_gfa(),
            gap.ref2.to_gfa(),
            gap.distance.to_gfa(),
            "*" if gap.variance is None else gap.variance.to_gfa(),
        )
    for ogroup in document.groups_ordered:
        yield from (GROUP_ORDERED, _opt(ogroup.id), str(len(ogroup.members)))
        yield from (ref.to_gfa() for ref in ogroup.members)
    for ugroup in document.groups_unordered:
        yield from (GROUP_UNORDERED, _opt(ugroup.id), str(len(ugroup.members)))
        yield from (str(member) for member in ugroup.members)


def compute_content_hash(document: Document[Any]) -> int:
    """Unsigned 64-bit digest of the Document's interning-relevant content.

    SHA-256 over NUL-delimited fields, truncated to the first 8 bytes.
    """
    hasher = hashlib.sha256()
    for value in _structural_fields(document):
        hasher.update(value.encode())
        hasher.update(b"\x00")
    return int.from_bytes(hasher.digest()[:8], "big")


# ---------------------------------------------------------------------------
# Name walk
# ---------------------------------------------------------------------------

def _segment_space_names(document: Document[str]) -> Iterator[str]:
    for seg in document.segments:
        yield seg.id
    for frag in document.fragments:
        yield frag.id
    for edge in document.edges:
        yield edge.ref1.name
        yield edge.ref2.name
    for gap in document.gaps:
        yield gap.ref1.name
        yield gap.ref2.name


def _other_names(document: Document[str]) -> Iterator[str | None]:
    for frag in document.fragments:
        yield frag.external.name
    for edge in document.edges:
        yield edge.id
    for gap in document.gaps:
        yield gap.id
    for ogroup in document.groups_ordered:
        yield ogroup.id
        yield from (ref.name for ref in ogroup.members)
    for ugroup in document.groups_unordered:
        yield ugroup.id
        yield from ugroup.members


# ---------------------------------------------------------------------------
# Record translation
# ---------------------------------------------------------------------------

def _translate_document(
    document: Document[Any],
    lookup: Callable[[Any, str, int], Any],
) -> Document[Any]:
    """Copy ``document`` with every identifier replaced through ``lookup``.

    ``lookup(key, kind, index)`` must raise TranslationMiss on a miss.
    """

    def ref(value: Reference[Any], kind: str, index: int) -> Reference[Any]:
        return Reference(lookup(value.name, kind, index), value.orientation)

    def opt(value: Any, kind: str, index: int) -> Any:
        return None if value is None else lookup(value, kind, index)

    segments = [
        Segment(lookup(seg.id, SEGMENT, i), seg.length, seg.sequence, seg.tags)
        for i, seg in enumerate(document.segments)
    ]
    fragments = [
        Fragment(
            lookup(frag.id, FRAGMENT, i),
            ref(frag.external, FRAGMENT, i),
            frag.segment_begin,
            frag.segment_end,
            frag.fragment_begin,
            frag.fragment_end,
            frag.alignment,
            frag.tags,
        )
        for i, frag in enumerate(document.fragments)
    ]
    edges = [
        Edge(
            opt(edge.id, EDGE, i),
            ref(edge.ref1, EDGE, i),
            ref(edge.ref2, EDGE, i),
            edge.begin1,
            edge.end1,
            edge.begin2,
            edge.end2,
            edge.alignment,
            edge.tags,
        )
        for i, edge in enumerate(document.edges)
    ]
    gaps = [
        Gap(
            opt(gap.id, GAP, i),
            ref(gap.ref1, GAP, i),
            ref(gap.ref2, GAP, i),
            gap.distance,
            gap.variance,
            gap.tags,
        )
        for i, gap in enumerate(document.gaps)
    ]
    groups_ordered = [
        GroupOrdered(
            opt(group.id, GROUP_ORDERED, i),
            tuple(ref(member, GROUP_ORDERED, i) for member in group.members),
            group.tags,
        )
        for i, group in enumerate(document.groups_ordered)
    ]
    groups_unordered = [
        GroupUnordered(
            opt(group.id, GROUP_UNORDERED, i),
            tuple(lookup(member, GROUP_UNORDERED, i) for member in group.members),
            group.tags,
        )
        for i, group in enumerate(document.groups_unordered)
    ]
    return Document(
        headers=list(document.headers),
        segments=segments,
        fragments=fragments,
        edges=edges,
        gaps=gaps,
        groups_ordered=groups_ordered,
        groups_unordered=groups_unordered,
        comments=list(document.comments),
        custom_records=list(document.custom_records),
        line_order=list(document.line_order),
    )


# ---------------------------------------------------------------------------
# NameMap
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class NameMap:
    """Bijection name <-> dense index, bound to one Document by hash.

    Invariant: ``inverse[forward[name]] == name`` and the indices are
    exactly ``0..len(inverse) - 1``.
    """

    forward: dict[str, int] = field(default_factory=dict[str, int])
    inverse: list[str] = field(default_factory=list[str])
    content_hash: int = 0

    @classmethod
    def build(cls, document: Document[str]) -> NameMap:
        """Intern every identifier of a text-form Document."""
        name_map = cls(content_hash=compute_content_hash(document))
        for name in _segment_space_names(document):
            name_map._intern(name)
        for name in _other_names(document):
            if name is not None:
                name_map._intern(name)
        return name_map

    def _intern(self, name: str) -> int:
        if not isinstance(name, str):
            raise TypeError(
                f"can only intern text identifiers, got {type(name).__name__} {name!r}",
            )
        index = self.forward.get(name)
        if index is None:
            index = len(self.inverse)
            self.forward[name] = index
            self.inverse.append(name)
        return index

    # -- lookups ----------------------------------------------------------

    def map_name(self, name: str) -> int | None:
        return self.forward.get(name)

    def inverse_map_name(self, index: int) -> str | None:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self.inverse):
            return self.inverse[index]
        return None

    def __len__(self) -> int:
        return len(self.inverse)

    def __contains__(self, name: object) -> bool:
        return name in self.forward

    # -- translation ------------------------------------------------------

    def translate_to_indices(
        self,
        document: Document[str],
        *,
        check_hash: bool = True,
    ) -> Document[int]:
        """New Document with every identifier replaced by its index.

        Raises HashMismatch when ``check_hash`` is set and the Document is
        not the one this map was built from; raises TranslationMiss on the
        first identifier absent from the map.
        """
        if check_hash:
            actual = compute_content_hash(document)
            if actual != self.content_hash:
                raise HashMismatch(self.content_hash, actual)

        def lookup(name: Any, kind: str, index: int) -> int:
            mapped = self.forward.get(name) if isinstance(name, str) else None
            if mapped is None:
                raise TranslationMiss(name, kind, index)
            return mapped

        return _translate_document(document, lookup)

    def translate_to_identifiers(self, document: Document[int]) -> Document[str]:
        """Inverse of ``translate_to_indices``.

        Raises TranslationMiss on the first index outside the map.
        """

        def lookup(index: Any, kind: str, record_index: int) -> str:
            name = self.inverse_map_name(index)
            if name is None:
                raise TranslationMiss(index, kind, record_index)
            return name

        return _translate_document(document, lookup)

    # -- persistence ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Self-describing JSON-safe payload."""
        return {
            "forward": dict(self.forward),
            "inverse": list(self.inverse),
            "hash": self.content_hash,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> NameMap:
        """Rebuild a map, rejecting payloads that are not a dense bijection."""
        forward = payload.get("forward")
        inverse = payload.get("inverse")
        content_hash = payload.get("hash")
        if not isinstance(forward, dict) or not isinstance(inverse, list):
            raise ValueError("name map payload needs a 'forward' object and 'inverse' list")
        if (
            isinstance(content_hash, bool)
            or not isinstance(content_hash, int)
            or not 0 <= content_hash <= _HASH_MAX
        ):
            raise ValueError(f"name map hash must be an unsigned 64-bit int, got {content_hash!r}")
        if len(forward) != len(inverse):
            raise ValueError(
                f"name map is not a bijection: {len(forward)} names, {len(inverse)} indices",
            )
        for index, name in enumerate(inverse):
            if not isinstance(name, str):
                raise ValueError(f"inverse[{index}] must be a string, got {name!r}")
            if forward.get(name) != index:
                raise ValueError(
                    f"name map is not a bijection: inverse[{index}] = {name!r} "
                    f"but forward[{name!r}] = {forward.get(name)!r}",
                )
        return cls(
            forward={str(k): int(v) for k, v in forward.items()},
            inverse=list(inverse),
            content_hash=content_hash,
        )

    def save_json(self, path: Path) -> None:
        save_json(self.to_dict(), path, pretty=False)

    @classmethod
    def load_json(cls, path: Path) -> NameMap:
        payload = load_json(path)
        if not isinstance(payload, dict):
            raise ValueError(f"Invalid name map payload in {path}")
        return cls.from_dict(payload)
